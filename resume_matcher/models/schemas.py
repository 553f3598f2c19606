from pydantic import BaseModel, Field
from typing import List, Optional

# -------- Collaborator inputs --------
class JobInput(BaseModel):
    job_id: str
    title: str = ""
    company: str = ""
    location: str = ""
    description: str = ""
    required_skills: List[str] = []
    job_description_url: Optional[str] = None   # attached job description document

class ApplicationInput(BaseModel):
    application_id: str
    resume_url: Optional[str] = None

# -------- Request bodies --------
class MatchingRunRequest(BaseModel):
    job: JobInput
    applications: List[ApplicationInput] = []

class ScoreRequest(BaseModel):
    job_text: str
    resume_text: str
    required_skills: List[str] = []
    application_id: str = "adhoc"

class RecoverRequest(BaseModel):
    locator: str = Field(..., min_length=1, description="URL or path of the document")
