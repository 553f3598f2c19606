from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, Literal, Tuple

SECTION_NAMES = ("contact", "summary", "experience", "education", "skills")


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class RecoveredDocument(FrozenModel):
    text: str
    strategy: str
    low_confidence: bool = False


class ResumeFeatures(FrozenModel):
    skills: Tuple[str, ...] = ()
    experience_years: int = Field(default=0, ge=0, le=50)
    education: Tuple[str, ...] = ()
    sections: Dict[str, str] = Field(default_factory=lambda: {name: "" for name in SECTION_NAMES})
    raw_text: str = ""


class JobFeatures(FrozenModel):
    skills: Tuple[str, ...] = ()
    experience_years: int = Field(default=0, ge=0, le=50)
    education: Tuple[str, ...] = ()


class MatchBreakdown(FrozenModel):
    skills: float = Field(default=0.0, ge=0.0, le=100.0)
    experience: float = Field(default=0.0, ge=0.0, le=100.0)
    education: float = Field(default=0.0, ge=0.0, le=100.0)
    keyword: float = Field(default=0.0, ge=0.0, le=100.0)
    section: float = Field(default=0.0, ge=0.0, le=100.0)
    overall: float = Field(default=0.0, ge=0.0, le=100.0)


class MatchDetails(FrozenModel):
    extracted_skills: Tuple[str, ...] = ()
    experience_years: int = 0
    education: Tuple[str, ...] = ()
    matched_skills: Tuple[str, ...] = ()
    suggestions: Tuple[str, ...] = ()


class MatchResult(FrozenModel):
    application_id: str
    score: float
    breakdown: MatchBreakdown = Field(default_factory=MatchBreakdown)
    details: MatchDetails = Field(default_factory=MatchDetails)
    status: Literal["scored", "no_resume", "failed"] = "scored"
    low_confidence: bool = False
