# models/response.py
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime, timezone

from resume_matcher.models.models import MatchResult


class MatchingRun(BaseModel):
    job_id: str
    results: List[MatchResult]
    job_text_low_confidence: bool = False
    scored_count: int = 0
    no_resume_count: int = 0
    failed_count: int = 0
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ReportPaths(BaseModel):
    csv_path: str
    md_path: str


class MatchingRunResponse(MatchingRun):
    report: Optional[ReportPaths] = None
