"""
Matching Engine Settings
"""
import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from resume_matcher.utils.exceptions import ConfigurationError

# Fixed scores for applications that could not be scored normally
NO_RESUME_SCORE = 10.0
PROCESSING_FAILURE_SCORE = 5.0

RECOVERY_STRATEGIES = ("pdfminer", "docx", "binary_scan")


class RecoverySettings(BaseModel):
    """Document text recovery configuration"""
    fetch_timeout: float = Field(default=30.0, gt=0, description="Document fetch timeout in seconds")
    strategies: List[str] = Field(default_factory=lambda: ["binary_scan"], description="Extraction strategies, tried in order")
    min_text_length: int = Field(default=50, ge=0, description="Recovered text must be longer than this to be accepted")
    # locators arriving over HTTP are checked against these two before any fetch
    document_root: Optional[str] = Field(default=None, description="Local paths must resolve inside this directory; unset rejects local paths")
    allowed_hosts: List[str] = Field(default_factory=list, description="Hosts http(s) locators may use; empty allows any host")

    @field_validator("strategies")
    @classmethod
    def validate_strategies(cls, v):
        unknown = [s for s in v if s not in RECOVERY_STRATEGIES]
        if unknown:
            raise ValueError(f"Unknown recovery strategies: {', '.join(unknown)}")
        return v

    @field_validator("allowed_hosts")
    @classmethod
    def normalize_hosts(cls, v):
        return [h.strip().lower() for h in v if h.strip()]


class OrchestratorSettings(BaseModel):
    """Scores assigned when an application cannot be scored normally"""
    no_resume_score: float = Field(default=NO_RESUME_SCORE, ge=0.0, le=100.0)
    failure_score: float = Field(default=PROCESSING_FAILURE_SCORE, ge=0.0, le=100.0)


class MatchingSettings(BaseModel):
    recovery: RecoverySettings = Field(default_factory=RecoverySettings)
    orchestrator: OrchestratorSettings = Field(default_factory=OrchestratorSettings)
    report_dir: str = "./reports"


def _split(value: str) -> List[str]:
    return [p.strip().lower() for p in value.split(",") if p.strip()]


def load_settings() -> MatchingSettings:
    """Build settings from the environment (and a .env file when present)."""
    load_dotenv()
    env = os.environ
    try:
        recovery = RecoverySettings(
            fetch_timeout=float(env.get("MATCHER_FETCH_TIMEOUT", "30")),
            strategies=_split(env.get("MATCHER_RECOVERY_STRATEGIES", "binary_scan")),
            min_text_length=int(env.get("MATCHER_MIN_TEXT_LENGTH", "50")),
            document_root=env.get("MATCHER_DOCUMENT_ROOT") or None,
            allowed_hosts=_split(env.get("MATCHER_ALLOWED_HOSTS", "")),
        )
        orchestrator = OrchestratorSettings(
            no_resume_score=float(env.get("MATCHER_NO_RESUME_SCORE", str(NO_RESUME_SCORE))),
            failure_score=float(env.get("MATCHER_FAILURE_SCORE", str(PROCESSING_FAILURE_SCORE))),
        )
    except ValueError as e:
        # pydantic's ValidationError is a ValueError too
        raise ConfigurationError(f"Invalid matcher configuration: {e}", cause=e) from e
    return MatchingSettings(
        recovery=recovery,
        orchestrator=orchestrator,
        report_dir=env.get("MATCHER_REPORT_DIR", "./reports"),
    )
