import math
from typing import Dict, List, Optional, Tuple

from resume_matcher.helpers.vocabulary import SECTION_WEIGHTS
from resume_matcher.models.models import MatchBreakdown, MatchDetails, MatchResult
from resume_matcher.services.features import (
    extract_job_features, extract_keywords, parse_resume,
)
from resume_matcher.services.similarity import fuzzy_match, keyword_similarity
from resume_matcher.utils.logging_config import get_logger

logger = get_logger(__name__)

WEIGHTS = {
    "skills": 0.35,
    "experience": 0.25,
    "education": 0.15,
    "keyword": 0.15,
    "section": 0.10,
}

MAX_MISSING_SKILLS_LISTED = 3
MIN_SKILL_COUNT = 5


def round_score(value: float) -> float:
    """Round to 2 decimals with halves going up (0.125 -> 0.13), not to even."""
    return math.floor(value * 100 + 0.5) / 100


def effective_required_skills(required_skills: List[str], job_skills: List[str]) -> List[str]:
    out = []
    for s in list(required_skills) + list(job_skills):
        s = s.lower().strip()
        if s and s not in out:
            out.append(s)
    return out


def skills_score(resume_skills: List[str], required: List[str]) -> Tuple[float, List[str]]:
    matched = [
        skill for skill in resume_skills
        if any(fuzzy_match(skill.lower(), req) for req in required)
    ]
    if not required:
        # consolation for listing skills at all, not a real match
        return (40.0 if resume_skills else 0.0), matched
    return min(len(matched) / len(required) * 100, 100.0), matched


def experience_score(resume_years: int, job_years: int) -> float:
    if job_years <= 0:
        return 50.0
    if resume_years >= job_years:
        return 100.0
    if resume_years >= job_years * 0.7:
        return 80.0
    if resume_years > 0:
        return resume_years / job_years * 70
    return 20.0


def education_score(resume_education: List[str], job_education: List[str]) -> float:
    if not job_education:
        return 70.0
    job_terms = [j.lower() for j in job_education]
    matches = [
        ed for ed in resume_education
        if any(ed.lower() in j or j in ed.lower() for j in job_terms)
    ]
    if not matches:
        return 30.0
    return min(len(matches) / len(job_terms) * 100, 100.0)


def section_score(sections: Dict[str, str]) -> float:
    return float(sum(w for name, w in SECTION_WEIGHTS.items() if len(sections.get(name, "")) > 20))


def generate_suggestions(
    required: List[str], matched: List[str], resume_skills: List[str],
    required_years: int, resume_years: int
) -> List[str]:
    suggestions = []

    missing = [
        skill for skill in required
        if not any(skill in m.lower() for m in matched)
    ][:MAX_MISSING_SKILLS_LISTED]
    if missing:
        suggestions.append(f"Consider highlighting these skills: {', '.join(missing)}")

    if required_years > resume_years:
        suggestions.append(f"Job requires {required_years} years experience, emphasize relevant projects")

    if len(resume_skills) < MIN_SKILL_COUNT:
        suggestions.append("Add more technical skills to your resume")

    return suggestions


class MatchScorer:
    """Weighted multi-factor comparison of one resume against one job description."""

    weights = WEIGHTS

    def __init__(self, current_year: Optional[int] = None):
        self.current_year = current_year

    def score(
        self,
        job_text: str,
        resume_text: str,
        required_skills: Optional[List[str]] = None,
        application_id: str = "",
        low_confidence: bool = False,
    ) -> MatchResult:
        resume = parse_resume(resume_text, self.current_year)
        job = extract_job_features(job_text, self.current_year)
        required = effective_required_skills(required_skills or [], job.skills)

        skills, matched = skills_score(resume.skills, required)
        scores = {
            "skills": skills,
            "experience": experience_score(resume.experience_years, job.experience_years),
            "education": education_score(resume.education, job.education),
            "keyword": keyword_similarity(extract_keywords(job_text), extract_keywords(resume_text)),
            "section": section_score(resume.sections),
        }
        overall = sum(scores[k] * w for k, w in self.weights.items())

        logger.debug(
            f"Scored application {application_id or '<adhoc>'}: "
            + ", ".join(f"{k}={v:.2f}" for k, v in scores.items())
            + f", overall={overall:.2f}"
        )

        breakdown = MatchBreakdown(
            **{k: round_score(v) for k, v in scores.items()},
            overall=round_score(overall),
        )
        details = MatchDetails(
            extracted_skills=resume.skills,
            experience_years=resume.experience_years,
            education=resume.education,
            matched_skills=matched,
            suggestions=generate_suggestions(
                required, matched, resume.skills, job.experience_years, resume.experience_years
            ),
        )
        return MatchResult(
            application_id=application_id,
            score=breakdown.overall,
            breakdown=breakdown,
            details=details,
            low_confidence=low_confidence,
        )


def calculate_match_score(job_text: str, resume_text: str, required_skills: Optional[List[str]] = None) -> MatchResult:
    return MatchScorer().score(job_text, resume_text, required_skills or [])
