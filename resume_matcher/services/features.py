"""
Feature extraction: skills, years of experience, education terms and keywords.

Every function here is a pure function of its input text (plus the calendar
year for open-ended date ranges), so resume and job features can be derived
independently and in parallel.
"""
import re
from datetime import datetime
from typing import List, Optional

from resume_matcher.helpers.sections import segment_resume
from resume_matcher.helpers.vocabulary import (
    EDUCATION_KEYWORDS, SKILL_CATEGORIES, SKILL_PHRASE_PATTERNS, STOP_WORDS,
)
from resume_matcher.models.models import JobFeatures, ResumeFeatures

MAX_SKILLS = 30
MAX_KEYWORDS = 100
MAX_EXPERIENCE_YEARS = 50
EARLIEST_START_YEAR = 1990

SKILL_REGEXES = [
    (skill, re.compile(rf"(?<!\w){re.escape(skill)}(?!\w)", re.IGNORECASE))
    for skills in SKILL_CATEGORIES.values()
    for skill in skills
]
PHRASE_REGEXES = [re.compile(p, re.IGNORECASE) for p in SKILL_PHRASE_PATTERNS]

EXPERIENCE_REGEXES = [
    re.compile(r"(\d+)\+?\s*years?\s*(?:of\s*)?experience", re.IGNORECASE),
    re.compile(r"(\d+)\+?\s*years?\s*in\b", re.IGNORECASE),
    re.compile(r"experience\s*:?\s*(\d+)\+?\s*years?", re.IGNORECASE),
    # bare "N years" mention, e.g. "Requires 5 years"
    re.compile(r"(\d+)\+?\s*years?\b", re.IGNORECASE),
]
DATE_RANGE_REGEX = re.compile(r"(\d{4})\s*[-–]\s*(\d{4}|present|current)", re.IGNORECASE)


def dedupe(items: List[str]) -> List[str]:
    """Case-insensitive de-duplication keeping first-seen order and casing."""
    seen = set()
    out = []
    for item in items:
        key = item.lower()
        if key not in seen:
            seen.add(key)
            out.append(item)
    return out


def extract_skills(text: str) -> List[str]:
    found = [skill for skill, regex in SKILL_REGEXES if regex.search(text)]

    for regex in PHRASE_REGEXES:
        for match in regex.finditer(text):
            parts = [p.strip() for p in re.split(r"[,&]", match.group(1))]
            found.extend(p for p in parts if len(p) > 2)

    return dedupe(found)[:MAX_SKILLS]


def extract_experience(text: str, current_year: Optional[int] = None) -> int:
    current_year = current_year or datetime.now().year
    candidates = []

    for regex in EXPERIENCE_REGEXES:
        for match in regex.finditer(text):
            years = int(match.group(1))
            if years <= MAX_EXPERIENCE_YEARS:
                candidates.append(years)

    for match in DATE_RANGE_REGEX.finditer(text):
        start = int(match.group(1))
        end_token = match.group(2).lower()
        end = current_year if end_token in ("present", "current") else int(end_token)
        end = min(end, current_year)
        if EARLIEST_START_YEAR < start <= end:
            candidates.append(end - start)

    return min(max(candidates), MAX_EXPERIENCE_YEARS) if candidates else 0


def extract_education(text: str) -> List[str]:
    lowered = text.lower()
    return dedupe([k for k in EDUCATION_KEYWORDS if k in lowered])


def extract_keywords(text: str) -> List[str]:
    words = re.sub(r"[^\w\s]", " ", text.lower()).split()
    return [w for w in words if len(w) > 2 and w not in STOP_WORDS][:MAX_KEYWORDS]


def parse_resume(text: str, current_year: Optional[int] = None) -> ResumeFeatures:
    return ResumeFeatures(
        skills=extract_skills(text),
        experience_years=extract_experience(text, current_year),
        education=extract_education(text),
        sections=segment_resume(text),
        raw_text=text,
    )


def extract_job_features(text: str, current_year: Optional[int] = None) -> JobFeatures:
    # job descriptions are not segmented
    return JobFeatures(
        skills=extract_skills(text),
        experience_years=extract_experience(text, current_year),
        education=extract_education(text),
    )
