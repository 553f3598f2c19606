from typing import Dict, List

from resume_matcher.helpers.vocabulary import SECTION_BOUNDARY_HEADERS, SECTION_KEYWORDS

MAX_HEADER_LENGTH = 50


def _is_header(line: str, keywords: List[str]) -> bool:
    return len(line) < MAX_HEADER_LENGTH and any(k in line for k in keywords)


def is_likely_new_section(line: str) -> bool:
    """True when a trimmed, lower-cased line looks like any canonical section header."""
    return _is_header(line, SECTION_BOUNDARY_HEADERS)


def extract_section(text: str, keywords: List[str]) -> str:
    """
    Return the body of the first section whose header contains one of `keywords`.

    A header is a short line (under 50 characters) containing a keyword. The
    body ends at the next line that looks like any canonical header, including
    a repeat of the open section's own header.
    """
    collected = []
    in_section = False
    for raw in text.split("\n"):
        line = raw.strip().lower()
        if in_section:
            if is_likely_new_section(line):
                break
            collected.append(raw)
        elif _is_header(line, keywords):
            in_section = True
    return "\n".join(collected).strip()


def segment_resume(text: str) -> Dict[str, str]:
    return {name: extract_section(text, keywords) for name, keywords in SECTION_KEYWORDS.items()}
