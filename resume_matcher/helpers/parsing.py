import io
import re
from pathlib import PurePosixPath
from urllib.parse import unquote, urlparse

from docx import Document
from pdfminer.high_level import extract_text as pdf_extract

from resume_matcher.helpers.vocabulary import FALLBACK_VOCABULARY

MAX_RUN_LENGTH = 200
MIN_RUN_LENGTH = 4


def scan_literal_strings(data: bytes, max_run: int = MAX_RUN_LENGTH) -> str:
    """
    Best-effort text recovery: collect printable ASCII found between `(` and `)`.

    Literal string operands in PDF content streams look like `(Hello) Tj`, so
    this recovers readable text from uncompressed documents. Runs are capped
    at `max_run` bytes and runs of 3 characters or less are discarded.
    """
    runs = []
    start = data.find(b"(")
    while start != -1 and start < len(data) - 4:
        window = data[start + 1:start + max_run]
        close = window.find(b")")
        if close != -1:
            window = window[:close]
        text = "".join(chr(b) for b in window if 32 <= b <= 126)
        if len(text) >= MIN_RUN_LENGTH:
            runs.append(text)
        start = data.find(b"(", start + 1)
    return " ".join(runs)


def read_pdf(data: bytes) -> str:
    return pdf_extract(io.BytesIO(data))


def read_docx(data: bytes) -> str:
    doc = Document(io.BytesIO(data))
    return "\n".join([p.text for p in doc.paragraphs])


def clean_text(x: str) -> str:
    x = re.sub(r'[ \t\r\f\v]+', ' ', x)
    x = re.sub(r'\n\s*\n+', '\n', x)
    return x.strip()


def locator_filename(locator: str) -> str:
    """Last path component of a URL or filesystem path, query string ignored."""
    path = urlparse(locator).path if "://" in locator else locator
    return PurePosixPath(unquote(path).replace("\\", "/")).name


def pseudo_text_from_locator(locator: str = "") -> str:
    """Bag-of-words stand-in built from a file name plus generic resume vocabulary."""
    name = locator_filename(locator or "")
    stem = re.sub(r"\.[A-Za-z0-9]{1,5}$", "", name)
    stem = re.sub(r"[_\-.]+", " ", stem)
    stem = re.sub(r"\d+", "", stem)
    stem = re.sub(r"\s+", " ", stem).strip()
    return f"{stem} {FALLBACK_VOCABULARY}".strip()
