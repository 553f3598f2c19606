"""
Document fetching and best-effort text recovery.

`TextRecovery.recover` never raises: unreachable or unreadable documents
degrade to pseudo text built from the document's file name.
"""
from pathlib import Path
from typing import Callable, Dict, Optional, Union
from urllib.parse import unquote, urlparse

import requests

from resume_matcher.helpers.parsing import (
    clean_text, pseudo_text_from_locator, read_docx, read_pdf, scan_literal_strings,
)
from resume_matcher.models.models import RecoveredDocument
from resume_matcher.models.settings import RecoverySettings
from resume_matcher.utils.exceptions import DocumentFetchError, ExtractionError, ValidationError
from resume_matcher.utils.logging_config import get_logger

logger = get_logger(__name__)

Source = Union[str, bytes, bytearray]

FALLBACK_STRATEGY = "filename_fallback"


class DocumentFetcher:
    """Fetch raw document bytes from an http(s) URL, a file:// URL or a local path."""

    def __init__(self, timeout: float = 30.0, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch(self, locator: str) -> bytes:
        scheme = urlparse(locator).scheme.lower()
        if scheme in ("http", "https"):
            try:
                resp = self.session.get(locator, timeout=self.timeout)
                resp.raise_for_status()
            except requests.HTTPError as e:
                status = e.response.status_code if e.response is not None else None
                raise DocumentFetchError(f"Document request failed: {e}", locator=locator, status_code=status, cause=e) from e
            except requests.RequestException as e:
                raise DocumentFetchError(f"Document request failed: {e}", locator=locator, cause=e) from e
            return resp.content

        path = Path(unquote(urlparse(locator).path)) if scheme == "file" else Path(locator)
        try:
            return path.read_bytes()
        except OSError as e:
            raise DocumentFetchError(f"Could not read document: {e}", locator=locator, cause=e) from e


def check_locator(locator: str, settings: RecoverySettings) -> None:
    """
    Reject a caller-supplied locator the fetcher must not follow.

    http(s) locators must name a host from `allowed_hosts` when that list is
    set. Local paths and file:// URLs are accepted only when they resolve
    inside `document_root`; with no root configured they are rejected.
    """
    parsed = urlparse(locator)
    scheme = parsed.scheme.lower()

    if scheme in ("http", "https"):
        host = (parsed.hostname or "").lower()
        if settings.allowed_hosts and host not in settings.allowed_hosts:
            raise ValidationError(f"Document host '{host}' is not allowed", field="locator", value=locator)
        return

    if scheme not in ("", "file"):
        raise ValidationError(f"Unsupported document scheme '{scheme}'", field="locator", value=locator)
    if not settings.document_root:
        raise ValidationError("Local document paths are not accepted", field="locator", value=locator)

    root = Path(settings.document_root).resolve()
    # resolve() collapses ".." and symlinks
    path = Path(unquote(parsed.path) if scheme == "file" else locator).resolve()
    if path != root and root not in path.parents:
        raise ValidationError("Document path is outside the document root", field="locator", value=locator)


def _binary_scan(data: bytes) -> str:
    return scan_literal_strings(data)


def _pdfminer(data: bytes) -> str:
    if not data.startswith(b"%PDF"):
        raise ExtractionError("Not a PDF document", strategy="pdfminer")
    return clean_text(read_pdf(data))


def _docx(data: bytes) -> str:
    if not data.startswith(b"PK"):
        raise ExtractionError("Not a DOCX document", strategy="docx")
    return clean_text(read_docx(data))


STRATEGIES: Dict[str, Callable[[bytes], str]] = {
    "pdfminer": _pdfminer,
    "docx": _docx,
    "binary_scan": _binary_scan,
}


class TextRecovery:
    """
    Recover plain text from a document locator or raw bytes.

    Strategies from the settings are tried in order; the first one that
    produces more than `min_text_length` characters wins. The default chain
    is the binary scan alone, a low-confidence heuristic: it can accept
    garbage that happens to look like text and can reject genuinely short
    documents.
    """

    def __init__(self, settings: Optional[RecoverySettings] = None, fetcher: Optional[DocumentFetcher] = None):
        self.settings = settings or RecoverySettings()
        self.fetcher = fetcher or DocumentFetcher(timeout=self.settings.fetch_timeout)

    def recover(self, source: Source) -> str:
        return self.recover_document(source).text

    def recover_document(self, source: Source, name: str = "") -> RecoveredDocument:
        locator = name
        if isinstance(source, (bytes, bytearray)):
            data = bytes(source)
        else:
            locator = locator or source
            try:
                data = self.fetcher.fetch(source)
            except Exception as e:
                logger.warning(f"Document fetch failed for {source}, using filename fallback: {e}")
                return self._fallback(locator)

        for strategy in self.settings.strategies:
            try:
                text = STRATEGIES[strategy](data)
            except Exception as e:
                logger.debug(f"Strategy {strategy} failed for {locator or '<bytes>'}: {e}")
                continue
            if len(text) > self.settings.min_text_length:
                logger.debug(f"Recovered {len(text)} characters from {locator or '<bytes>'} using {strategy}")
                return RecoveredDocument(text=text, strategy=strategy)

        logger.info(f"No strategy recovered enough text from {locator or '<bytes>'}, using filename fallback")
        return self._fallback(locator)

    def _fallback(self, locator: str) -> RecoveredDocument:
        return RecoveredDocument(
            text=pseudo_text_from_locator(locator),
            strategy=FALLBACK_STRATEGY,
            low_confidence=True,
        )


def recover(source: Source, settings: Optional[RecoverySettings] = None) -> str:
    return TextRecovery(settings).recover(source)
