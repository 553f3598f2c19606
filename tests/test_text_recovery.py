import io
from unittest.mock import MagicMock, patch

import pytest
import requests
from docx import Document
from pydantic import ValidationError

from resume_matcher.helpers.parsing import locator_filename, pseudo_text_from_locator, scan_literal_strings
from resume_matcher.helpers.vocabulary import FALLBACK_VOCABULARY
from resume_matcher.models.settings import RecoverySettings, load_settings
from resume_matcher.services.documents import DocumentFetcher, TextRecovery, check_locator, recover
from resume_matcher.utils.exceptions import ConfigurationError, DocumentFetchError
from resume_matcher.utils.exceptions import ValidationError as LocatorError

PDF_BYTES = (
    b"%PDF-1.4\n1 0 obj\nstream\nBT (Hello World) Tj ET\n"
    b"BT (Experienced Python developer building APIs) Tj ET\nendstream\n"
)
RECOVERED = "Hello World Experienced Python developer building APIs"


def _session(content=None, error=None):
    session = MagicMock()
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value = MagicMock(content=content)
    return session


class TestScanLiteralStrings:
    """Printable-run recovery from parenthesised literals"""

    def test_recovers_literals(self):
        assert scan_literal_strings(PDF_BYTES) == RECOVERED

    def test_non_printable_bytes_dropped(self):
        assert scan_literal_strings(b"(ab\x00\x01cd) tail") == "abcd"

    def test_short_runs_discarded(self):
        assert scan_literal_strings(b"(abc) (defgh) tail") == "defgh"

    def test_runs_capped(self):
        assert len(scan_literal_strings(b"(" + b"a" * 300)) == 199

    def test_no_literals(self):
        assert scan_literal_strings(b"\x00\x01\x02 plain bytes") == ""


class TestPseudoText:

    def test_filename_words(self):
        text = pseudo_text_from_locator("https://cdn.example.com/files/John_Doe-2024.pdf?sig=abc")
        assert text == f"John Doe {FALLBACK_VOCABULARY}"

    def test_empty_locator(self):
        assert pseudo_text_from_locator("") == FALLBACK_VOCABULARY

    def test_locator_filename(self):
        assert locator_filename("https://x.com/a/b/My%20Resume.pdf?x=1") == "My Resume.pdf"
        assert locator_filename("/tmp/cv/jane.docx") == "jane.docx"


class TestTextRecovery:
    """Fetch plus strategy chain, never raising"""

    def test_bytes_recovered_by_binary_scan(self):
        doc = TextRecovery().recover_document(PDF_BYTES)
        assert doc.text == RECOVERED
        assert doc.strategy == "binary_scan"
        assert not doc.low_confidence

    def test_unreadable_bytes_fall_back_to_name(self):
        doc = TextRecovery().recover_document(b"\x89PNG garbage", name="Jane_Smith_CV.pdf")
        assert doc.strategy == "filename_fallback"
        assert doc.low_confidence
        assert doc.text.startswith("Jane Smith CV resume cv")

    @pytest.mark.parametrize("error", [requests.ConnectionError("refused"), requests.Timeout("slow")])
    def test_network_failure_falls_back(self, error):
        recovery = TextRecovery(fetcher=DocumentFetcher(session=_session(error=error)))
        text = recovery.recover("https://cdn.example.com/files/John_Doe-2024.pdf")
        assert text.startswith("John Doe resume cv")

    def test_http_success(self):
        session = _session(content=PDF_BYTES)
        recovery = TextRecovery(fetcher=DocumentFetcher(timeout=5, session=session))
        assert recovery.recover("https://cdn.example.com/cv.pdf") == RECOVERED
        session.get.assert_called_once_with("https://cdn.example.com/cv.pdf", timeout=5)

    def test_local_file_and_file_url(self, tmp_path):
        path = tmp_path / "resume.pdf"
        path.write_bytes(PDF_BYTES)
        assert recover(str(path)) == RECOVERED
        assert recover(path.as_uri()) == RECOVERED

    def test_missing_file_falls_back(self, tmp_path):
        doc = TextRecovery().recover_document(str(tmp_path / "Alex_Kim.pdf"))
        assert doc.strategy == "filename_fallback"
        assert doc.text.startswith("Alex Kim resume")

    def test_short_text_rejected(self):
        doc = TextRecovery(RecoverySettings(min_text_length=100)).recover_document(PDF_BYTES, name="cv.pdf")
        assert doc.strategy == "filename_fallback"

    def test_pdfminer_strategy_first(self):
        settings = RecoverySettings(strategies=["pdfminer", "binary_scan"])
        with patch("resume_matcher.services.documents.read_pdf", return_value="Parsed   text " * 10) as read_pdf:
            doc = TextRecovery(settings).recover_document(PDF_BYTES)
        read_pdf.assert_called_once_with(PDF_BYTES)
        assert doc.strategy == "pdfminer"
        assert "  " not in doc.text

    def test_pdfminer_skipped_for_non_pdf(self):
        settings = RecoverySettings(strategies=["pdfminer", "binary_scan"])
        data = PDF_BYTES.replace(b"%PDF-1.4", b"RAW")
        with patch("resume_matcher.services.documents.read_pdf") as read_pdf:
            doc = TextRecovery(settings).recover_document(data)
        read_pdf.assert_not_called()
        assert doc.strategy == "binary_scan"

    def test_docx_strategy(self):
        document = Document()
        document.add_paragraph("Jane Smith")
        document.add_paragraph("Skills")
        document.add_paragraph("Python, Django, PostgreSQL, Docker, Kubernetes")
        buffer = io.BytesIO()
        document.save(buffer)

        settings = RecoverySettings(strategies=["docx", "binary_scan"])
        doc = TextRecovery(settings).recover_document(buffer.getvalue(), name="jane.docx")
        assert doc.strategy == "docx"
        assert doc.text == "Jane Smith\nSkills\nPython, Django, PostgreSQL, Docker, Kubernetes"


class TestDocumentFetcher:

    def test_http_error_status(self):
        response = MagicMock(status_code=404)
        session = _session(content=b"")
        session.get.return_value.raise_for_status.side_effect = requests.HTTPError("not found", response=response)
        with pytest.raises(DocumentFetchError) as exc_info:
            DocumentFetcher(session=session).fetch("https://cdn.example.com/missing.pdf")
        assert exc_info.value.details["status_code"] == 404
        assert exc_info.value.details["locator"] == "https://cdn.example.com/missing.pdf"

    def test_missing_path(self, tmp_path):
        with pytest.raises(DocumentFetchError):
            DocumentFetcher().fetch(str(tmp_path / "nope.pdf"))


class TestRecoverySettings:

    def test_unknown_strategy_rejected(self):
        with pytest.raises(ValidationError):
            RecoverySettings(strategies=["ocr"])

    def test_defaults_from_environment(self, monkeypatch):
        for key in ("MATCHER_FETCH_TIMEOUT", "MATCHER_RECOVERY_STRATEGIES", "MATCHER_NO_RESUME_SCORE"):
            monkeypatch.delenv(key, raising=False)
        settings = load_settings()
        assert settings.recovery.strategies == ["binary_scan"]
        assert settings.recovery.fetch_timeout == 30
        assert settings.orchestrator.no_resume_score == 10.0

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("MATCHER_RECOVERY_STRATEGIES", "PDFMiner, binary_scan")
        monkeypatch.setenv("MATCHER_FAILURE_SCORE", "0")
        settings = load_settings()
        assert settings.recovery.strategies == ["pdfminer", "binary_scan"]
        assert settings.orchestrator.failure_score == 0

    @pytest.mark.parametrize("key,value", [
        ("MATCHER_FETCH_TIMEOUT", "soon"),
        ("MATCHER_RECOVERY_STRATEGIES", "ocr"),
        ("MATCHER_NO_RESUME_SCORE", "150"),
    ])
    def test_invalid_environment(self, monkeypatch, key, value):
        monkeypatch.setenv(key, value)
        with pytest.raises(ConfigurationError):
            load_settings()

    def test_locator_restrictions_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("MATCHER_DOCUMENT_ROOT", str(tmp_path))
        monkeypatch.setenv("MATCHER_ALLOWED_HOSTS", " CDN.example.com, files.example.com ")
        settings = load_settings()
        assert settings.recovery.document_root == str(tmp_path)
        assert settings.recovery.allowed_hosts == ["cdn.example.com", "files.example.com"]

    def test_no_locator_restrictions_by_default(self, monkeypatch):
        monkeypatch.delenv("MATCHER_DOCUMENT_ROOT", raising=False)
        monkeypatch.delenv("MATCHER_ALLOWED_HOSTS", raising=False)
        recovery = load_settings().recovery
        assert recovery.document_root is None
        assert recovery.allowed_hosts == []


class TestCheckLocator:
    """Caller-supplied locators against the document root and host list"""

    @pytest.fixture
    def settings(self, tmp_path):
        return RecoverySettings(document_root=str(tmp_path), allowed_hosts=["CDN.example.com"])

    def test_paths_inside_root(self, settings, tmp_path):
        check_locator(str(tmp_path / "cv.pdf"), settings)
        check_locator(str(tmp_path / "nested" / ".." / "cv.pdf"), settings)
        check_locator((tmp_path / "cv.pdf").as_uri(), settings)

    @pytest.mark.parametrize("locator", [
        "/etc/passwd",
        "file:///etc/passwd",
        "gopher://cdn.example.com/cv",
        "http://169.254.169.254/latest/meta-data",
        "https://evil.example.org/cv.pdf",
    ])
    def test_rejected(self, settings, locator):
        with pytest.raises(LocatorError) as exc_info:
            check_locator(locator, settings)
        assert exc_info.value.details["field"] == "locator"

    def test_traversal_out_of_root(self, settings, tmp_path):
        with pytest.raises(LocatorError):
            check_locator(str(tmp_path / ".." / "cv.pdf"), settings)

    def test_sibling_with_shared_prefix(self, settings, tmp_path):
        with pytest.raises(LocatorError):
            check_locator(str(tmp_path) + "-other/cv.pdf", settings)

    def test_symlink_out_of_root(self, settings, tmp_path):
        outside = tmp_path.parent / f"{tmp_path.name}-outside.pdf"
        outside.write_bytes(b"%PDF-1.4")
        (tmp_path / "link.pdf").symlink_to(outside)
        with pytest.raises(LocatorError):
            check_locator(str(tmp_path / "link.pdf"), settings)

    def test_allowed_host(self, settings):
        check_locator("https://cdn.example.com/cv.pdf", settings)

    def test_any_host_when_unrestricted(self, tmp_path):
        check_locator("https://anywhere.example.net/cv.pdf", RecoverySettings(document_root=str(tmp_path)))

    def test_local_paths_need_a_root(self, tmp_path):
        with pytest.raises(LocatorError):
            check_locator(str(tmp_path / "cv.pdf"), RecoverySettings())
