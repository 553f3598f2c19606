"""
Exception hierarchy for the Resume Match Engine.

Document fetch and extraction errors are normally absorbed by text recovery
(which falls back to file-name text); `JobLoadError` is the only error that
aborts a matching run.
"""
from typing import Any, Dict, Optional

from fastapi import HTTPException


class MatcherBaseException(Exception):
    """Base exception carrying an error code, structured details and the original cause"""

    error_code = "MATCHER_ERROR"
    http_status = 500

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.error_code
        self.details = dict(details or {})
        self.cause = cause

    def _add_details(self, **fields: Any) -> None:
        # unset fields are left out of the response body
        self.details.update({k: v for k, v in fields.items() if v is not None})

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "error_type": type(self).__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }
        if self.cause is not None:
            data["cause"] = repr(self.cause)
        return data


class ValidationError(MatcherBaseException):
    """Request data that is well-formed but inconsistent, e.g. a job id mismatch"""

    error_code = "VALIDATION_ERROR"
    http_status = 400

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self._add_details(field=field, invalid_value=None if value is None else str(value))


class DocumentFetchError(MatcherBaseException):
    """A resume or job description document could not be downloaded or read from disk"""

    error_code = "DOCUMENT_FETCH_ERROR"
    http_status = 502

    def __init__(self, message: str, locator: Optional[str] = None, status_code: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self._add_details(locator=locator, status_code=status_code)


class ExtractionError(MatcherBaseException):
    """A recovery strategy could not make sense of the document bytes"""

    error_code = "EXTRACTION_ERROR"

    def __init__(self, message: str, strategy: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self._add_details(strategy=strategy)


class JobLoadError(MatcherBaseException):
    """The job or its application list could not be loaded"""

    error_code = "JOB_LOAD_ERROR"
    http_status = 404

    def __init__(self, message: str, job_id: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self._add_details(job_id=job_id)


class ConfigurationError(MatcherBaseException):
    """MATCHER_* settings are missing or invalid"""

    error_code = "CONFIGURATION_ERROR"
    http_status = 400

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self._add_details(config_key=config_key)


def map_to_http_exception(exc: MatcherBaseException) -> HTTPException:
    return HTTPException(
        status_code=exc.http_status,
        detail={"error": exc.to_dict(), "message": exc.message},
    )
