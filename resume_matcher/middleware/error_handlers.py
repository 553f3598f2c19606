"""
HTTP middleware: request ids, a uniform JSON error body and request timing.
"""
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.middleware.base import BaseHTTPMiddleware

from resume_matcher.utils.exceptions import MatcherBaseException, map_to_http_exception
from resume_matcher.utils.logging_config import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def error_body(request_id: str, status_code: int, detail: Any) -> Dict[str, Any]:
    if not isinstance(detail, dict):
        detail = {"message": str(detail)}
    return {
        "success": False,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "request_id": request_id,
        "status_code": status_code,
        **detail,
    }


class ExceptionHandlerMiddleware(BaseHTTPMiddleware):
    """Tags each request with an id and turns escaping exceptions into JSON errors"""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        where = f"{request.method} {request.url.path}"

        try:
            response = await call_next(request)
        except MatcherBaseException as exc:
            logger.error(f"{where} failed with {exc.error_code}: {exc.message}", extra={"request_id": request_id})
            http_exc = map_to_http_exception(exc)
            return self._respond(request_id, http_exc.status_code, http_exc.detail)
        except ValidationError as exc:
            # model construction inside a handler, not request parsing
            logger.error(f"{where} produced invalid data: {exc}", extra={"request_id": request_id})
            detail = {"message": "Invalid data format or values", "validation_errors": exc.errors(include_context=False)}
            return self._respond(request_id, 400, detail)
        except HTTPException as exc:
            logger.warning(f"{where} -> {exc.status_code}: {exc.detail}", extra={"request_id": request_id})
            return self._respond(request_id, exc.status_code, exc.detail)
        except Exception as exc:
            logger.error(f"Unhandled exception in {where}: {exc}", extra={"request_id": request_id}, exc_info=True)
            return self._respond(request_id, 500, {"message": "An unexpected error occurred while matching."})

        logger.info(f"{where} -> {response.status_code}", extra={"request_id": request_id})
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    def _respond(self, request_id: str, status_code: int, detail: Any) -> JSONResponse:
        return JSONResponse(
            status_code=status_code,
            content=error_body(request_id, status_code, detail),
            headers={REQUEST_ID_HEADER: request_id},
        )


class PerformanceMiddleware(BaseHTTPMiddleware):
    """Adds X-Processing-Time and warns about requests slower than the threshold (seconds)"""

    def __init__(self, app, slow_request_threshold: float = 2.0):
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started

        if elapsed > self.slow_request_threshold:
            # matching runs fetch every resume, so large batches land here
            logger.warning(f"Slow request: {request.method} {request.url.path} took {elapsed:.3f}s")

        response.headers["X-Processing-Time"] = f"{elapsed:.3f}"
        return response
