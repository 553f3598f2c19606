from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from resume_matcher.middleware.error_handlers import ExceptionHandlerMiddleware, PerformanceMiddleware
from resume_matcher.models.settings import load_settings
from resume_matcher.routers import matching
from resume_matcher.utils.logging_config import configure_for_environment, get_logger

VERSION = "1.0.0"

# Configure logging first
configure_for_environment()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # fail at startup rather than on the first matching request
    settings = load_settings()
    logger.info(
        f"Resume Match Engine starting: strategies={','.join(settings.recovery.strategies)} "
        f"fetch_timeout={settings.recovery.fetch_timeout}s report_dir={settings.report_dir}"
    )
    yield
    logger.info("Resume Match Engine shutting down")


app = FastAPI(title="Resume Match Engine", version=VERSION, lifespan=lifespan)

# added last = outermost
app.add_middleware(PerformanceMiddleware, slow_request_threshold=2.0)
app.add_middleware(ExceptionHandlerMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "HEAD", "POST"],
    allow_headers=["*"],
)


@app.get("/")
@app.head("/")
async def root():
    return {"service": "Resume Match Engine", "version": VERSION, "status": "ok"}


@app.get("/health")
@app.head("/health")
async def health_check():
    """Liveness check (GET and HEAD)"""
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


app.include_router(matching.router, prefix="/api")
