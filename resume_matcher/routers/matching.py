# routers/matching.py
import asyncio
import logging
from functools import partial

from fastapi import APIRouter, Query

from resume_matcher.models.models import MatchResult, RecoveredDocument
from resume_matcher.models.response import MatchingRunResponse, ReportPaths
from resume_matcher.models.schemas import MatchingRunRequest, RecoverRequest, ScoreRequest
from resume_matcher.models.settings import RecoverySettings, load_settings
from resume_matcher.services.documents import TextRecovery, check_locator
from resume_matcher.services.matching import MatchScorer
from resume_matcher.services.orchestrator import MatchingOrchestrator
from resume_matcher.services.reports import write_reports
from resume_matcher.services.store import InMemoryJobStore
from resume_matcher.utils.exceptions import MatcherBaseException, ValidationError, map_to_http_exception

router = APIRouter(prefix="/match", tags=["matching"])
logger = logging.getLogger(__name__)


def _settings():
    try:
        return load_settings()
    except MatcherBaseException as e:
        raise map_to_http_exception(e)


def _check_locators(locators, settings: RecoverySettings):
    try:
        for locator in locators:
            if locator:
                check_locator(locator, settings)
    except MatcherBaseException as e:
        logger.warning(f"Rejected document locator: {e.message}")
        raise map_to_http_exception(e)


@router.post("/score", response_model=MatchResult)
async def score_texts(payload: ScoreRequest):
    """Score one resume text against one job description text."""
    scorer = MatchScorer()
    # scoring is CPU-bound, keep it off the event loop
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(
        None,
        partial(
            scorer.score,
            payload.job_text,
            payload.resume_text,
            payload.required_skills,
            application_id=payload.application_id,
        ),
    )


@router.post("/recover", response_model=RecoveredDocument)
async def recover_text(payload: RecoverRequest):
    """Recover plain text from a document URL or a path under the document root."""
    settings = _settings()
    _check_locators([payload.locator], settings.recovery)
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, TextRecovery(settings.recovery).recover_document, payload.locator)


@router.post("/jobs/{job_id}", response_model=MatchingRunResponse)
async def run_matching(job_id: str, payload: MatchingRunRequest, write_report: bool = Query(False)):
    """Score every application of a job and return one result per application."""
    if payload.job.job_id != job_id:
        raise map_to_http_exception(ValidationError(
            f"Job ID mismatch: URL has {job_id}, payload has {payload.job.job_id}",
            field="job.job_id",
            value=payload.job.job_id,
        ))

    settings = _settings()
    _check_locators(
        [payload.job.job_description_url] + [app.resume_url for app in payload.applications],
        settings.recovery,
    )
    store = InMemoryJobStore()
    store.add_job(payload.job, payload.applications)
    orchestrator = MatchingOrchestrator(store=store, settings=settings)

    # document fetches block, keep them off the event loop
    loop = asyncio.get_running_loop()
    try:
        run = await loop.run_in_executor(None, orchestrator.run, job_id)
    except MatcherBaseException as e:
        raise map_to_http_exception(e)

    report = None
    if write_report:
        csv_path, md_path = write_reports(run, settings.report_dir)
        report = ReportPaths(csv_path=csv_path, md_path=md_path)
        logger.info(f"Reports for job {job_id} written to {csv_path} and {md_path}")

    return MatchingRunResponse(**run.model_dump(), report=report)
