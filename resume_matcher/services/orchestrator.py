"""
Matching run for one job: score every application and report one result each.

Failure policy per application:
- no resume attached -> fixed `no_resume_score` (status "no_resume")
- any exception while scoring -> fixed `failure_score` (status "failed")
Failing to load the job or its applications raises `JobLoadError`; no partial
batch is produced in that case.
"""
from typing import Callable, List, Optional, Tuple

from resume_matcher.models.models import MatchDetails, MatchResult
from resume_matcher.models.response import MatchingRun
from resume_matcher.models.schemas import ApplicationInput, JobInput
from resume_matcher.models.settings import MatchingSettings
from resume_matcher.services.documents import TextRecovery
from resume_matcher.services.matching import MatchScorer
from resume_matcher.utils.exceptions import JobLoadError
from resume_matcher.utils.logging_config import PerformanceMonitor, get_logger

logger = get_logger(__name__)

ResultSink = Callable[[MatchResult], None]


def metadata_job_text(job: JobInput) -> str:
    parts = [job.title, job.company, job.location or "", " ".join(job.required_skills or [])]
    return " ".join(p.strip() for p in parts if p and p.strip())


class MatchingOrchestrator:

    def __init__(
        self,
        store=None,
        recovery: Optional[TextRecovery] = None,
        scorer: Optional[MatchScorer] = None,
        settings: Optional[MatchingSettings] = None,
        sink: Optional[ResultSink] = None,
    ):
        self.store = store
        self.settings = settings or MatchingSettings()
        self.recovery = recovery or TextRecovery(self.settings.recovery)
        self.scorer = scorer or MatchScorer()
        self.sink = sink

    def run(self, job_id: str) -> MatchingRun:
        """Load the job and its applications from the store, then score them."""
        if self.store is None:
            raise JobLoadError("No job store configured", job_id=job_id)
        try:
            job = self.store.get_job(job_id)
            applications = self.store.list_applications(job_id)
        except Exception as e:
            logger.error(f"Failed to load job {job_id} or its applications: {e}")
            raise JobLoadError(f"Failed to load job {job_id}: {e}", job_id=job_id, cause=e) from e
        if job is None:
            raise JobLoadError(f"Job {job_id} not found", job_id=job_id)
        return self.run_for(job, applications or [])

    def run_for(self, job: JobInput, applications: List[ApplicationInput]) -> MatchingRun:
        logger.info(f"Starting matching for job {job.job_id} with {len(applications)} applications")

        with PerformanceMonitor(f"matching run for job {job.job_id}", logger=logger):
            job_text, job_low_confidence = self.build_job_text(job)
            results = [self._evaluate(job, job_text, job_low_confidence, app) for app in applications]

        run = MatchingRun(
            job_id=job.job_id,
            results=results,
            job_text_low_confidence=job_low_confidence,
            scored_count=sum(1 for r in results if r.status == "scored"),
            no_resume_count=sum(1 for r in results if r.status == "no_resume"),
            failed_count=sum(1 for r in results if r.status == "failed"),
        )
        logger.info(
            f"Matching for job {job.job_id} done: {run.scored_count} scored, "
            f"{run.no_resume_count} without resume, {run.failed_count} failed"
        )
        return run

    def build_job_text(self, job: JobInput) -> Tuple[str, bool]:
        """Job description text plus attached document text; metadata when both are empty."""
        text = job.description or ""

        if job.job_description_url:
            doc = self.recovery.recover_document(job.job_description_url)
            if doc.low_confidence:
                logger.info(f"Job description document for {job.job_id} unreadable, using description text only")
            else:
                text = f"{text} {doc.text}" if text.strip() else doc.text

        if not text.strip():
            logger.warning(f"Job {job.job_id} has no description text, falling back to job metadata")
            return metadata_job_text(job), True
        return text, False

    def _evaluate(self, job: JobInput, job_text: str, job_low_confidence: bool, app: ApplicationInput) -> MatchResult:
        try:
            if not app.resume_url:
                logger.info(f"Application {app.application_id} has no resume, assigning {self.settings.orchestrator.no_resume_score}")
                result = self._fixed(app, self.settings.orchestrator.no_resume_score, "no_resume")
            else:
                doc = self.recovery.recover_document(app.resume_url)
                result = self.scorer.score(
                    job_text,
                    doc.text,
                    job.required_skills or [],
                    application_id=app.application_id,
                    low_confidence=job_low_confidence or doc.low_confidence,
                )
                logger.info(f"Match score for application {app.application_id}: {result.score}")
        except Exception as e:
            logger.error(f"Error processing application {app.application_id}: {e}", exc_info=True)
            result = self._fixed(app, self.settings.orchestrator.failure_score, "failed")

        self._emit(result)
        return result

    def _fixed(self, app: ApplicationInput, score: float, status: str) -> MatchResult:
        return MatchResult(
            application_id=app.application_id,
            score=score,
            details=MatchDetails(),
            status=status,
        )

    def _emit(self, result: MatchResult) -> None:
        if self.sink is None:
            return
        try:
            self.sink(result)
        except Exception as e:
            logger.error(f"Result sink failed for application {result.application_id}: {e}")
