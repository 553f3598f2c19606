"""
Job / application source for the orchestrator.

Any object exposing `get_job(job_id)` and `list_applications(job_id)` can be
used; `InMemoryJobStore` serves request payloads and tests.
"""
from typing import Dict, Iterable, List, Optional

from resume_matcher.models.schemas import ApplicationInput, JobInput


class InMemoryJobStore:

    def __init__(self, jobs: Iterable[JobInput] = (), applications: Optional[Dict[str, List[ApplicationInput]]] = None):
        self._jobs = {job.job_id: job for job in jobs}
        self._applications = {k: list(v) for k, v in (applications or {}).items()}

    def add_job(self, job: JobInput, applications: Iterable[ApplicationInput] = ()) -> None:
        self._jobs[job.job_id] = job
        self._applications.setdefault(job.job_id, []).extend(applications)

    def get_job(self, job_id: str) -> JobInput:
        if job_id not in self._jobs:
            raise KeyError(f"Job {job_id} not found")
        return self._jobs[job_id]

    def list_applications(self, job_id: str) -> List[ApplicationInput]:
        return list(self._applications.get(job_id, []))
