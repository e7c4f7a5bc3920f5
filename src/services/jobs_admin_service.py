"""
Jobs Admin Service

Admin dashboard operations on the jobs collection: list, search, create,
update and delete listings.

Form input is validated with JobForm before any store call; rejected input
raises JobValidationError with one message per field and the store is never
touched.
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from src.common.error_handling import JobValidationError, NotFoundError
from src.common.repositories.base import JobRepositoryInterface, SavedJobRepositoryInterface
from src.common.types import Job, JobForm
from src.services.job_board_service import documents_to_jobs

logger = logging.getLogger(__name__)


def validate_job_form(data: Dict[str, Any]) -> JobForm:
    """
    Validate raw form input.

    Raises:
        JobValidationError: With per-field messages
    """
    try:
        return JobForm.model_validate(data)
    except ValidationError as e:
        raise JobValidationError.from_pydantic(e) from e


def search_jobs(jobs: List[Job], term: Optional[str]) -> List[Job]:
    """Case-insensitive substring match on title or company; blank term keeps all."""
    term = (term or "").strip().lower()
    if not term:
        return list(jobs)
    return [job for job in jobs if term in job.title.lower() or term in job.company.lower()]


class JobsAdminService:
    """CRUD over job listings for administrators."""

    def __init__(
        self,
        job_repository: JobRepositoryInterface,
        saved_job_repository: Optional[SavedJobRepositoryInterface] = None,
    ):
        self._jobs = job_repository
        self._saved = saved_job_repository

    def fetch_jobs(self) -> List[Job]:
        """All listings, newest first."""
        return documents_to_jobs(self._jobs.find_all())

    def search_jobs(self, term: Optional[str] = None) -> List[Job]:
        return search_jobs(self.fetch_jobs(), term)

    def get_job(self, job_id: str) -> Job:
        doc = self._jobs.find_one(job_id)
        if doc is None:
            raise NotFoundError(f"Job {job_id} not found")
        return Job.from_document(doc)

    def create_job(self, data: Dict[str, Any]) -> Job:
        """
        Validate and insert a new listing.

        Returns:
            The stored Job (uuid4 id, posted now, source "admin")

        Raises:
            JobValidationError: If the form is invalid
            RemoteStoreError: If the insert fails
        """
        form = validate_job_form(data)
        job = Job(
            id=str(uuid.uuid4()),
            posted_at=datetime.utcnow(),
            source="admin",
            **form.model_dump(),
        )
        self._jobs.insert_one(job.to_document())
        logger.info(f"Created job {job.id}: {job.title} @ {job.company}")
        return job

    def update_job(self, job_id: str, data: Dict[str, Any]) -> Job:
        """
        Validate and apply an edit to an existing listing.

        Raises:
            JobValidationError: If the form is invalid
            NotFoundError: If no job has this id
            RemoteStoreError: If the update fails
        """
        form = validate_job_form(data)
        fields = form.model_dump()
        fields["job_type"] = form.job_type.value
        fields["experience_level"] = form.experience_level.value
        fields["updated_at"] = datetime.utcnow()

        result = self._jobs.update_one(job_id, fields)
        if result.matched_count == 0:
            raise NotFoundError(f"Job {job_id} not found")
        logger.info(f"Updated job {job_id}")
        return self.get_job(job_id)

    def delete_job(self, job_id: str) -> None:
        """
        Delete a listing and any saved-job associations pointing at it.

        Raises:
            NotFoundError: If no job has this id
            RemoteStoreError: If a store call fails
        """
        result = self._jobs.delete_one(job_id)
        if result.matched_count == 0:
            raise NotFoundError(f"Job {job_id} not found")
        if self._saved is not None:
            self._saved.delete_for_job(job_id)
        logger.info(f"Deleted job {job_id}")
