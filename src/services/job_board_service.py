"""
Job Board Service

Wires the public job listing together:

    job store -> filter_jobs() -> Paginator -> one page of jobs

Architecture:
    - The full job list is fetched from the store (newest first) and kept
      in memory; filtering and paging never touch the store
    - Fetches are request-sequenced: a fetch result is applied only if no
      newer fetch started after it, so overlapping loads cannot leave an
      older list on screen
    - A change of filter criteria always sends the reader back to page 1

Usage:
    board = JobBoardService(get_job_repository(), page_size=5)
    board.load_jobs()
    listing = board.list_jobs(criteria, page=2, previous_key=session_key)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from src.common.job_filtering import filter_jobs
from src.common.pagination import Paginator
from src.common.repositories.base import JobRepositoryInterface
from src.common.types import FilterCriteria, Job
from src.common.utils import RequestSequencer

logger = logging.getLogger(__name__)


@dataclass
class JobListing:
    """One rendered page of the public listing."""
    jobs: List[Job]
    pagination: Dict[str, Any]
    criteria_key: str
    total_jobs: int
    page_reset: bool = False
    scroll_to_top: bool = False
    saved_ids: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        saved = set(self.saved_ids)
        return {
            "jobs": [dict(job.to_api(), saved=job.id in saved) for job in self.jobs],
            "pagination": self.pagination,
            "criteria_key": self.criteria_key,
            "total_jobs": self.total_jobs,
            "page_reset": self.page_reset,
            "scroll_to_top": self.scroll_to_top,
        }


def documents_to_jobs(documents: Iterable[Dict[str, Any]]) -> List[Job]:
    """
    Convert store documents to Job models.

    Documents that fail validation are skipped with a warning; one bad
    record must not take the whole listing down.
    """
    jobs: List[Job] = []
    for doc in documents:
        try:
            jobs.append(Job.from_document(doc))
        except ValidationError as e:
            logger.warning(f"Skipping malformed job document {doc.get('_id')}: {e.error_count()} errors")
    return jobs


class JobBoardService:
    """Holds the fetched job list and answers listing requests."""

    def __init__(self, repository: JobRepositoryInterface, page_size: int = 5):
        """
        Args:
            repository: jobs store
            page_size: Jobs per page (must be positive)
        """
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self._repository = repository
        self.page_size = page_size
        self._jobs: List[Job] = []
        self._sequencer = RequestSequencer()

    @property
    def jobs(self) -> List[Job]:
        return list(self._jobs)

    def begin_load(self) -> int:
        """Start a fetch and return its request token."""
        return self._sequencer.next_token()

    def complete_load(self, token: int, jobs: List[Job]) -> bool:
        """
        Apply a fetch result unless a newer fetch has started since.

        Returns:
            True if applied, False if the result was stale and discarded
        """
        if not self._sequencer.is_current(token):
            logger.debug(f"Discarding stale job fetch (token {token}, latest {self._sequencer.latest})")
            return False
        self._jobs = list(jobs)
        return True

    def load_jobs(self) -> List[Job]:
        """
        Fetch the full job list from the store.

        Raises:
            RemoteStoreError: If the store call fails (current list kept)
        """
        token = self.begin_load()
        jobs = documents_to_jobs(self._repository.find_all())
        if self.complete_load(token, jobs):
            logger.info(f"Loaded {len(jobs)} jobs")
        return self.jobs

    def list_jobs(
        self,
        criteria: Optional[FilterCriteria] = None,
        page: int = 1,
        previous_key: Optional[str] = None,
        current_page: int = 1,
    ) -> JobListing:
        """
        Filter the loaded jobs and cut out one page.

        Args:
            criteria: Active filter criteria (None = no filter)
            page: Page the reader asked for; out-of-range requests are ignored
            previous_key: criteria key of the reader's previous listing, if any
            current_page: Page the reader was on before this request

        Returns:
            JobListing for the resulting page
        """
        criteria = criteria or FilterCriteria()
        matches = filter_jobs(self._jobs, criteria)
        key = criteria.key()

        page_reset = previous_key is not None and previous_key != key
        if page_reset:
            paginator = Paginator(len(matches), self.page_size)
            scroll = True
        else:
            paginator = Paginator(len(matches), self.page_size, current_page=current_page)
            before = paginator.current_page
            nav = paginator.navigate(page)
            scroll = nav.scroll_to_top and nav.page != before

        return JobListing(
            jobs=paginator.slice(matches),
            pagination=paginator.to_dict(),
            criteria_key=key,
            total_jobs=len(self._jobs),
            page_reset=page_reset,
            scroll_to_top=scroll,
        )
