"""
Repository Interface Definitions

Defines the abstract interfaces for the three collections the job board
uses: jobs, saved_jobs and profiles. Services depend on these interfaces
only, so tests can hand in mocks and the MongoDB implementation can be
swapped without changing consumer code.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass
class WriteResult:
    """
    Result of a write operation.

    Attributes:
        matched_count: Number of documents that matched the filter
        modified_count: Number of documents actually modified (or deleted)
        upserted_id: ID of the inserted/upserted document (if any)
    """
    matched_count: int
    modified_count: int
    upserted_id: Optional[str] = None


class JobRepositoryInterface(ABC):
    """
    Abstract interface for the jobs collection.

    All methods follow fail-fast semantics: store errors propagate to the
    caller as RemoteStoreError.
    """

    @abstractmethod
    def find_all(self) -> List[Dict[str, Any]]:
        """
        Fetch every job document, newest first (by posted_at).

        Returns:
            List of job documents
        """
        pass

    @abstractmethod
    def find_one(self, job_id: str) -> Optional[Dict[str, Any]]:
        """Find a single job document by id, or None."""
        pass

    @abstractmethod
    def find_by_ids(self, job_ids: List[str]) -> List[Dict[str, Any]]:
        """Find the job documents whose ids are in ``job_ids``."""
        pass

    @abstractmethod
    def insert_one(self, document: Dict[str, Any]) -> WriteResult:
        """
        Insert a single job document.

        Returns:
            WriteResult with upserted_id set to the new document's _id
        """
        pass

    @abstractmethod
    def insert_many(self, documents: List[Dict[str, Any]]) -> WriteResult:
        """Insert several job documents at once."""
        pass

    @abstractmethod
    def update_one(self, job_id: str, fields: Dict[str, Any]) -> WriteResult:
        """
        Set ``fields`` on one job.

        Returns:
            WriteResult with match/modify counts
        """
        pass

    @abstractmethod
    def delete_one(self, job_id: str) -> WriteResult:
        """Delete one job. modified_count is the number deleted."""
        pass


class SavedJobRepositoryInterface(ABC):
    """
    Abstract interface for the saved_jobs collection of (user_id, job_id) pairs.

    The pair is unique; saving an already-saved job is not an error.
    """

    @abstractmethod
    def list_job_ids(self, user_id: str) -> List[str]:
        """All job ids saved by ``user_id``."""
        pass

    @abstractmethod
    def add(self, user_id: str, job_id: str) -> WriteResult:
        """Save ``job_id`` for ``user_id``."""
        pass

    @abstractmethod
    def remove(self, user_id: str, job_id: str) -> WriteResult:
        """Unsave ``job_id`` for ``user_id``."""
        pass

    @abstractmethod
    def count_by_user(self) -> Dict[str, int]:
        """Number of saved jobs per user id."""
        pass

    @abstractmethod
    def delete_for_user(self, user_id: str) -> WriteResult:
        """Remove every association of ``user_id``."""
        pass

    @abstractmethod
    def delete_for_job(self, job_id: str) -> WriteResult:
        """Remove every association pointing at ``job_id``."""
        pass


class ProfileRepositoryInterface(ABC):
    """Abstract interface for the profiles collection (one document per account)."""

    @abstractmethod
    def find_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    def find_all(self) -> List[Dict[str, Any]]:
        """Every profile, oldest first."""
        pass

    @abstractmethod
    def insert_one(self, document: Dict[str, Any]) -> WriteResult:
        pass

    @abstractmethod
    def update_one(self, user_id: str, fields: Dict[str, Any]) -> WriteResult:
        pass

    @abstractmethod
    def delete_one(self, user_id: str) -> WriteResult:
        pass
