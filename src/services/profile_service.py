"""
Profile Service

Account settings and saved-job views for signed-in users, plus the admin
Users tab (list with saved counts, delete).
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from src.common.error_handling import JobValidationError, NotFoundError
from src.common.repositories.base import (
    JobRepositoryInterface,
    ProfileRepositoryInterface,
    SavedJobRepositoryInterface,
)
from src.common.types import Job
from src.services.job_board_service import documents_to_jobs

logger = logging.getLogger(__name__)


@dataclass
class UserSummary:
    """Row of the admin Users tab."""
    id: str
    email: str
    name: str
    created_at: Optional[datetime]
    saved_jobs: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "saved_jobs": self.saved_jobs,
        }


def public_profile(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Profile document without the password hash, ready for JSON."""
    created_at = doc.get("created_at")
    updated_at = doc.get("updated_at")
    return {
        "id": str(doc["_id"]),
        "email": doc.get("email", ""),
        "name": doc.get("name", ""),
        "created_at": created_at.isoformat() if isinstance(created_at, datetime) else created_at,
        "updated_at": updated_at.isoformat() if isinstance(updated_at, datetime) else updated_at,
    }


class ProfileService:
    def __init__(
        self,
        profile_repository: ProfileRepositoryInterface,
        saved_job_repository: SavedJobRepositoryInterface,
        job_repository: JobRepositoryInterface,
    ):
        self._profiles = profile_repository
        self._saved = saved_job_repository
        self._jobs = job_repository

    def get_profile(self, user_id: str) -> Dict[str, Any]:
        doc = self._profiles.find_by_id(user_id)
        if doc is None:
            raise NotFoundError(f"Profile {user_id} not found")
        return public_profile(doc)

    def update_name(self, user_id: str, name: Optional[str]) -> Dict[str, Any]:
        """
        Change the display name.

        Raises:
            JobValidationError: If the name is blank
            NotFoundError: If the profile does not exist
        """
        name = (name or "").strip()
        if not name:
            raise JobValidationError({"name": "Name must not be empty"})

        result = self._profiles.update_one(user_id, {"name": name, "updated_at": datetime.utcnow()})
        if result.matched_count == 0:
            raise NotFoundError(f"Profile {user_id} not found")
        logger.info(f"Updated name for user {user_id[:8]}")
        return self.get_profile(user_id)

    def list_saved_jobs(self, user_id: str) -> List[Job]:
        """Saved job records, newest first. Ids whose job no longer exists are dropped."""
        job_ids = self._saved.list_job_ids(user_id)
        if not job_ids:
            return []
        return documents_to_jobs(self._jobs.find_by_ids(job_ids))

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    def list_users(self, search: Optional[str] = None) -> List[UserSummary]:
        """All profiles with their saved-job counts, filtered on name/email substring."""
        term = (search or "").strip().lower()
        counts = self._saved.count_by_user()

        users = []
        for doc in self._profiles.find_all():
            email = doc.get("email", "")
            name = doc.get("name", "")
            if term and term not in email.lower() and term not in name.lower():
                continue
            user_id = str(doc["_id"])
            users.append(UserSummary(
                id=user_id,
                email=email,
                name=name,
                created_at=doc.get("created_at"),
                saved_jobs=counts.get(user_id, 0),
            ))
        return users

    def delete_user(self, user_id: str) -> None:
        """
        Delete a profile and its saved-job associations.

        Raises:
            NotFoundError: If the profile does not exist
        """
        result = self._profiles.delete_one(user_id)
        if result.matched_count == 0:
            raise NotFoundError(f"Profile {user_id} not found")
        self._saved.delete_for_user(user_id)
        logger.info(f"Deleted user {user_id[:8]}")
