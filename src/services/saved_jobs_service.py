"""
Saved Jobs Service

Tracks which job ids the signed-in user has bookmarked.

The remote store (saved_jobs collection) is the source of truth; the tracker
keeps a local set as a cache so listing pages can mark saved jobs without a
query per job. The cache is:
    - replaced wholesale whenever the user identity becomes available or changes
    - cleared immediately on logout
    - only mutated after the store accepted the corresponding write

Usage:
    tracker = SavedJobsTracker(get_saved_job_repository())
    tracker.set_user(identity)          # loads the saved ids
    outcome = tracker.toggle_save(job_id)
"""

from enum import Enum
from typing import FrozenSet, Iterable, List, Optional

from src.common.error_handling import Notification
from src.common.logger import get_logger
from src.common.repositories.base import SavedJobRepositoryInterface
from src.common.types import UserIdentity


class ToggleOutcome(str, Enum):
    """What a toggle_save() call did."""
    ADDED = "added"
    REMOVED = "removed"
    AUTH_REQUIRED = "auth_required"


_NOTIFICATIONS = {
    ToggleOutcome.ADDED: ("Job saved", "Job has been added to your saved list"),
    ToggleOutcome.REMOVED: ("Job removed", "Job has been removed from your saved list"),
    ToggleOutcome.AUTH_REQUIRED: ("Sign in required", "Sign in to save jobs for later"),
}


def notification_for(outcome: ToggleOutcome) -> Notification:
    """User-facing message for a toggle outcome."""
    title, description = _NOTIFICATIONS[outcome]
    return Notification(title=title, description=description)


SAVE_FAILED_NOTIFICATION = (
    "Error",
    "Failed to update saved jobs. Please try again later.",
)


class SavedJobsTracker:
    """
    Membership of job ids in the current user's saved set.

    Store failures raise RemoteStoreError from the repository and leave the
    local set exactly as it was. Nothing is retried.
    """

    def __init__(
        self,
        repository: SavedJobRepositoryInterface,
        user: Optional[UserIdentity] = None,
        saved_ids: Optional[Iterable[str]] = None,
    ):
        """
        Args:
            repository: saved_jobs store
            user: Current identity, if already known (e.g. restored from session)
            saved_ids: Cached ids for ``user`` (e.g. restored from session)
        """
        self._repository = repository
        self._user = user
        self._saved: set = set(saved_ids or []) if user else set()
        self._log = get_logger(__name__, user_id=user.id if user else None, component="saved_jobs")

    @property
    def user(self) -> Optional[UserIdentity]:
        return self._user

    @property
    def saved_ids(self) -> FrozenSet[str]:
        return frozenset(self._saved)

    def sorted_ids(self) -> List[str]:
        """Saved ids in a stable order, for session storage and JSON."""
        return sorted(self._saved)

    def is_saved(self, job_id: str) -> bool:
        return job_id in self._saved

    # ------------------------------------------------------------------
    # Identity changes and fetches
    # ------------------------------------------------------------------

    def set_user(self, user: Optional[UserIdentity]) -> None:
        """
        Adopt a new identity.

        None (logout) clears the cache at once. A different user clears the
        cache and reloads it from the store. The same user is a no-op.
        """
        if user is None:
            self.clear()
            return

        if self._user is not None and self._user.id == user.id:
            return

        self.clear()
        self._user = user
        self._log = get_logger(__name__, user_id=user.id, component="saved_jobs")
        self.reload()

    def clear(self) -> None:
        """Forget the identity and cached ids."""
        self._user = None
        self._saved = set()

    def reload(self) -> bool:
        """
        Fetch the full saved set for the current user, replacing the cache.

        Raises:
            RemoteStoreError: If the store call fails (cache unchanged)
        """
        if self._user is None:
            return False
        user = self._user
        job_ids = self._repository.list_job_ids(user.id)
        if self._user is not user:
            self._log.debug("Discarding saved-jobs fetch for a previous identity")
            return False
        self._saved = {job_id for job_id in job_ids if job_id}
        self._log.info(f"Loaded {len(self._saved)} saved jobs")
        return True

    # ------------------------------------------------------------------
    # Toggle
    # ------------------------------------------------------------------

    def toggle_save(self, job_id: str) -> ToggleOutcome:
        """
        Save ``job_id`` if it is not saved, unsave it if it is.

        Returns:
            ADDED or REMOVED after the store accepted the write, or
            AUTH_REQUIRED (and no change) when nobody is signed in

        Raises:
            RemoteStoreError: If the store write fails (local set unchanged)
        """
        if self._user is None:
            return ToggleOutcome.AUTH_REQUIRED

        if job_id in self._saved:
            self._repository.remove(self._user.id, job_id)
            self._saved.discard(job_id)
            self._log.info(f"Removed saved job {job_id}")
            return ToggleOutcome.REMOVED

        self._repository.add(self._user.id, job_id)
        self._saved.add(job_id)
        self._log.info(f"Saved job {job_id}")
        return ToggleOutcome.ADDED

    def unsave(self, job_id: str) -> ToggleOutcome:
        """
        Remove ``job_id`` from the saved set (the profile page's remove button).

        Unsaving a job that is not saved still deletes it from the store, so
        a stale session cache cannot keep a saved record alive.

        Raises:
            RemoteStoreError: If the store delete fails (local set unchanged)
        """
        if self._user is None:
            return ToggleOutcome.AUTH_REQUIRED

        self._repository.remove(self._user.id, job_id)
        self._saved.discard(job_id)
        self._log.info(f"Removed saved job {job_id}")
        return ToggleOutcome.REMOVED
