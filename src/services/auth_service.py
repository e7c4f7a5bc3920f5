"""
Auth Service

Email/password accounts stored in the profiles collection. Passwords are
hashed with werkzeug.security; administrators are the accounts whose email
appears in ADMIN_EMAILS.
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from pymongo.errors import DuplicateKeyError
from werkzeug.security import check_password_hash, generate_password_hash

from src.common.error_handling import AuthenticationError, JobValidationError, RemoteStoreError
from src.common.repositories.base import ProfileRepositoryInterface
from src.common.types import UserIdentity
from src.common.utils import normalize_email

logger = logging.getLogger(__name__)


class AuthService:
    """Sign-up, sign-in and identity lookup."""

    def __init__(
        self,
        profile_repository: ProfileRepositoryInterface,
        admin_emails: Iterable[str] = (),
        min_password_length: int = 6,
    ):
        self._profiles = profile_repository
        self._admin_emails = {normalize_email(email) for email in admin_emails if email}
        self.min_password_length = min_password_length

    def _identity(self, doc: Dict[str, Any]) -> UserIdentity:
        email = doc.get("email", "")
        return UserIdentity(
            id=str(doc["_id"]),
            email=email,
            name=doc.get("name", ""),
            is_admin=normalize_email(email) in self._admin_emails,
        )

    def sign_up(self, email: Optional[str], password: Optional[str], name: Optional[str] = None) -> UserIdentity:
        """
        Create an account.

        Raises:
            JobValidationError: Malformed email or short password
            AuthenticationError: Email already registered
        """
        email = normalize_email(email)
        password = password or ""

        errors = {}
        if "@" not in email or email.startswith("@") or email.endswith("@"):
            errors["email"] = "A valid email address is required"
        if len(password) < self.min_password_length:
            errors["password"] = f"Password must be at least {self.min_password_length} characters"
        if errors:
            raise JobValidationError(errors)

        if self._profiles.find_by_email(email) is not None:
            raise AuthenticationError("An account with this email already exists")

        now = datetime.utcnow()
        doc = {
            "_id": str(uuid.uuid4()),
            "email": email,
            "name": (name or "").strip(),
            "password_hash": generate_password_hash(password),
            "created_at": now,
            "updated_at": now,
        }
        try:
            self._profiles.insert_one(doc)
        except RemoteStoreError as e:
            # Lost a race against a concurrent sign-up for the same email
            if isinstance(e.cause, DuplicateKeyError):
                raise AuthenticationError("An account with this email already exists") from e
            raise

        logger.info(f"Signed up user {doc['_id'][:8]}")
        return self._identity(doc)

    def sign_in(self, email: Optional[str], password: Optional[str]) -> UserIdentity:
        """
        Check credentials.

        Raises:
            AuthenticationError: Unknown email or wrong password
        """
        doc = self._profiles.find_by_email(normalize_email(email))
        if doc is None or not check_password_hash(doc.get("password_hash", ""), password or ""):
            raise AuthenticationError("Invalid email or password")
        logger.info(f"Signed in user {str(doc['_id'])[:8]}")
        return self._identity(doc)

    def get_identity(self, user_id: str) -> Optional[UserIdentity]:
        """Identity for a stored user id, or None if the account is gone."""
        doc = self._profiles.find_by_id(user_id)
        return self._identity(doc) if doc is not None else None
