"""
Repository Configuration and Factory

Provides factory functions returning the repository implementations for the
jobs, saved_jobs and profiles collections based on environment configuration.
"""

import os
import logging
from dataclasses import dataclass
from typing import Optional

from .base import (
    JobRepositoryInterface,
    ProfileRepositoryInterface,
    SavedJobRepositoryInterface,
)

logger = logging.getLogger(__name__)


@dataclass
class RepositoryConfig:
    """
    Configuration for repository initialization.

    Loaded from environment variables with sensible defaults.
    """
    # Required
    mongodb_uri: str

    # Database/collection names
    database: str = "job_board"
    jobs_collection: str = "jobs"
    saved_jobs_collection: str = "saved_jobs"
    profiles_collection: str = "profiles"

    @classmethod
    def from_env(cls) -> "RepositoryConfig":
        """
        Load configuration from environment variables.

        Environment variables:
        - MONGODB_URI (required): MongoDB connection string
        - MONGODB_DATABASE: Database name (default: job_board)

        Returns:
            RepositoryConfig instance

        Raises:
            ValueError: If MONGODB_URI is not set
        """
        mongodb_uri = os.getenv("MONGODB_URI")
        if not mongodb_uri:
            raise ValueError("MONGODB_URI environment variable is required")

        return cls(
            mongodb_uri=mongodb_uri,
            database=os.getenv("MONGODB_DATABASE", "job_board"),
        )


# Singleton repository instances
_job_repository: Optional[JobRepositoryInterface] = None
_saved_job_repository: Optional[SavedJobRepositoryInterface] = None
_profile_repository: Optional[ProfileRepositoryInterface] = None


def get_job_repository() -> JobRepositoryInterface:
    """
    Get the job repository instance.

    Uses singleton pattern for connection pooling.

    Raises:
        ValueError: If MongoDB URI is not configured
    """
    global _job_repository

    if _job_repository is None:
        from .mongo_repository import MongoJobRepository
        config = RepositoryConfig.from_env()
        _job_repository = MongoJobRepository(
            mongodb_uri=config.mongodb_uri,
            database=config.database,
            collection=config.jobs_collection,
        )
        logger.info("Initialized MongoDB job repository")

    return _job_repository


def get_saved_job_repository() -> SavedJobRepositoryInterface:
    """Get the saved-job repository instance (singleton)."""
    global _saved_job_repository

    if _saved_job_repository is None:
        from .mongo_repository import MongoSavedJobRepository
        config = RepositoryConfig.from_env()
        _saved_job_repository = MongoSavedJobRepository(
            mongodb_uri=config.mongodb_uri,
            database=config.database,
            collection=config.saved_jobs_collection,
        )
        logger.info("Initialized MongoDB saved-job repository")

    return _saved_job_repository


def get_profile_repository() -> ProfileRepositoryInterface:
    """Get the profile repository instance (singleton)."""
    global _profile_repository

    if _profile_repository is None:
        from .mongo_repository import MongoProfileRepository
        config = RepositoryConfig.from_env()
        _profile_repository = MongoProfileRepository(
            mongodb_uri=config.mongodb_uri,
            database=config.database,
            collection=config.profiles_collection,
        )
        logger.info("Initialized MongoDB profile repository")

    return _profile_repository


def reset_repositories() -> None:
    """
    Reset all repository singletons and the shared connection.

    Used for testing or when configuration changes.
    """
    global _job_repository, _saved_job_repository, _profile_repository

    from .mongo_repository import MongoRepositoryBase
    MongoRepositoryBase.reset_connection()

    _job_repository = None
    _saved_job_repository = None
    _profile_repository = None
    logger.info("Repository singletons reset")
