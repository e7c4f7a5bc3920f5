"""
Repository Pattern for MongoDB Operations

Provides an abstraction layer over MongoDB so services never touch pymongo
directly and tests can substitute mocks.

Public API:
- get_job_repository(): jobs collection
- get_saved_job_repository(): saved_jobs collection (user_id, job_id pairs)
- get_profile_repository(): profiles collection
- reset_repositories(): drop singletons and the shared client
- WriteResult: Result dataclass for write operations

Usage:
    from src.common.repositories import get_job_repository

    job_repo = get_job_repository()
    docs = job_repo.find_all()
"""

from .base import (
    JobRepositoryInterface,
    ProfileRepositoryInterface,
    SavedJobRepositoryInterface,
    WriteResult,
)
from .config import (
    RepositoryConfig,
    get_job_repository,
    get_profile_repository,
    get_saved_job_repository,
    reset_repositories,
)

__all__ = [
    "get_job_repository",
    "get_saved_job_repository",
    "get_profile_repository",
    "reset_repositories",
    "JobRepositoryInterface",
    "SavedJobRepositoryInterface",
    "ProfileRepositoryInterface",
    "WriteResult",
    "RepositoryConfig",
]
