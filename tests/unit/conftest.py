"""
Global fixtures for all unit tests.

This conftest provides autouse fixtures that prevent real external service calls:
- MongoDB connection attempts (would cause 5-30s timeout per test)
- Environment variable isolation (prevents credential leakage)

It also provides shared job factories and mock repositories.

These fixtures apply automatically to ALL tests in tests/unit/.
"""

import os
import sys
from datetime import datetime, timedelta
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

# Project root on sys.path so `src` imports work without an install
ROOT = Path(__file__).parent.parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.common.repositories.base import (  # noqa: E402
    JobRepositoryInterface,
    ProfileRepositoryInterface,
    SavedJobRepositoryInterface,
    WriteResult,
)
from src.common.types import ExperienceLevel, Job, JobType  # noqa: E402


@pytest.fixture(autouse=True)
def mock_mongodb():
    """
    Prevent MongoDB connection attempts in all unit tests.

    MongoClient("") defaults to localhost:27017, causing 5-30s timeout per test.
    """
    with patch("pymongo.MongoClient") as mock_client:
        mock_instance = MagicMock()
        mock_db = MagicMock()
        mock_collection = MagicMock()

        # Setup chain: client["db"]["collection"]
        mock_instance.__getitem__ = MagicMock(return_value=mock_db)
        mock_db.__getitem__ = MagicMock(return_value=mock_collection)
        mock_collection.find_one = MagicMock(return_value=None)
        mock_collection.find = MagicMock(return_value=[])

        mock_client.return_value = mock_instance
        yield mock_client


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """
    Isolate test environment from real credentials and configurations.
    """
    monkeypatch.setenv("MONGODB_URI", "mongodb://localhost:27017/job_board_test")
    monkeypatch.setenv("MONGODB_DATABASE", "job_board_test")
    monkeypatch.delenv("DEBUG_MODE", raising=False)


# ============================================================================
# Job factories
# ============================================================================

BASE_TIME = datetime(2025, 3, 1, 12, 0, 0)


def make_job(index: int = 0, **overrides) -> Job:
    """Build a valid Job; later indexes are posted earlier."""
    data = {
        "id": f"job-{index}",
        "title": f"Software Engineer {index}",
        "company": "Acme Corp",
        "location": "San Francisco, CA",
        "job_type": JobType.FULL_TIME,
        "experience_level": ExperienceLevel.MID,
        "remote": False,
        "salary_min": 100000,
        "salary_max": 150000,
        "description": "Build and maintain backend services.",
        "posted_at": BASE_TIME - timedelta(days=index),
    }
    data.update(overrides)
    return Job(**data)


@pytest.fixture
def job_factory():
    return make_job


@pytest.fixture
def twelve_jobs():
    return [make_job(i) for i in range(12)]


# ============================================================================
# Mock repositories
# ============================================================================

@pytest.fixture
def mock_job_repo():
    repo = MagicMock(spec=JobRepositoryInterface)
    repo.find_all.return_value = []
    repo.find_one.return_value = None
    repo.find_by_ids.return_value = []
    repo.insert_one.return_value = WriteResult(matched_count=0, modified_count=0, upserted_id="new")
    repo.insert_many.return_value = WriteResult(matched_count=0, modified_count=0)
    repo.update_one.return_value = WriteResult(matched_count=1, modified_count=1)
    repo.delete_one.return_value = WriteResult(matched_count=1, modified_count=1)
    return repo


@pytest.fixture
def mock_saved_repo():
    repo = MagicMock(spec=SavedJobRepositoryInterface)
    repo.list_job_ids.return_value = []
    repo.add.return_value = WriteResult(matched_count=0, modified_count=0, upserted_id="x")
    repo.remove.return_value = WriteResult(matched_count=1, modified_count=1)
    repo.count_by_user.return_value = {}
    repo.delete_for_user.return_value = WriteResult(matched_count=0, modified_count=0)
    repo.delete_for_job.return_value = WriteResult(matched_count=0, modified_count=0)
    return repo


@pytest.fixture
def mock_profile_repo():
    repo = MagicMock(spec=ProfileRepositoryInterface)
    repo.find_by_id.return_value = None
    repo.find_by_email.return_value = None
    repo.find_all.return_value = []
    repo.insert_one.return_value = WriteResult(matched_count=0, modified_count=0, upserted_id="new")
    repo.update_one.return_value = WriteResult(matched_count=1, modified_count=1)
    repo.delete_one.return_value = WriteResult(matched_count=1, modified_count=1)
    return repo
