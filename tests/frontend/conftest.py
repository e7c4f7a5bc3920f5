"""
Pytest fixtures for frontend/Flask tests.

The repository accessors in frontend/app.py are patched with MagicMock
repositories, so no test touches MongoDB.
"""

import os
import sys
from datetime import datetime, timedelta
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

ROOT = Path(__file__).parent.parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Set test environment BEFORE importing the app so Config picks it up
os.environ.setdefault("FLASK_SECRET_KEY", "test-secret-key")
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017/job_board_test")
os.environ["FLASK_ENV"] = "testing"

from src.common.repositories.base import WriteResult  # noqa: E402
from src.common.types import ExperienceLevel, Job, JobType  # noqa: E402

USER = {"id": "user-1", "email": "alice@example.com", "name": "Alice", "is_admin": False}
ADMIN = {"id": "admin-1", "email": "admin@example.com", "name": "Admin", "is_admin": True}


def make_job(index: int = 0, **overrides) -> Job:
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
        "posted_at": datetime(2025, 3, 1, 12, 0, 0) - timedelta(days=index),
    }
    data.update(overrides)
    return Job(**data)


@pytest.fixture
def job_factory():
    return make_job


@pytest.fixture
def app():
    """Flask app fixture with test configuration."""
    from frontend.app import app
    app.config["TESTING"] = True
    # The job board is built lazily from the (patched) job repository
    app.extensions.pop("job_board", None)
    yield app
    app.extensions.pop("job_board", None)


@pytest.fixture
def repos():
    """Patch the three repository accessors; yields (jobs, saved, profiles) mocks."""
    with patch("frontend.app._get_job_repo") as get_jobs, \
            patch("frontend.app._get_saved_repo") as get_saved, \
            patch("frontend.app._get_profile_repo") as get_profiles:
        jobs, saved, profiles = MagicMock(), MagicMock(), MagicMock()

        jobs.find_all.return_value = []
        jobs.find_one.return_value = None
        jobs.find_by_ids.return_value = []
        jobs.insert_one.return_value = WriteResult(matched_count=0, modified_count=0, upserted_id="new")
        jobs.insert_many.return_value = WriteResult(matched_count=0, modified_count=0)
        jobs.update_one.return_value = WriteResult(matched_count=1, modified_count=1)
        jobs.delete_one.return_value = WriteResult(matched_count=1, modified_count=1)

        saved.list_job_ids.return_value = []
        saved.add.return_value = WriteResult(matched_count=0, modified_count=0, upserted_id="x")
        saved.remove.return_value = WriteResult(matched_count=1, modified_count=1)
        saved.count_by_user.return_value = {}

        profiles.find_by_id.return_value = None
        profiles.find_by_email.return_value = None
        profiles.find_all.return_value = []
        profiles.insert_one.return_value = WriteResult(matched_count=0, modified_count=0, upserted_id="new")
        profiles.update_one.return_value = WriteResult(matched_count=1, modified_count=1)
        profiles.delete_one.return_value = WriteResult(matched_count=1, modified_count=1)

        get_jobs.return_value = jobs
        get_saved.return_value = saved
        get_profiles.return_value = profiles
        yield jobs, saved, profiles


@pytest.fixture
def client(app, repos):
    """Anonymous test client."""
    with app.test_client() as client:
        yield client


@pytest.fixture
def user_client(app, repos):
    """Test client signed in as a regular user with no saved jobs."""
    with app.test_client() as client:
        with client.session_transaction() as sess:
            sess["user"] = dict(USER)
            sess["saved_job_ids"] = []
        yield client


@pytest.fixture
def admin_client(app, repos):
    """Test client signed in as an administrator."""
    with app.test_client() as client:
        with client.session_transaction() as sess:
            sess["user"] = dict(ADMIN)
            sess["saved_job_ids"] = []
        yield client
