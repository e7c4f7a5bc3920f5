"""
Services module for the job board.

Each service takes its repositories in the constructor so the web layer
wires real MongoDB repositories and tests pass mocks.
"""

from src.services.auth_service import AuthService
from src.services.csv_service import ImportReport, export_filename, export_jobs_csv, import_jobs_csv
from src.services.job_board_service import JobBoardService, JobListing
from src.services.jobs_admin_service import JobsAdminService
from src.services.profile_service import ProfileService, UserSummary
from src.services.saved_jobs_service import SavedJobsTracker, ToggleOutcome

__all__ = [
    # Public listing
    "JobBoardService",
    "JobListing",
    "SavedJobsTracker",
    "ToggleOutcome",
    # Accounts
    "AuthService",
    "ProfileService",
    "UserSummary",
    # Admin
    "JobsAdminService",
    "ImportReport",
    "import_jobs_csv",
    "export_jobs_csv",
    "export_filename",
]
