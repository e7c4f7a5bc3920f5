"""
Flask application for the Job Board.

JSON API over the MongoDB jobs, saved_jobs and profiles collections:
- Public job listing with keyword/location/salary/type/level/remote filters
  and 5-per-page pagination
- Email/password accounts with session auth
- Saved jobs (bookmarks) for signed-in users
- Profile settings
- Admin dashboard: job CRUD, CSV import/export, user management

Stack: Flask + pymongo
"""

import logging
import os
from functools import wraps
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from flask import Flask, Response, jsonify, request, session
from pydantic import ValidationError

# Load environment variables
load_dotenv()

# Import version (from parent directory)
import sys
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
try:
    from version import __version__
    APP_VERSION = __version__
except ImportError:
    APP_VERSION = "dev"

from src.common.config import Config
from src.common.error_handling import (
    AuthenticationError,
    JobValidationError,
    Notification,
    NotFoundError,
    RemoteStoreError,
)
from src.common.logger import setup_logging
from src.common.repositories import (
    get_job_repository,
    get_profile_repository,
    get_saved_job_repository,
)
from src.common.types import FilterCriteria, UserIdentity
from src.common.utils import parse_bool
from src.services.auth_service import AuthService
from src.services.csv_service import export_filename, export_jobs_csv, import_jobs_csv
from src.services.job_board_service import JobBoardService
from src.services.jobs_admin_service import JobsAdminService
from src.services.profile_service import ProfileService
from src.services.saved_jobs_service import (
    SAVE_FAILED_NOTIFICATION,
    SavedJobsTracker,
    ToggleOutcome,
    notification_for,
)

app = Flask(__name__)

# Configure logging
setup_logging(Config.LOG_LEVEL, Config.LOG_FORMAT, debug=Config.DEBUG_MODE)
logger = logging.getLogger(__name__)

# Session configuration
flask_secret_key = Config.FLASK_SECRET_KEY

if not flask_secret_key:
    if os.getenv("FLASK_ENV") == "production":
        raise RuntimeError(
            "CRITICAL: FLASK_SECRET_KEY not set. "
            "Sessions would be invalidated on every restart."
        )
    logger.warning("FLASK_SECRET_KEY not set. Generating random key (sessions will not persist between restarts)")
    flask_secret_key = os.urandom(24).hex()

app.secret_key = flask_secret_key

# Cookie security settings
app.config["SESSION_COOKIE_HTTPONLY"] = True
is_production = os.getenv("FLASK_ENV") == "production"
app.config["SESSION_COOKIE_SECURE"] = is_production
app.config["SESSION_COOKIE_SAMESITE"] = "Lax"
app.config["PERMANENT_SESSION_LIFETIME"] = 60 * 60 * 24 * 31  # 31 days

# CSV uploads are the only large request bodies
app.config["MAX_CONTENT_LENGTH"] = Config.MAX_CSV_UPLOAD_BYTES

# Session keys
SESSION_USER = "user"
SESSION_SAVED_IDS = "saved_job_ids"
SESSION_CRITERIA_KEY = "criteria_key"
SESSION_PAGE = "page"


# ============================================================================
# Repository and service wiring
# ============================================================================

def _get_job_repo():
    return get_job_repository()


def _get_saved_repo():
    return get_saved_job_repository()


def _get_profile_repo():
    return get_profile_repository()


def _job_board() -> JobBoardService:
    """
    The process-wide job board.

    Shared by every request so that concurrent reloads draw tokens from one
    sequencer and a reload overtaken by a newer one is discarded.
    """
    board = app.extensions.get("job_board")
    if board is None:
        board = JobBoardService(_get_job_repo(), page_size=Config.JOBS_PER_PAGE)
        app.extensions["job_board"] = board
    return board


def _auth_service() -> AuthService:
    return AuthService(
        _get_profile_repo(),
        admin_emails=Config.ADMIN_EMAILS,
        min_password_length=Config.MIN_PASSWORD_LENGTH,
    )


def _profile_service() -> ProfileService:
    return ProfileService(_get_profile_repo(), _get_saved_repo(), _get_job_repo())


def _admin_service() -> JobsAdminService:
    return JobsAdminService(_get_job_repo(), _get_saved_repo())


# ============================================================================
# Session helpers
# ============================================================================

def current_user() -> Optional[UserIdentity]:
    """Identity stored in the session, or None when anonymous."""
    data = session.get(SESSION_USER)
    if not data:
        return None
    return UserIdentity(
        id=data["id"],
        email=data.get("email", ""),
        name=data.get("name", ""),
        is_admin=bool(data.get("is_admin")),
    )


def _tracker() -> SavedJobsTracker:
    """Saved-set tracker restored from the session cache."""
    return SavedJobsTracker(
        _get_saved_repo(),
        user=current_user(),
        saved_ids=session.get(SESSION_SAVED_IDS, []),
    )


def _remember_saved(tracker: SavedJobsTracker) -> None:
    session[SESSION_SAVED_IDS] = tracker.sorted_ids()


def _start_session(user: UserIdentity) -> Dict[str, Any]:
    """
    Adopt a freshly authenticated identity.

    The saved set is reloaded for the new user; if that fetch fails the
    user is still signed in with an empty set and a notification.
    """
    session.clear()
    session[SESSION_USER] = user.to_dict()
    session.permanent = True

    tracker = SavedJobsTracker(_get_saved_repo())
    payload: Dict[str, Any] = {"user": user.to_dict()}
    try:
        tracker.set_user(user)
    except RemoteStoreError as e:
        logger.warning(f"Could not load saved jobs at sign-in: {e}")
        payload["notification"] = Notification(
            title="Error",
            description="Failed to load your saved jobs.",
            variant="destructive",
        ).to_dict()
    _remember_saved(tracker)
    payload["saved_job_ids"] = tracker.sorted_ids()
    return payload


# ============================================================================
# Authentication
# ============================================================================

def login_required(f):
    """Decorator to require a signed-in user. Returns JSON 401 otherwise."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if current_user() is None:
            return jsonify({"error": "Not authenticated"}), 401
        return f(*args, **kwargs)
    return decorated_function


def admin_required(f):
    """Decorator for admin dashboard routes: 401 when anonymous, 403 for non-admins."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        user = current_user()
        if user is None:
            return jsonify({"error": "Not authenticated"}), 401
        if not user.is_admin:
            return jsonify({"error": "Admin access required"}), 403
        return f(*args, **kwargs)
    return decorated_function


# ============================================================================
# Error handlers
# ============================================================================

@app.errorhandler(RemoteStoreError)
def handle_store_error(e: RemoteStoreError):
    logger.error(f"Store failure during {request.method} {request.path}: {e}")
    return jsonify({
        "error": "store_unavailable",
        "message": f"Failed to {e.operation}. Please try again later.",
        "notification": Notification(
            title="Error",
            description=f"Failed to {e.operation}. Please try again later.",
            variant="destructive",
        ).to_dict(),
    }), 502


@app.errorhandler(JobValidationError)
def handle_validation_error(e: JobValidationError):
    return jsonify({
        "error": "validation_failed",
        "message": str(e),
        "fields": e.field_errors,
    }), 400


@app.errorhandler(NotFoundError)
def handle_not_found(e: NotFoundError):
    return jsonify({"error": "not_found", "message": str(e)}), 404


@app.errorhandler(AuthenticationError)
def handle_auth_error(e: AuthenticationError):
    return jsonify({"error": "authentication_failed", "message": str(e)}), 401


@app.errorhandler(413)
def handle_too_large(e):
    limit_mb = Config.MAX_CSV_UPLOAD_BYTES // (1024 * 1024)
    return jsonify({
        "error": "file_too_large",
        "message": f"Upload exceeds the {limit_mb} MB limit",
    }), 413


def _request_data() -> Dict[str, Any]:
    """JSON body if sent, otherwise form fields."""
    if request.is_json:
        return request.get_json(silent=True) or {}
    return request.form.to_dict()


# ============================================================================
# Health
# ============================================================================

@app.route("/health", methods=["GET"])
def public_health_check():
    """
    Public health endpoint for external monitoring.

    No authentication required. Returns minimal info.
    """
    try:
        _get_job_repo().ping()
        mongo_status = "connected"
    except (RemoteStoreError, ValueError):
        mongo_status = "disconnected"

    return jsonify({
        "status": "healthy" if mongo_status == "connected" else "degraded",
        "version": APP_VERSION,
        "services": {"mongodb": mongo_status},
    })


# ============================================================================
# Authentication Routes
# ============================================================================

@app.route("/signup", methods=["POST"])
def signup():
    """Create an account and sign it in."""
    data = _request_data()
    try:
        user = _auth_service().sign_up(data.get("email"), data.get("password"), data.get("name"))
    except AuthenticationError as e:
        return jsonify({"error": "email_taken", "message": str(e)}), 409
    return jsonify(_start_session(user)), 201


@app.route("/login", methods=["POST"])
def login():
    """Check credentials and load the user's saved jobs."""
    data = _request_data()
    user = _auth_service().sign_in(data.get("email"), data.get("password"))
    return jsonify(_start_session(user))


@app.route("/logout", methods=["POST"])
def logout():
    """Sign out; the saved-job cache goes with the session."""
    session.clear()
    return jsonify({"success": True})


@app.route("/api/me", methods=["GET"])
@login_required
def me():
    return jsonify({"user": current_user().to_dict(), "saved_job_ids": session.get(SESSION_SAVED_IDS, [])})


# ============================================================================
# Job listing
# ============================================================================

def _criteria_from_request() -> FilterCriteria:
    args = request.args
    try:
        return FilterCriteria.model_validate({
            "keyword": args.get("keyword"),
            "location": args.get("location"),
            "salary_min": args.get("salary_min"),
            "salary_max": args.get("salary_max"),
            "job_type": args.getlist("job_type"),
            "experience_level": args.getlist("experience_level"),
            "remote": parse_bool(args.get("remote")),
        })
    except ValidationError as e:
        raise JobValidationError.from_pydantic(e) from e


@app.route("/api/jobs", methods=["GET"])
def list_jobs():
    """
    Filtered, paginated job listing.

    Query Parameters:
        keyword: Case-insensitive match on title, company or description
        location: Case-insensitive substring of the job location
        salary_min / salary_max: Salary bounds (absent job bounds pass)
        job_type, experience_level: Repeatable; any listed value matches
        remote: true to show remote jobs only
        page: Page number; out-of-range pages keep the current page

    Returns:
        JSON with jobs (each flagged ``saved`` for signed-in users) and
        pagination metadata. Changing any filter returns page 1.
    """
    criteria = _criteria_from_request()
    requested_page = request.args.get("page", type=int)
    current_page = session.get(SESSION_PAGE, 1)

    board = _job_board()
    board.load_jobs()
    listing = board.list_jobs(
        criteria,
        page=requested_page if requested_page is not None else current_page,
        previous_key=session.get(SESSION_CRITERIA_KEY),
        current_page=current_page,
    )

    session[SESSION_CRITERIA_KEY] = listing.criteria_key
    session[SESSION_PAGE] = listing.pagination["page"]

    if current_user() is not None:
        listing.saved_ids = session.get(SESSION_SAVED_IDS, [])

    return jsonify(listing.to_dict())


# ============================================================================
# Saved jobs
# ============================================================================

@app.route("/api/saved-jobs/<job_id>/toggle", methods=["POST"])
def toggle_saved_job(job_id: str):
    """
    Save or unsave a job for the signed-in user.

    Anonymous callers get 401 with ``auth_required: true`` and nothing
    changes. A store failure returns 502 and the saved set is unchanged.
    """
    tracker = _tracker()
    try:
        outcome = tracker.toggle_save(job_id)
    except RemoteStoreError as e:
        logger.error(f"Toggle save failed for job {job_id}: {e}")
        title, description = SAVE_FAILED_NOTIFICATION
        return jsonify({
            "error": "store_unavailable",
            "message": description,
            "saved": tracker.is_saved(job_id),
            "notification": Notification(title=title, description=description, variant="destructive").to_dict(),
        }), 502

    if outcome is ToggleOutcome.AUTH_REQUIRED:
        return jsonify({
            "error": "Not authenticated",
            "auth_required": True,
            "notification": notification_for(outcome).to_dict(),
        }), 401

    _remember_saved(tracker)
    return jsonify({
        "outcome": outcome.value,
        "saved": tracker.is_saved(job_id),
        "saved_job_ids": tracker.sorted_ids(),
        "notification": notification_for(outcome).to_dict(),
    })


@app.route("/api/saved-jobs/<job_id>", methods=["DELETE"])
@login_required
def unsave_job(job_id: str):
    """Remove a job from the saved list (profile page). Store failures return 502."""
    tracker = _tracker()
    outcome = tracker.unsave(job_id)
    _remember_saved(tracker)
    return jsonify({
        "outcome": outcome.value,
        "saved_job_ids": tracker.sorted_ids(),
        "notification": notification_for(outcome).to_dict(),
    })


@app.route("/api/saved-jobs", methods=["GET"])
@login_required
def list_saved_jobs():
    """Saved job records for the current user, newest first."""
    jobs = _profile_service().list_saved_jobs(current_user().id)
    return jsonify({"jobs": [job.to_api() for job in jobs], "count": len(jobs)})


# ============================================================================
# Profile
# ============================================================================

@app.route("/api/profile", methods=["GET"])
@login_required
def get_profile():
    return jsonify({"profile": _profile_service().get_profile(current_user().id)})


@app.route("/api/profile", methods=["PUT"])
@login_required
def update_profile():
    """Update the display name."""
    user = current_user()
    profile = _profile_service().update_name(user.id, _request_data().get("name"))
    session[SESSION_USER] = dict(user.to_dict(), name=profile["name"])
    return jsonify({
        "profile": profile,
        "notification": Notification(
            title="Profile updated",
            description="Your profile has been updated successfully",
        ).to_dict(),
    })


# ============================================================================
# Admin: jobs
# ============================================================================

@app.route("/api/admin/jobs", methods=["GET"])
@admin_required
def admin_list_jobs():
    """All jobs, optionally narrowed by a title/company ``search`` term."""
    jobs = _admin_service().search_jobs(request.args.get("search"))
    return jsonify({"jobs": [job.to_api() for job in jobs], "count": len(jobs)})


@app.route("/api/admin/jobs", methods=["POST"])
@admin_required
def admin_create_job():
    job = _admin_service().create_job(_request_data())
    return jsonify({"job": job.to_api()}), 201


@app.route("/api/admin/jobs/<job_id>", methods=["PUT"])
@admin_required
def admin_update_job(job_id: str):
    job = _admin_service().update_job(job_id, _request_data())
    return jsonify({"job": job.to_api()})


@app.route("/api/admin/jobs/<job_id>", methods=["DELETE"])
@admin_required
def admin_delete_job(job_id: str):
    _admin_service().delete_job(job_id)
    return jsonify({"success": True, "deleted": job_id})


@app.route("/api/admin/jobs/export", methods=["GET"])
@admin_required
def admin_export_jobs():
    """Download every job as CSV."""
    content = export_jobs_csv(_admin_service().fetch_jobs())
    return Response(
        content,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={export_filename()}"},
    )


@app.route("/api/admin/jobs/import", methods=["POST"])
@admin_required
def admin_import_jobs():
    """
    Bulk-insert jobs from an uploaded CSV (``file`` form field).

    Rows that fail validation are skipped and listed in the response.
    """
    upload = request.files.get("file")
    if upload is None or not upload.filename:
        return jsonify({"error": "no_file", "message": "Please select a CSV file to upload."}), 400

    try:
        text = upload.read().decode("utf-8-sig")
    except UnicodeDecodeError:
        return jsonify({"error": "bad_encoding", "message": "CSV file must be UTF-8 encoded"}), 400

    report = import_jobs_csv(text, _get_job_repo())
    return jsonify(report.to_dict())


# ============================================================================
# Admin: users
# ============================================================================

@app.route("/api/admin/users", methods=["GET"])
@admin_required
def admin_list_users():
    users = _profile_service().list_users(request.args.get("search"))
    return jsonify({"users": [user.to_dict() for user in users], "count": len(users)})


@app.route("/api/admin/users/<user_id>", methods=["DELETE"])
@admin_required
def admin_delete_user(user_id: str):
    if user_id == current_user().id:
        return jsonify({"error": "cannot_delete_self", "message": "Admins cannot delete their own account"}), 400
    _profile_service().delete_user(user_id)
    return jsonify({"success": True, "deleted": user_id})


# ============================================================================
# Application Entry Point
# ============================================================================

def main():
    """Validate configuration (fail fast) and start the development server."""
    Config.validate()

    port = int(os.getenv("FLASK_PORT", 5000))
    debug = os.getenv("FLASK_DEBUG", "true").lower() == "true"

    logger.info(Config.summary())
    print(f"Starting Job Board on http://localhost:{port}")
    app.run(host="0.0.0.0", port=port, debug=debug)


if __name__ == "__main__":
    main()
