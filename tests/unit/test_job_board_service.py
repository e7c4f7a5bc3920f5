"""
Tests for JobBoardService: fetch, filter, page reset and stale-fetch handling.
"""

import logging

import pytest

from src.common.error_handling import RemoteStoreError
from src.common.types import FilterCriteria, JobType
from src.services.job_board_service import JobBoardService, documents_to_jobs


@pytest.fixture
def board(mock_job_repo, twelve_jobs):
    mock_job_repo.find_all.return_value = [job.to_document() for job in twelve_jobs]
    service = JobBoardService(mock_job_repo, page_size=5)
    service.load_jobs()
    return service


class TestLoading:

    def test_load_converts_documents(self, board, twelve_jobs):
        assert board.jobs == twelve_jobs

    def test_malformed_documents_are_skipped(self, job_factory):
        good = job_factory(0).to_document()
        bad = {"_id": "broken", "title": "No company"}

        jobs = documents_to_jobs([good, bad])

        assert [job.id for job in jobs] == ["job-0"]

    def test_store_failure_keeps_previous_list(self, board, mock_job_repo, twelve_jobs):
        mock_job_repo.find_all.side_effect = RemoteStoreError("fetch jobs", "timeout")

        with pytest.raises(RemoteStoreError):
            board.load_jobs()

        assert board.jobs == twelve_jobs

    def test_stale_load_is_discarded(self, mock_job_repo, job_factory):
        service = JobBoardService(mock_job_repo, page_size=5)
        older = service.begin_load()
        newer = service.begin_load()

        assert service.complete_load(newer, [job_factory(1)]) is True
        assert service.complete_load(older, [job_factory(0)]) is False
        assert [job.id for job in service.jobs] == ["job-1"]

    def test_overtaken_load_is_not_logged_as_loaded(self, mock_job_repo, job_factory, caplog):
        service = JobBoardService(mock_job_repo, page_size=5)
        fetches = []

        def find_all(*args, **kwargs):
            fetches.append(None)
            if len(fetches) == 1:
                service.load_jobs()
                return [job_factory(0).to_document(), job_factory(1).to_document()]
            return [job_factory(2).to_document()]

        mock_job_repo.find_all.side_effect = find_all

        with caplog.at_level(logging.INFO, logger="src.services.job_board_service"):
            jobs = service.load_jobs()

        assert [job.id for job in jobs] == ["job-2"]
        assert "Loaded 1 jobs" in caplog.text
        assert "Loaded 2 jobs" not in caplog.text

    def test_invalid_page_size_rejected(self, mock_job_repo):
        with pytest.raises(ValueError):
            JobBoardService(mock_job_repo, page_size=0)


class TestListing:

    def test_first_page(self, board):
        listing = board.list_jobs()

        assert [job.id for job in listing.jobs] == [f"job-{i}" for i in range(5)]
        assert listing.pagination["total_pages"] == 3
        assert listing.total_jobs == 12

    def test_last_page_is_partial(self, board):
        listing = board.list_jobs(page=3)

        assert [job.id for job in listing.jobs] == ["job-10", "job-11"]
        assert listing.scroll_to_top is True

    def test_out_of_range_page_keeps_current_page(self, board):
        listing = board.list_jobs(page=9, current_page=2)

        assert listing.pagination["page"] == 2
        assert listing.scroll_to_top is False

    def test_same_page_does_not_scroll(self, board):
        listing = board.list_jobs(page=2, current_page=2)

        assert listing.pagination["page"] == 2
        assert listing.scroll_to_top is False

    def test_criteria_change_resets_to_first_page(self, board):
        first = board.list_jobs(page=3)

        listing = board.list_jobs(
            FilterCriteria(keyword="engineer"),
            page=3,
            previous_key=first.criteria_key,
            current_page=3,
        )

        assert listing.page_reset is True
        assert listing.pagination["page"] == 1

    def test_same_criteria_keeps_requested_page(self, board):
        criteria = FilterCriteria(keyword="engineer")
        first = board.list_jobs(criteria)

        listing = board.list_jobs(criteria, page=2, previous_key=first.criteria_key)

        assert listing.page_reset is False
        assert listing.pagination["page"] == 2

    def test_filter_narrows_page(self, mock_job_repo, job_factory):
        jobs = [
            job_factory(0, job_type=JobType.FULL_TIME, remote=True),
            job_factory(1, job_type=JobType.FULL_TIME, remote=False),
        ]
        mock_job_repo.find_all.return_value = [job.to_document() for job in jobs]
        service = JobBoardService(mock_job_repo, page_size=5)
        service.load_jobs()

        listing = service.list_jobs(FilterCriteria(job_type=[JobType.FULL_TIME], remote=True))

        assert [job.id for job in listing.jobs] == ["job-0"]
        assert listing.pagination["total_count"] == 1

    def test_no_matches(self, board):
        listing = board.list_jobs(FilterCriteria(keyword="no-such-thing"))

        assert listing.jobs == []
        assert listing.pagination["total_pages"] == 0
        assert listing.pagination["page"] == 1

    def test_to_dict_marks_saved_jobs(self, board):
        listing = board.list_jobs()
        listing.saved_ids = ["job-1"]

        data = listing.to_dict()

        assert [job["saved"] for job in data["jobs"]] == [False, True, False, False, False]
        assert data["jobs"][0]["job_type"] == "Full-time"
