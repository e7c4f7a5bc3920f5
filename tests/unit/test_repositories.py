"""
Tests for the repository pattern implementation.

The MongoDB repositories are exercised against a mocked MongoClient so no
test touches a real database.
"""

import pytest
from unittest.mock import MagicMock, patch

from pymongo import DESCENDING
from pymongo.errors import ServerSelectionTimeoutError

from src.common.error_handling import RemoteStoreError
from src.common.repositories import (
    RepositoryConfig,
    WriteResult,
    get_job_repository,
    get_profile_repository,
    get_saved_job_repository,
    reset_repositories,
)
from src.common.repositories.mongo_repository import (
    MongoJobRepository,
    MongoProfileRepository,
    MongoRepositoryBase,
    MongoSavedJobRepository,
)


class TestWriteResult:
    """Tests for WriteResult dataclass."""

    def test_write_result_defaults(self):
        """WriteResult should have sensible defaults."""
        result = WriteResult(matched_count=1, modified_count=1)

        assert result.matched_count == 1
        assert result.modified_count == 1
        assert result.upserted_id is None


class TestRepositoryConfig:
    """Tests for RepositoryConfig."""

    def test_config_from_env_minimal(self):
        """Should load minimal config from environment."""
        with patch.dict("os.environ", {"MONGODB_URI": "mongodb://atlas"}, clear=True):
            config = RepositoryConfig.from_env()

            assert config.mongodb_uri == "mongodb://atlas"
            assert config.database == "job_board"
            assert config.jobs_collection == "jobs"
            assert config.saved_jobs_collection == "saved_jobs"
            assert config.profiles_collection == "profiles"

    def test_config_database_override(self):
        env = {"MONGODB_URI": "mongodb://atlas", "MONGODB_DATABASE": "board_staging"}
        with patch.dict("os.environ", env, clear=True):
            assert RepositoryConfig.from_env().database == "board_staging"

    def test_config_from_env_missing_uri(self):
        """Should raise ValueError if MONGODB_URI is not set."""
        with patch.dict("os.environ", {}, clear=True):
            with pytest.raises(ValueError, match="MONGODB_URI"):
                RepositoryConfig.from_env()


@pytest.fixture
def mock_collection():
    """Patch the MongoClient used by the repositories and return the collection mock."""
    MongoRepositoryBase.reset_connection()
    with patch("src.common.repositories.mongo_repository.MongoClient") as mock_client:
        mock_collection = MagicMock()
        mock_db = MagicMock()
        mock_db.__getitem__.return_value = mock_collection
        mock_client.return_value.__getitem__.return_value = mock_db
        yield mock_collection
    MongoRepositoryBase.reset_connection()


class TestMongoJobRepository:

    def test_find_all_sorts_newest_first(self, mock_collection):
        cursor = MagicMock()
        cursor.sort.return_value = [{"_id": "a"}, {"_id": "b"}]
        mock_collection.find.return_value = cursor

        result = MongoJobRepository("mongodb://test").find_all()

        mock_collection.find.assert_called_once_with({})
        cursor.sort.assert_called_once_with("posted_at", DESCENDING)
        assert result == [{"_id": "a"}, {"_id": "b"}]

    def test_find_one(self, mock_collection):
        mock_collection.find_one.return_value = {"_id": "123", "title": "Test"}

        result = MongoJobRepository("mongodb://test").find_one("123")

        mock_collection.find_one.assert_called_once_with({"_id": "123"})
        assert result["title"] == "Test"

    def test_find_by_ids_empty_skips_query(self, mock_collection):
        assert MongoJobRepository("mongodb://test").find_by_ids([]) == []
        mock_collection.find.assert_not_called()

    def test_find_by_ids(self, mock_collection):
        mock_collection.find.return_value.sort.return_value = [{"_id": "a"}]

        result = MongoJobRepository("mongodb://test").find_by_ids(["a", "b"])

        mock_collection.find.assert_called_once_with({"_id": {"$in": ["a", "b"]}})
        assert result == [{"_id": "a"}]

    def test_insert_one(self, mock_collection):
        mock_collection.insert_one.return_value.inserted_id = "job-1"

        result = MongoJobRepository("mongodb://test").insert_one({"_id": "job-1"})

        assert result.upserted_id == "job-1"

    def test_insert_many_counts_inserted(self, mock_collection):
        mock_collection.insert_many.return_value.inserted_ids = ["a", "b", "c"]

        result = MongoJobRepository("mongodb://test").insert_many([{}, {}, {}])

        assert result.modified_count == 3

    def test_insert_many_empty_skips_call(self, mock_collection):
        result = MongoJobRepository("mongodb://test").insert_many([])

        assert result.modified_count == 0
        mock_collection.insert_many.assert_not_called()

    def test_update_one_uses_set(self, mock_collection):
        mock_collection.update_one.return_value.matched_count = 1
        mock_collection.update_one.return_value.modified_count = 1

        result = MongoJobRepository("mongodb://test").update_one("job-1", {"title": "New"})

        mock_collection.update_one.assert_called_once_with({"_id": "job-1"}, {"$set": {"title": "New"}})
        assert result.matched_count == 1

    def test_delete_one(self, mock_collection):
        mock_collection.delete_one.return_value.deleted_count = 0

        result = MongoJobRepository("mongodb://test").delete_one("missing")

        assert result.matched_count == 0

    def test_driver_error_becomes_remote_store_error(self, mock_collection):
        mock_collection.find.side_effect = ServerSelectionTimeoutError("no servers")

        with pytest.raises(RemoteStoreError) as exc_info:
            MongoJobRepository("mongodb://test").find_all()

        assert exc_info.value.operation == "fetch jobs"

    def test_ping(self, mock_collection):
        assert MongoJobRepository("mongodb://test").ping() is True
        mock_collection.database.command.assert_called_once_with("ping")

    def test_requires_uri(self):
        with pytest.raises(ValueError):
            MongoJobRepository("")


class TestMongoSavedJobRepository:

    def test_list_job_ids(self, mock_collection):
        mock_collection.find.return_value = [{"job_id": "a"}, {"job_id": "b"}, {}]

        result = MongoSavedJobRepository("mongodb://test").list_job_ids("user-1")

        mock_collection.find.assert_called_once_with({"user_id": "user-1"}, {"job_id": 1, "_id": 0})
        assert result == ["a", "b"]

    def test_add_is_an_upsert(self, mock_collection):
        mock_collection.update_one.return_value.upserted_id = "oid"

        MongoSavedJobRepository("mongodb://test").add("user-1", "job-1")

        args, kwargs = mock_collection.update_one.call_args
        assert args[0] == {"user_id": "user-1", "job_id": "job-1"}
        assert "$setOnInsert" in args[1]
        assert kwargs["upsert"] is True

    def test_remove(self, mock_collection):
        mock_collection.delete_one.return_value.deleted_count = 1

        result = MongoSavedJobRepository("mongodb://test").remove("user-1", "job-1")

        mock_collection.delete_one.assert_called_once_with({"user_id": "user-1", "job_id": "job-1"})
        assert result.modified_count == 1

    def test_count_by_user(self, mock_collection):
        mock_collection.aggregate.return_value = [{"_id": "u1", "count": 2}, {"_id": "u2", "count": 5}]

        assert MongoSavedJobRepository("mongodb://test").count_by_user() == {"u1": 2, "u2": 5}

    def test_delete_for_user_and_job(self, mock_collection):
        repo = MongoSavedJobRepository("mongodb://test")
        mock_collection.delete_many.return_value.deleted_count = 2

        repo.delete_for_user("u1")
        repo.delete_for_job("job-1")

        assert mock_collection.delete_many.call_args_list[0][0][0] == {"user_id": "u1"}
        assert mock_collection.delete_many.call_args_list[1][0][0] == {"job_id": "job-1"}

    def test_add_failure_raises_remote_store_error(self, mock_collection):
        mock_collection.update_one.side_effect = ServerSelectionTimeoutError("down")

        with pytest.raises(RemoteStoreError):
            MongoSavedJobRepository("mongodb://test").add("user-1", "job-1")

    def test_ensure_indexes_unique_pair(self, mock_collection):
        MongoSavedJobRepository("mongodb://test").ensure_indexes()

        assert mock_collection.create_index.call_args[1]["unique"] is True


class TestMongoProfileRepository:

    def test_find_by_email(self, mock_collection):
        MongoProfileRepository("mongodb://test").find_by_email("a@b.c")

        mock_collection.find_one.assert_called_once_with({"email": "a@b.c"})

    def test_update_one(self, mock_collection):
        mock_collection.update_one.return_value.matched_count = 1
        mock_collection.update_one.return_value.modified_count = 1

        result = MongoProfileRepository("mongodb://test").update_one("u1", {"name": "New"})

        mock_collection.update_one.assert_called_once_with({"_id": "u1"}, {"$set": {"name": "New"}})
        assert result.matched_count == 1


class TestSharedClient:

    def test_client_is_created_once(self, mock_collection):
        with patch("src.common.repositories.mongo_repository.MongoClient") as mock_client:
            MongoRepositoryBase.reset_connection()
            mock_client.return_value.__getitem__.return_value.__getitem__.return_value = MagicMock()

            MongoJobRepository("mongodb://test").find_one("a")
            MongoSavedJobRepository("mongodb://test").list_job_ids("u")

            assert mock_client.call_count == 1


class TestFactory:

    @pytest.fixture(autouse=True)
    def reset(self):
        reset_repositories()
        yield
        reset_repositories()

    def test_singletons(self):
        assert get_job_repository() is get_job_repository()
        assert isinstance(get_job_repository(), MongoJobRepository)
        assert isinstance(get_saved_job_repository(), MongoSavedJobRepository)
        assert isinstance(get_profile_repository(), MongoProfileRepository)

    def test_missing_uri(self, monkeypatch):
        monkeypatch.delenv("MONGODB_URI")

        with pytest.raises(ValueError, match="MONGODB_URI"):
            get_job_repository()
