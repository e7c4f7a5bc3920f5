"""
MongoDB Repositories

pymongo implementations of the job, saved-job and profile repositories.

Connection Management:
- One MongoClient shared by every repository (class-level singleton)
- Client is created lazily on first use and reused across requests
- PyMongo handles connection pooling internally

Error Handling:
- Fail-fast: every public method is wrapped with store_operation, so any
  driver error reaches the caller as RemoteStoreError
- No retries
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection

from src.common.error_handling import store_operation
from .base import (
    JobRepositoryInterface,
    ProfileRepositoryInterface,
    SavedJobRepositoryInterface,
    WriteResult,
)

logger = logging.getLogger(__name__)


class MongoRepositoryBase:
    """Shared connection handling for the collection repositories."""

    _client: Optional[MongoClient] = None

    def __init__(self, mongodb_uri: str, database: str, collection: str):
        """
        Initialize repository with connection parameters.

        Args:
            mongodb_uri: MongoDB connection string
            database: Database name
            collection: Collection name
        """
        if not mongodb_uri:
            raise ValueError("MongoDB URI is required")
        self._mongodb_uri = mongodb_uri
        self._database_name = database
        self._collection_name = collection

    def _get_collection(self) -> Collection:
        """Get the MongoDB collection, creating the shared client if needed."""
        if MongoRepositoryBase._client is None:
            MongoRepositoryBase._client = MongoClient(
                self._mongodb_uri,
                serverSelectionTimeoutMS=5000,
                connectTimeoutMS=5000,
            )
            logger.info(f"MongoDB client created for database '{self._database_name}'")
        return MongoRepositoryBase._client[self._database_name][self._collection_name]

    @store_operation("ping")
    def ping(self) -> bool:
        """Round-trip to the server; raises RemoteStoreError when unreachable."""
        self._get_collection().database.command("ping")
        return True

    @classmethod
    def reset_connection(cls) -> None:
        """
        Close and drop the shared client.

        Used for testing or connection recovery.
        """
        if MongoRepositoryBase._client is not None:
            MongoRepositoryBase._client.close()
        MongoRepositoryBase._client = None
        logger.info("MongoDB repository connection reset")


class MongoJobRepository(MongoRepositoryBase, JobRepositoryInterface):
    """Jobs collection. Documents use the job id as ``_id``."""

    def __init__(self, mongodb_uri: str, database: str = "job_board", collection: str = "jobs"):
        super().__init__(mongodb_uri, database, collection)

    @store_operation("fetch jobs")
    def find_all(self) -> List[Dict[str, Any]]:
        cursor = self._get_collection().find({}).sort("posted_at", DESCENDING)
        return list(cursor)

    @store_operation("fetch job")
    def find_one(self, job_id: str) -> Optional[Dict[str, Any]]:
        return self._get_collection().find_one({"_id": job_id})

    @store_operation("fetch jobs by id")
    def find_by_ids(self, job_ids: List[str]) -> List[Dict[str, Any]]:
        if not job_ids:
            return []
        cursor = self._get_collection().find({"_id": {"$in": list(job_ids)}})
        return list(cursor.sort("posted_at", DESCENDING))

    @store_operation("insert job", log_success=True)
    def insert_one(self, document: Dict[str, Any]) -> WriteResult:
        result = self._get_collection().insert_one(document)
        return WriteResult(
            matched_count=0,
            modified_count=0,
            upserted_id=str(result.inserted_id) if result.inserted_id else None,
        )

    @store_operation("insert jobs", log_success=True)
    def insert_many(self, documents: List[Dict[str, Any]]) -> WriteResult:
        if not documents:
            return WriteResult(matched_count=0, modified_count=0)
        result = self._get_collection().insert_many(documents)
        return WriteResult(matched_count=0, modified_count=len(result.inserted_ids))

    @store_operation("update job", log_success=True)
    def update_one(self, job_id: str, fields: Dict[str, Any]) -> WriteResult:
        result = self._get_collection().update_one({"_id": job_id}, {"$set": fields})
        return WriteResult(
            matched_count=result.matched_count,
            modified_count=result.modified_count,
        )

    @store_operation("delete job", log_success=True)
    def delete_one(self, job_id: str) -> WriteResult:
        result = self._get_collection().delete_one({"_id": job_id})
        return WriteResult(
            matched_count=result.deleted_count,
            modified_count=result.deleted_count,
        )

    def ensure_indexes(self) -> None:
        """Ensure required indexes exist on the jobs collection."""
        collection = self._get_collection()
        try:
            collection.create_index([("posted_at", DESCENDING)], background=True)
            logger.info("Jobs indexes ensured")
        except Exception as e:
            logger.warning(f"Error creating jobs indexes: {e}")


class MongoSavedJobRepository(MongoRepositoryBase, SavedJobRepositoryInterface):
    """saved_jobs collection, unique on (user_id, job_id)."""

    def __init__(self, mongodb_uri: str, database: str = "job_board", collection: str = "saved_jobs"):
        super().__init__(mongodb_uri, database, collection)

    @store_operation("fetch saved jobs")
    def list_job_ids(self, user_id: str) -> List[str]:
        cursor = self._get_collection().find({"user_id": user_id}, {"job_id": 1, "_id": 0})
        return [doc["job_id"] for doc in cursor if doc.get("job_id")]

    @store_operation("save job")
    def add(self, user_id: str, job_id: str) -> WriteResult:
        # Upsert keeps a double save idempotent instead of tripping the unique index
        result = self._get_collection().update_one(
            {"user_id": user_id, "job_id": job_id},
            {"$setOnInsert": {"created_at": datetime.utcnow()}},
            upsert=True,
        )
        return WriteResult(
            matched_count=result.matched_count,
            modified_count=result.modified_count,
            upserted_id=str(result.upserted_id) if result.upserted_id else None,
        )

    @store_operation("unsave job")
    def remove(self, user_id: str, job_id: str) -> WriteResult:
        result = self._get_collection().delete_one({"user_id": user_id, "job_id": job_id})
        return WriteResult(
            matched_count=result.deleted_count,
            modified_count=result.deleted_count,
        )

    @store_operation("count saved jobs")
    def count_by_user(self) -> Dict[str, int]:
        pipeline = [{"$group": {"_id": "$user_id", "count": {"$sum": 1}}}]
        return {doc["_id"]: doc["count"] for doc in self._get_collection().aggregate(pipeline)}

    @store_operation("delete saved jobs for user")
    def delete_for_user(self, user_id: str) -> WriteResult:
        result = self._get_collection().delete_many({"user_id": user_id})
        return WriteResult(matched_count=result.deleted_count, modified_count=result.deleted_count)

    @store_operation("delete saved jobs for job")
    def delete_for_job(self, job_id: str) -> WriteResult:
        result = self._get_collection().delete_many({"job_id": job_id})
        return WriteResult(matched_count=result.deleted_count, modified_count=result.deleted_count)

    def ensure_indexes(self) -> None:
        """Ensure the unique pair index exists."""
        collection = self._get_collection()
        try:
            collection.create_index(
                [("user_id", ASCENDING), ("job_id", ASCENDING)],
                unique=True,
                background=True,
            )
            logger.info("Saved jobs indexes ensured")
        except Exception as e:
            logger.warning(f"Error creating saved jobs indexes: {e}")


class MongoProfileRepository(MongoRepositoryBase, ProfileRepositoryInterface):
    """profiles collection. ``_id`` is the user id, email is unique."""

    def __init__(self, mongodb_uri: str, database: str = "job_board", collection: str = "profiles"):
        super().__init__(mongodb_uri, database, collection)

    @store_operation("fetch profile")
    def find_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        return self._get_collection().find_one({"_id": user_id})

    @store_operation("fetch profile by email")
    def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        return self._get_collection().find_one({"email": email})

    @store_operation("fetch profiles")
    def find_all(self) -> List[Dict[str, Any]]:
        return list(self._get_collection().find({}).sort("created_at", ASCENDING))

    @store_operation("create profile", log_success=True)
    def insert_one(self, document: Dict[str, Any]) -> WriteResult:
        result = self._get_collection().insert_one(document)
        return WriteResult(
            matched_count=0,
            modified_count=0,
            upserted_id=str(result.inserted_id) if result.inserted_id else None,
        )

    @store_operation("update profile")
    def update_one(self, user_id: str, fields: Dict[str, Any]) -> WriteResult:
        result = self._get_collection().update_one({"_id": user_id}, {"$set": fields})
        return WriteResult(matched_count=result.matched_count, modified_count=result.modified_count)

    @store_operation("delete profile", log_success=True)
    def delete_one(self, user_id: str) -> WriteResult:
        result = self._get_collection().delete_one({"_id": user_id})
        return WriteResult(matched_count=result.deleted_count, modified_count=result.deleted_count)

    def ensure_indexes(self) -> None:
        """Ensure the unique email index exists."""
        collection = self._get_collection()
        try:
            collection.create_index("email", unique=True, background=True)
            logger.info("Profile indexes ensured")
        except Exception as e:
            logger.warning(f"Error creating profile indexes: {e}")
