"""
Interview repository for Mock Interviewer.

This module provides persistence for generated interviews and the feedback
produced for them, backed by MongoDB.
"""
import uuid
import logging
from typing import Any, Dict, List, Optional
import pymongo
from pymongo.mongo_client import MongoClient

from mock_interviewer.models.feedback import FeedbackRecord
from mock_interviewer.models.interview import Interview
from mock_interviewer.utils.config import get_db_config, LATEST_INTERVIEWS_LIMIT

logger = logging.getLogger(__name__)

class InterviewRepository:
    """Stores interviews and feedback documents in MongoDB."""

    def __init__(
        self,
        connection_uri: Optional[str] = None,
        database_name: Optional[str] = None,
        interviews_collection: Optional[str] = None,
        feedback_collection: Optional[str] = None,
        database: Optional[Any] = None
    ):
        """
        Initialize the repository.

        Args:
            connection_uri: MongoDB connection URI (defaults to configuration)
            database_name: Name of the database
            interviews_collection: Collection holding interviews
            feedback_collection: Collection holding feedback
            database: Already-open database handle, used instead of connecting
        """
        db_config = get_db_config()
        self.client = None

        if database is None:
            connection_uri = connection_uri or db_config["uri"]
            self.client = MongoClient(
                connection_uri,
                maxPoolSize=50,
                minPoolSize=5,
                maxIdleTimeMS=30000,
                serverSelectionTimeoutMS=5000,
                connectTimeoutMS=10000,
                socketTimeoutMS=20000
            )
            database = self.client[database_name or db_config["database"]]

        self.db = database
        self.interviews = self.db[interviews_collection or db_config["interviews_collection"]]
        self.feedback = self.db[feedback_collection or db_config["feedback_collection"]]

        try:
            self.interviews.create_index([("user_id", pymongo.ASCENDING), ("created_at", pymongo.DESCENDING)], background=True)
            self.interviews.create_index([("finalized", pymongo.ASCENDING), ("created_at", pymongo.DESCENDING)], background=True)
            self.feedback.create_index([("interview_id", pymongo.ASCENDING), ("user_id", pymongo.ASCENDING)], background=True)
        except Exception as e:
            logger.warning(f"Index creation warning (may already exist): {e}")

        logger.info("Interview repository initialized")

    @staticmethod
    def _from_document(document: Dict[str, Any]) -> Dict[str, Any]:
        data = dict(document)
        data["id"] = str(data.pop("_id"))
        return data

    def get_interview_by_id(self, interview_id: str) -> Optional[Interview]:
        """
        Get an interview by ID.

        Args:
            interview_id: Interview identifier

        Returns:
            Interview or None if not found
        """
        try:
            document = self.interviews.find_one({"_id": interview_id})
            if not document:
                return None
            return Interview(**self._from_document(document))
        except Exception as e:
            logger.error(f"Error retrieving interview {interview_id}: {e}")
            return None

    def get_feedback_by_interview_id(self, interview_id: str, user_id: str) -> Optional[FeedbackRecord]:
        """
        Get a user's feedback for an interview.

        Args:
            interview_id: Interview identifier
            user_id: User identifier

        Returns:
            FeedbackRecord or None if not found or either identifier is empty
        """
        if not interview_id or not user_id:
            return None

        try:
            document = self.feedback.find_one({"interview_id": interview_id, "user_id": user_id})
            if not document:
                return None
            return FeedbackRecord(**self._from_document(document))
        except Exception as e:
            logger.error(f"Error retrieving feedback for interview {interview_id}: {e}")
            return None

    def get_latest_interviews(self, user_id: str, limit: int = LATEST_INTERVIEWS_LIMIT) -> List[Interview]:
        """
        Get the most recent finalized interviews created by other users.

        Args:
            user_id: User whose own interviews are excluded
            limit: Maximum number of interviews to return

        Returns:
            Interviews, newest first
        """
        if not user_id:
            return []

        try:
            documents = self.interviews.find(
                {"finalized": True, "user_id": {"$ne": user_id}},
                sort=[("created_at", pymongo.DESCENDING)],
                limit=limit
            )
            return [Interview(**self._from_document(document)) for document in documents]
        except Exception as e:
            logger.error(f"Error retrieving latest interviews: {e}")
            return []

    def get_interviews_by_user_id(self, user_id: str) -> List[Interview]:
        """
        Get all interviews created by a user.

        Args:
            user_id: User identifier

        Returns:
            Interviews, newest first
        """
        if not user_id:
            return []

        try:
            documents = self.interviews.find(
                {"user_id": user_id},
                sort=[("created_at", pymongo.DESCENDING)]
            )
            interviews = [Interview(**self._from_document(document)) for document in documents]
            logger.info(f"Found {len(interviews)} interviews for user {user_id}")
            return interviews
        except Exception as e:
            logger.error(f"Error retrieving interviews for user {user_id}: {e}")
            return []

    def save_interview(self, interview: Interview) -> str:
        """
        Insert a new interview.

        Returns:
            Interview ID
        """
        interview_id = interview.id or str(uuid.uuid4())
        document = interview.model_dump(exclude={"id"})
        document["_id"] = interview_id

        try:
            self.interviews.insert_one(document)
            logger.info(f"Created interview {interview_id} for user {interview.user_id}")
            return interview_id
        except Exception as e:
            logger.error(f"Error creating interview: {e}")
            raise

    def save_feedback(self, record: FeedbackRecord, feedback_id: Optional[str] = None) -> str:
        """
        Write a feedback document, overwriting it when an ID is given.

        Args:
            record: Feedback to store
            feedback_id: Existing feedback ID to overwrite

        Returns:
            Feedback ID
        """
        feedback_id = feedback_id or record.id or str(uuid.uuid4())
        document = record.model_dump(mode="json", exclude={"id"})
        document["created_at"] = record.created_at

        try:
            self.feedback.replace_one({"_id": feedback_id}, document, upsert=True)
            logger.info(f"Saved feedback {feedback_id} for interview {record.interview_id}")
            return feedback_id
        except Exception as e:
            logger.error(f"Error saving feedback: {e}")
            raise

    def close(self):
        """Close the MongoDB connection if this repository opened it."""
        if self.client is not None:
            self.client.close()
