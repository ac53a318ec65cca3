"""
Unit tests for InterviewRepository.
"""
import pytest
from datetime import datetime
from unittest.mock import Mock, MagicMock, patch

import pymongo

from mock_interviewer.models.feedback import FeedbackRecord
from mock_interviewer.models.interview import Interview
from mock_interviewer.services.interview_repository import InterviewRepository
from mock_interviewer.utils.constants import FEEDBACK_CATEGORIES


def interview_document(interview_id="int-1", user_id="user-2"):
    return {
        "_id": interview_id,
        "user_id": user_id,
        "role": "Frontend Developer",
        "type": "technical",
        "level": "Junior",
        "techstack": ["React", "TypeScript"],
        "questions": ["What is JSX?"],
        "finalized": True,
        "cover_image": "/adobe.png",
        "created_at": datetime(2024, 3, 15, 10, 0)
    }


def feedback_record():
    return FeedbackRecord(
        interview_id="int-1",
        user_id="user-1",
        total_score=80,
        category_scores=[{"name": name, "score": 80, "comment": "good"} for name in FEEDBACK_CATEGORIES],
        strengths=["Structured"],
        areas_for_improvement=["Depth"],
        final_assessment="Hire"
    )


@pytest.fixture
def collections():
    return {"interviews": Mock(), "feedback": Mock()}


@pytest.fixture
def repository(collections):
    database = MagicMock()
    database.__getitem__.side_effect = collections.__getitem__
    return InterviewRepository(
        database=database,
        interviews_collection="interviews",
        feedback_collection="feedback"
    )


class TestInitialization:
    """Test repository setup."""

    def test_injected_database_does_not_connect(self, collections):
        database = MagicMock()
        database.__getitem__.side_effect = collections.__getitem__

        with patch("mock_interviewer.services.interview_repository.MongoClient") as mock_client:
            repository = InterviewRepository(
                database=database, interviews_collection="interviews", feedback_collection="feedback"
            )

        mock_client.assert_not_called()
        assert repository.client is None
        assert repository.interviews is collections["interviews"]
        assert repository.feedback is collections["feedback"]

    def test_creates_indexes(self, repository, collections):
        assert collections["interviews"].create_index.call_count == 2
        collections["feedback"].create_index.assert_called_once()

    def test_index_errors_are_tolerated(self, collections):
        collections["interviews"].create_index.side_effect = RuntimeError("not authorized")
        database = MagicMock()
        database.__getitem__.side_effect = collections.__getitem__

        repository = InterviewRepository(
            database=database, interviews_collection="interviews", feedback_collection="feedback"
        )

        assert repository.interviews is collections["interviews"]

    def test_close_only_closes_own_client(self, repository):
        repository.close()

        with patch("mock_interviewer.services.interview_repository.MongoClient") as mock_client:
            owned = InterviewRepository(connection_uri="mongodb://localhost:27017", database_name="test")
            owned.close()

        mock_client.return_value.close.assert_called_once()


class TestInterviews:
    """Test interview queries."""

    def test_get_interview_by_id(self, repository, collections):
        collections["interviews"].find_one.return_value = interview_document()

        interview = repository.get_interview_by_id("int-1")

        collections["interviews"].find_one.assert_called_once_with({"_id": "int-1"})
        assert isinstance(interview, Interview)
        assert interview.id == "int-1"
        assert interview.questions == ["What is JSX?"]

    def test_get_interview_by_id_missing(self, repository, collections):
        collections["interviews"].find_one.return_value = None

        assert repository.get_interview_by_id("nope") is None

    def test_get_interview_by_id_error(self, repository, collections):
        collections["interviews"].find_one.side_effect = RuntimeError("connection reset")

        assert repository.get_interview_by_id("int-1") is None

    def test_get_latest_interviews_excludes_own(self, repository, collections):
        collections["interviews"].find.return_value = [interview_document("int-2"), interview_document("int-3")]

        interviews = repository.get_latest_interviews("user-1", limit=2)

        collections["interviews"].find.assert_called_once_with(
            {"finalized": True, "user_id": {"$ne": "user-1"}},
            sort=[("created_at", pymongo.DESCENDING)],
            limit=2
        )
        assert [interview.id for interview in interviews] == ["int-2", "int-3"]

    def test_get_latest_interviews_without_user(self, repository, collections):
        assert repository.get_latest_interviews("") == []
        collections["interviews"].find.assert_not_called()

    def test_get_interviews_by_user_id(self, repository, collections):
        collections["interviews"].find.return_value = [interview_document(user_id="user-1")]

        interviews = repository.get_interviews_by_user_id("user-1")

        collections["interviews"].find.assert_called_once_with(
            {"user_id": "user-1"},
            sort=[("created_at", pymongo.DESCENDING)]
        )
        assert interviews[0].user_id == "user-1"

    def test_get_interviews_by_user_id_error(self, repository, collections):
        collections["interviews"].find.side_effect = RuntimeError("timeout")

        assert repository.get_interviews_by_user_id("user-1") == []

    def test_save_interview_assigns_id(self, repository, collections):
        interview = Interview(user_id="user-1", role="Backend", type="mixed", level="Senior")

        interview_id = repository.save_interview(interview)

        document = collections["interviews"].insert_one.call_args[0][0]
        assert document["_id"] == interview_id
        assert "id" not in document
        assert document["user_id"] == "user-1"

    def test_save_interview_propagates_errors(self, repository, collections):
        collections["interviews"].insert_one.side_effect = RuntimeError("duplicate key")

        with pytest.raises(RuntimeError):
            repository.save_interview(Interview(user_id="u", role="r", type="t", level="l"))


class TestFeedback:
    """Test feedback persistence."""

    def test_get_feedback_by_interview_id(self, repository, collections):
        document = feedback_record().model_dump(exclude={"id"})
        document["_id"] = "fb-1"
        collections["feedback"].find_one.return_value = document

        feedback = repository.get_feedback_by_interview_id("int-1", "user-1")

        collections["feedback"].find_one.assert_called_once_with({"interview_id": "int-1", "user_id": "user-1"})
        assert feedback.id == "fb-1"
        assert feedback.total_score == 80

    @pytest.mark.parametrize("interview_id,user_id", [("", "user-1"), ("int-1", ""), (None, None)])
    def test_get_feedback_requires_both_ids(self, repository, collections, interview_id, user_id):
        assert repository.get_feedback_by_interview_id(interview_id, user_id) is None
        collections["feedback"].find_one.assert_not_called()

    def test_save_feedback_creates_new_document(self, repository, collections):
        feedback_id = repository.save_feedback(feedback_record())

        filter_, document = collections["feedback"].replace_one.call_args[0]
        assert filter_ == {"_id": feedback_id}
        assert collections["feedback"].replace_one.call_args[1] == {"upsert": True}
        assert document["interview_id"] == "int-1"
        assert isinstance(document["created_at"], datetime)
        assert document["category_scores"][0]["name"] == "Communication Skills"

    def test_save_feedback_overwrites_given_id(self, repository, collections):
        feedback_id = repository.save_feedback(feedback_record(), feedback_id="fb-9")

        assert feedback_id == "fb-9"
        assert collections["feedback"].replace_one.call_args[0][0] == {"_id": "fb-9"}

    def test_save_feedback_propagates_errors(self, repository, collections):
        collections["feedback"].replace_one.side_effect = RuntimeError("write concern")

        with pytest.raises(RuntimeError):
            repository.save_feedback(feedback_record())
