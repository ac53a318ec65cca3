"""
Unit tests for the call session WebSocket endpoint.
"""
import pytest
from unittest.mock import Mock, AsyncMock, patch

from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from mock_interviewer.models.interview import Interview
from mock_interviewer.models.session import FeedbackResult
from mock_interviewer.routers.dependencies import get_ws_feedback_service, get_ws_repository
from mock_interviewer.server import create_app

WS_PATH = "/api/call-session/ws"


def event(name, payload=None):
    frame = {"type": "event", "event": name}
    if payload is not None:
        frame["payload"] = payload
    return frame


def final(role, text):
    return event("message", {"type": "transcript", "role": role, "transcript": text, "transcriptType": "final"})


def receive_pair(websocket):
    """Receive the state and navigate frames sent after call-end, in either order."""
    frames = [websocket.receive_json(), websocket.receive_json()]
    return {frame["type"]: frame for frame in frames}


@pytest.fixture(autouse=True)
def call_config():
    with patch("mock_interviewer.core.call_session.get_call_config") as mock_config:
        mock_config.return_value = {"workflow_id": "wf-1", "connect_timeout": 0}
        yield mock_config


@pytest.fixture
def repository():
    repository = Mock()
    repository.get_interview_by_id.return_value = Interview(
        id="int-1",
        user_id="user-2",
        role="Frontend Developer",
        type="technical",
        level="Junior",
        questions=["Tell me about yourself", "Why this role?"],
        finalized=True
    )
    return repository


@pytest.fixture
def feedback_service():
    service = Mock()
    service.submit = AsyncMock(return_value=FeedbackResult(success=True, feedback_id="fb-1"))
    return service


@pytest.fixture
def app(repository, feedback_service):
    app = create_app()
    app.dependency_overrides[get_ws_repository] = lambda: repository
    app.dependency_overrides[get_ws_feedback_service] = lambda: feedback_service
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


class TestGenerateCall:
    """Test a generation call end to end."""

    def test_full_call(self, client, feedback_service):
        with client.websocket_connect(f"{WS_PATH}?mode=generate&user_id=user-1&user_name=Ada") as websocket:
            assert websocket.receive_json()["status"] == "idle"

            websocket.send_json({"type": "command", "action": "start"})
            assert websocket.receive_json() == {
                "type": "open",
                "target": "wf-1",
                "variableValues": {"username": "Ada", "userid": "user-1"}
            }
            assert websocket.receive_json()["status"] == "connecting"

            websocket.send_json(event("call-start"))
            assert websocket.receive_json()["status"] == "active"

            websocket.send_json(final("user", "I want a React interview"))
            state = websocket.receive_json()
            assert state["transcriptLength"] == 1
            assert state["lastMessage"] == "I want a React interview"

            websocket.send_json(event("call-end"))
            frames = receive_pair(websocket)

        assert frames["state"]["status"] == "finished"
        assert frames["navigate"] == {"type": "navigate", "destination": "home", "path": "/"}
        feedback_service.submit.assert_not_awaited()

    def test_partial_transcripts_do_not_grow_transcript(self, client):
        with client.websocket_connect(f"{WS_PATH}?mode=generate&user_id=user-1") as websocket:
            websocket.receive_json()
            websocket.send_json({"type": "command", "action": "start"})
            websocket.receive_json()
            websocket.receive_json()
            websocket.send_json(event("call-start"))
            websocket.receive_json()

            websocket.send_json(event("message", {"type": "transcript", "role": "user",
                                                  "transcript": "I wa", "transcriptType": "partial"}))
            state = websocket.receive_json()

        assert state["transcriptLength"] == 0

    def test_speech_indicator(self, client):
        with client.websocket_connect(f"{WS_PATH}?mode=generate&user_id=user-1") as websocket:
            websocket.receive_json()
            websocket.send_json({"type": "command", "action": "start"})
            websocket.receive_json()
            websocket.receive_json()
            websocket.send_json(event("call-start"))
            websocket.receive_json()

            websocket.send_json(event("speech-start"))
            speaking = websocket.receive_json()["isSpeaking"]
            websocket.send_json(event("speech-end"))
            silent = websocket.receive_json()["isSpeaking"]

        assert speaking is True
        assert silent is False

    def test_stop_sends_close_instruction(self, client):
        with client.websocket_connect(f"{WS_PATH}?mode=generate&user_id=user-1") as websocket:
            websocket.receive_json()
            websocket.send_json({"type": "command", "action": "start"})
            websocket.receive_json()
            websocket.receive_json()
            websocket.send_json(event("call-start"))
            websocket.receive_json()

            websocket.send_json({"type": "command", "action": "stop"})
            frames = [websocket.receive_json() for _ in range(3)]

        types = sorted(frame["type"] for frame in frames)
        assert types == ["close", "navigate", "state"]

    def test_missing_workflow_is_reported(self, client, call_config):
        call_config.return_value = {"workflow_id": "", "connect_timeout": 0}

        with client.websocket_connect(f"{WS_PATH}?mode=generate&user_id=user-1") as websocket:
            websocket.receive_json()
            websocket.send_json({"type": "command", "action": "start"})
            error = websocket.receive_json()

        assert error["type"] == "error"
        assert "workflow_id" in error["message"]


class TestReviewCall:
    """Test an interview call end to end."""

    def test_full_call_navigates_to_feedback(self, client, feedback_service):
        with client.websocket_connect(
            f"{WS_PATH}?mode=interview&user_id=user-1&user_name=Ada&interview_id=int-1"
        ) as websocket:
            websocket.receive_json()
            websocket.send_json({"type": "command", "action": "start"})
            open_frame = websocket.receive_json()
            websocket.receive_json()

            websocket.send_json(event("call-start"))
            websocket.receive_json()
            websocket.send_json(final("assistant", "Tell me about yourself"))
            websocket.receive_json()
            websocket.send_json(final("user", "I build web apps"))
            websocket.receive_json()

            websocket.send_json(event("call-end"))
            frames = receive_pair(websocket)

        assert open_frame["target"]["name"] == "Interviewer"
        assert open_frame["variableValues"] == {"questions": "- Tell me about yourself\n- Why this role?"}
        assert frames["navigate"]["path"] == "/interview/int-1/feedback"
        kwargs = feedback_service.submit.await_args.kwargs
        assert kwargs["interview_id"] == "int-1"
        assert [u.text for u in kwargs["transcript"]] == ["Tell me about yourself", "I build web apps"]

    def test_feedback_failure_navigates_home(self, client, feedback_service):
        feedback_service.submit.return_value = FeedbackResult(success=False)

        with client.websocket_connect(f"{WS_PATH}?mode=interview&user_id=user-1&interview_id=int-1") as websocket:
            websocket.receive_json()
            websocket.send_json({"type": "command", "action": "start"})
            websocket.receive_json()
            websocket.receive_json()
            websocket.send_json(event("call-start"))
            websocket.receive_json()

            websocket.send_json(event("call-end"))
            frames = receive_pair(websocket)

        assert frames["navigate"] == {"type": "navigate", "destination": "home", "path": "/"}

    def test_unknown_interview_closes_socket(self, client, repository):
        repository.get_interview_by_id.return_value = None

        with client.websocket_connect(f"{WS_PATH}?mode=interview&user_id=user-1&interview_id=nope") as websocket:
            error = websocket.receive_json()
            with pytest.raises(WebSocketDisconnect):
                websocket.receive_json()

        assert error == {"type": "error", "message": "Interview nope not found"}

    def test_missing_feedback_service_closes_socket(self, app):
        app.dependency_overrides[get_ws_feedback_service] = lambda: None
        client = TestClient(app)

        with client.websocket_connect(f"{WS_PATH}?mode=interview&user_id=user-1&interview_id=int-1") as websocket:
            error = websocket.receive_json()
            with pytest.raises(WebSocketDisconnect):
                websocket.receive_json()

        assert error["type"] == "error"
        assert "feedback_gateway" in error["message"]


class TestFrameHandling:
    """Test malformed and out-of-order frames."""

    def test_invalid_frame_keeps_socket_open(self, client):
        with client.websocket_connect(f"{WS_PATH}?mode=generate&user_id=user-1") as websocket:
            websocket.receive_json()

            websocket.send_json({"type": "command"})
            error = websocket.receive_json()
            websocket.send_json({"type": "event", "event": "volume-level"})
            second_error = websocket.receive_json()
            websocket.send_text("not json")
            third_error = websocket.receive_json()

            websocket.send_json({"type": "command", "action": "start"})
            assert websocket.receive_json()["type"] == "open"

        assert error["type"] == "error"
        assert second_error["type"] == "error"
        assert third_error["message"].startswith("Invalid frame")

    def test_stop_before_start_is_rejected(self, client):
        with client.websocket_connect(f"{WS_PATH}?mode=generate&user_id=user-1") as websocket:
            websocket.receive_json()

            websocket.send_json({"type": "command", "action": "stop"})
            error = websocket.receive_json()
            websocket.send_json(event("speech-end"))
            state = websocket.receive_json()

        assert "Cannot stop" in error["message"]
        assert state["status"] == "idle"

    def test_second_start_is_rejected(self, client):
        with client.websocket_connect(f"{WS_PATH}?mode=generate&user_id=user-1") as websocket:
            websocket.receive_json()
            websocket.send_json({"type": "command", "action": "start"})
            websocket.receive_json()
            websocket.receive_json()

            websocket.send_json({"type": "command", "action": "start"})
            error = websocket.receive_json()

        assert error["type"] == "error"
        assert "Cannot start" in error["message"]
