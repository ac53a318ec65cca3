"""
Voice transport adapters for live interview calls.

A transport is the bridge to the managed voice platform. The call session
controller only relies on the small surface defined by ``VoiceTransport``:
named event subscriptions plus ``open``/``close``. This module provides that
base class and two adapters:

- ``WebSocketRelayTransport``: the browser runs the voice SDK and relays its
  events to the backend over a FastAPI WebSocket.
- ``ReplayTransport``: plays back a recorded list of events, used by the CLI
  to re-run a call offline.
"""
import asyncio
import json
import logging
from typing import Any, Callable, Dict, List, Optional, Union

from fastapi import WebSocket

from mock_interviewer.utils.constants import TRANSPORT_EVENTS

logger = logging.getLogger(__name__)

EventHandler = Callable[[Optional[Dict[str, Any]]], None]
OpenTarget = Union[str, Dict[str, Any]]


class VoiceTransport:
    """
    Base transport with listener bookkeeping.

    Subclasses implement ``open`` and ``close``; events from the voice
    platform are delivered to subscribers through ``emit``. The base class
    cannot open a call on its own and is only used directly for its
    listener bookkeeping.
    """

    def __init__(self):
        self._listeners: Dict[str, List[EventHandler]] = {event: [] for event in TRANSPORT_EVENTS}

    def on(self, event: str, handler: EventHandler):
        """Subscribe a handler to a transport event."""
        if event not in self._listeners:
            raise ValueError(f"Unknown transport event: {event}")
        self._listeners[event].append(handler)

    def off(self, event: str, handler: EventHandler) -> bool:
        """
        Remove a previously subscribed handler.

        Returns:
            True if the handler was subscribed, False otherwise
        """
        handlers = self._listeners.get(event, [])
        if handler in handlers:
            handlers.remove(handler)
            return True
        logger.debug(f"Handler {handler} was not subscribed to {event}")
        return False

    def listener_count(self, event: Optional[str] = None) -> int:
        if event is not None:
            return len(self._listeners.get(event, []))
        return sum(len(handlers) for handlers in self._listeners.values())

    def emit(self, event: str, payload: Optional[Dict[str, Any]] = None):
        """Deliver an event to every handler subscribed to it."""
        if event not in self._listeners:
            logger.warning(f"Ignoring unknown transport event: {event}")
            return

        for handler in list(self._listeners[event]):
            try:
                handler(payload)
            except Exception as e:
                logger.error(f"Error in {event} handler {handler}: {e}", exc_info=True)

    async def open(self, target: OpenTarget, variables: Dict[str, Any]):
        """Open a voice session for a workflow id or an assistant configuration."""
        raise NotImplementedError

    async def close(self):
        """Ask the voice platform to end the session."""
        raise NotImplementedError


class WebSocketRelayTransport(VoiceTransport):
    """Transport whose voice SDK lives in the browser on the other end of a WebSocket."""

    def __init__(self, websocket: WebSocket):
        super().__init__()
        self.websocket = websocket
        self.is_open = False

    async def open(self, target: OpenTarget, variables: Dict[str, Any]):
        await self.websocket.send_text(json.dumps({
            "type": "open",
            "target": target,
            "variableValues": variables,
        }))
        self.is_open = True
        logger.info("Requested voice session start from client")

    async def close(self):
        if not self.is_open:
            return
        self.is_open = False
        try:
            await self.websocket.send_text(json.dumps({"type": "close"}))
            logger.info("Requested voice session stop from client")
        except Exception as e:
            logger.warning(f"Error sending close to client: {e}")

    def relay(self, event: str, payload: Optional[Dict[str, Any]] = None):
        """Feed an event frame received from the client into the subscribers."""
        if event == "call-end":
            self.is_open = False
        self.emit(event, payload)


class ReplayTransport(VoiceTransport):
    """Transport that replays recorded events once opened."""

    def __init__(self, events: List[Dict[str, Any]], delay: float = 0.0):
        """
        Initialize the replay transport.

        Args:
            events: Recorded events, each ``{"event": name, "payload": {...}}``
            delay: Seconds to wait between events
        """
        super().__init__()
        self.events = list(events)
        self.delay = delay
        self.is_open = False
        self.opened_with: Optional[Dict[str, Any]] = None
        self.close_calls = 0

    @classmethod
    def from_file(cls, filepath: str, delay: float = 0.0) -> "ReplayTransport":
        """Load events from a JSON array or a JSON-lines file."""
        with open(filepath, "r") as f:
            content = f.read().strip()

        if content.startswith("["):
            events = json.loads(content)
        else:
            events = [json.loads(line) for line in content.splitlines() if line.strip()]

        logger.info(f"Loaded {len(events)} recorded events from {filepath}")
        return cls(events, delay=delay)

    async def open(self, target: OpenTarget, variables: Dict[str, Any]):
        self.opened_with = {"target": target, "variables": variables}
        self.is_open = True

    async def close(self):
        self.is_open = False
        self.close_calls += 1

    async def play(self) -> int:
        """
        Emit the recorded events in order until the session is closed.

        Returns:
            Number of events emitted
        """
        emitted = 0
        for entry in self.events:
            if not self.is_open:
                logger.info(f"Replay stopped after {emitted} events: session closed")
                break
            self.emit(entry["event"], entry.get("payload"))
            emitted += 1
            if entry["event"] == "call-end":
                self.is_open = False
            await asyncio.sleep(self.delay)
        return emitted
