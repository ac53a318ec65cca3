"""
Exceptions raised by call sessions.
"""


class CallSessionError(Exception):
    """Base class for call session errors."""


class SessionStateError(CallSessionError):
    """An action was requested in a status that does not allow it."""

    def __init__(self, action: str, status):
        self.action = action
        self.status = status
        super().__init__(f"Cannot {action} a call session in status '{status.value}'")


class MissingContextError(CallSessionError):
    """The session context lacks identifiers the requested mode needs."""

    def __init__(self, mode, missing):
        self.mode = mode
        self.missing = list(missing)
        super().__init__(
            f"Cannot start a '{mode.value}' call session without: {', '.join(self.missing)}"
        )
