"""Exceptions raised by the session engine."""

from typing import List, Optional


class PortalError(Exception):
    """Base class for session engine errors."""


class SessionValidationError(PortalError, ValueError):
    """A session descriptor was rejected. The registry is left unchanged."""

    def __init__(self, messages: List[str]):
        self.messages = list(messages)
        super().__init__("; ".join(self.messages) or "invalid session descriptor")


class InvalidTransitionError(PortalError, RuntimeError):
    """A lifecycle action was requested from a view-state that does not allow it."""

    def __init__(self, action: str, view_state, reason: Optional[str] = None):
        self.action = action
        self.view_state = view_state
        message = f"cannot {action} from {view_state.name}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
