"""
Exception hierarchy for the coaching core.

Soft failures (unknown request or mentor ids) are reported through return
values; the exceptions below cover conditions a caller must handle.
"""


class CoachCoreError(Exception):
    """Base class for all coaching core errors."""
    pass


class NoActiveSession(CoachCoreError):
    """Raised when a message is added without a resolvable session."""
    pass


class SessionNotFound(CoachCoreError):
    """Raised when an explicit session id does not exist."""
    
    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Conversation session not found: {session_id}")


class StorageError(CoachCoreError):
    """Raised when the conversation store cannot be read or written."""
    pass


class InvalidStatusTransition(CoachCoreError):
    """Raised when an escalation request is moved to a status it cannot reach."""
    
    def __init__(self, request_id: str, current: str, target: str):
        self.request_id = request_id
        self.current = current
        self.target = target
        super().__init__(
            f"Escalation {request_id} cannot move from '{current}' to '{target}'"
        )


__all__ = [
    'CoachCoreError',
    'NoActiveSession',
    'SessionNotFound',
    'StorageError',
    'InvalidStatusTransition'
]
