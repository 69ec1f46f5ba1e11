"""
Domain-specific exceptions for the play_sessions app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class PlaySessionsServiceError(Exception):
    """Base exception for all play_sessions service errors."""
    pass


class SessionNotFoundError(PlaySessionsServiceError):
    """Raised when a session id does not resolve."""

    def __init__(self, session_id):
        super().__init__(f"Session with ID {session_id} not found")
        self.session_id = session_id


class SessionClosedError(PlaySessionsServiceError):
    """Raised when a completed or inactive session is modified."""
    pass


class VoteNotFoundError(PlaySessionsServiceError):
    """Raised when a user has no vote to retract."""
    pass


class ProxyVoteNotFoundError(PlaySessionsServiceError):
    """Raised when the voter never voted on behalf of the named target."""
    pass
