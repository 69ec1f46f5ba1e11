"""
Domain-specific exceptions for the payments app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""

from apps.play_sessions.services.exceptions import (  # noqa: F401
    SessionNotFoundError,
    SessionClosedError,
)


class PaymentsServiceError(Exception):
    """Base exception for all payments service errors."""
    pass


class NoParticipantsError(PaymentsServiceError):
    """Raised when a session with no votes at all is settled."""
    pass


class PersistenceFailure(PaymentsServiceError):
    """
    Raised when storing a settlement fails.

    The settlement runs in one transaction, so the previous ledger and
    session totals are still in place when this is raised.
    """
    pass


class PaymentNotFoundError(PaymentsServiceError):
    """Raised when a payment id does not resolve."""
    pass


class PaymentAlreadyPaidError(PaymentsServiceError):
    """Raised when marking a payment that is already paid."""
    pass
