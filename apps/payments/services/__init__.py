"""
Payments app services layer.

The settlement engine (pricing, classifier, calculator, report) is pure;
the orchestrator and payment tracking own every database write.
"""

from .exceptions import (
    PaymentsServiceError,
    NoParticipantsError,
    PersistenceFailure,
    PaymentNotFoundError,
    PaymentAlreadyPaidError,
    SessionNotFoundError,
    SessionClosedError,
)

from .pricing import PricingPolicy

from .classifier import (
    AttendanceCategory,
    AttendanceCounts,
    ProxyVoteRecord,
    ResponsibilityEntry,
    VoteRecord,
    classify_attendance,
)

from .calculator import (
    CostBreakdown,
    LedgerDetail,
    LedgerLine,
    SettlementResult,
    SettlementShares,
    calculate_settlement,
)

from .report import format_amount, format_report

from .settlement import (
    SessionSnapshot,
    load_session_with_votes,
    update_session_totals,
    replace_payments,
    settle_session,
)

from .payment_management import (
    get_session_payments,
    get_session_payment_summary,
    mark_payment_paid,
    get_user_payment_summary,
)


__all__ = [
    # Exceptions
    'PaymentsServiceError',
    'NoParticipantsError',
    'PersistenceFailure',
    'PaymentNotFoundError',
    'PaymentAlreadyPaidError',
    'SessionNotFoundError',
    'SessionClosedError',

    # Engine
    'PricingPolicy',
    'AttendanceCategory',
    'AttendanceCounts',
    'ProxyVoteRecord',
    'ResponsibilityEntry',
    'VoteRecord',
    'classify_attendance',
    'CostBreakdown',
    'LedgerDetail',
    'LedgerLine',
    'SettlementResult',
    'SettlementShares',
    'calculate_settlement',
    'format_amount',
    'format_report',

    # Orchestration
    'SessionSnapshot',
    'load_session_with_votes',
    'update_session_totals',
    'replace_payments',
    'settle_session',

    # Payment tracking
    'get_session_payments',
    'get_session_payment_summary',
    'mark_payment_paid',
    'get_user_payment_summary',
]
