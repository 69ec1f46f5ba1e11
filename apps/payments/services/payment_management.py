"""
Payment tracking service.

Reading ledgers and recording who has paid.
"""

from datetime import date, timedelta
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import Count, Q, QuerySet, Sum
from django.utils import timezone
import structlog

from apps.accounts.models import User
from apps.payments.models import Payment
from apps.play_sessions.models import Session
from apps.play_sessions.services.audit import record_audit

from .exceptions import (
    PaymentNotFoundError,
    PaymentAlreadyPaidError,
    SessionNotFoundError,
    SessionClosedError,
)

logger = structlog.get_logger(__name__)

SUMMARY_WINDOW_DAYS = 30


def get_session_payments(*, session_id: UUID) -> QuerySet[Payment]:
    """
    Payments of one session, ordered by name.

    Raises:
        SessionNotFoundError: If session doesn't exist
    """
    if not Session.objects.filter(id=session_id).exists():
        raise SessionNotFoundError(session_id)

    return Payment.objects.filter(session_id=session_id).select_related('user')


def get_session_payment_summary(*, session_id: UUID) -> dict:
    """
    Collection progress of one session's ledger.

    Returns:
        Dictionary with:
        - session: Session
        - total_users: int
        - paid_count: int
        - unpaid_count: int
        - total_amount: int
        - paid_amount: int
        - unpaid_amount: int
        - completion_rate: float - percent of rows paid, one decimal
        - unpaid: list[Payment], ordered by name

    Raises:
        SessionNotFoundError: If session doesn't exist
    """
    try:
        session = Session.objects.get(id=session_id)
    except Session.DoesNotExist:
        raise SessionNotFoundError(session_id)

    payments = Payment.objects.filter(session=session)
    totals = payments.aggregate(
        total_users=Count('id'),
        paid_count=Count('id', filter=Q(paid=True)),
        total_amount=Sum('amount'),
        paid_amount=Sum('amount', filter=Q(paid=True)),
    )

    total_users = totals['total_users']
    paid_count = totals['paid_count']
    total_amount = totals['total_amount'] or 0
    paid_amount = totals['paid_amount'] or 0

    return {
        'session': session,
        'total_users': total_users,
        'paid_count': paid_count,
        'unpaid_count': total_users - paid_count,
        'total_amount': total_amount,
        'paid_amount': paid_amount,
        'unpaid_amount': total_amount - paid_amount,
        'completion_rate': (
            round(paid_count / total_users * 100, 1) if total_users else 0.0
        ),
        'unpaid': list(payments.filter(paid=False).order_by('user_name')),
    }


@transaction.atomic
def mark_payment_paid(*, payment_id: UUID) -> Payment:
    """
    Record that a payment was received.

    Raises:
        PaymentNotFoundError: If payment doesn't exist
        PaymentAlreadyPaidError: If it is already marked paid
        SessionClosedError: If its session is no longer pending
    """
    try:
        payment = (
            Payment.objects
            .select_for_update()
            .select_related('session')
            .get(id=payment_id)
        )
    except Payment.DoesNotExist:
        raise PaymentNotFoundError(f"Payment with ID {payment_id} not found")

    if payment.paid:
        raise PaymentAlreadyPaidError(f"{payment.user_name} has already paid")

    if not payment.session.is_open:
        raise SessionClosedError(
            f"Session {payment.session.play_date} is {payment.session.status}; "
            "payments can no longer be marked"
        )

    payment.mark_paid()

    record_audit(
        session=payment.session,
        action='PAYMENT_MARKED_PAID',
        payload={
            'payment_id': str(payment.id),
            'user_id': str(payment.user_id),
            'amount': payment.amount,
        },
    )
    logger.info(
        "payment_marked_paid",
        payment_id=str(payment.id),
        session_id=str(payment.session_id),
        amount=payment.amount,
    )
    return payment


def get_user_payment_summary(*, user: User, since: Optional[date] = None) -> dict:
    """
    What a user owed and paid for sessions played since ``since``.

    Defaults to the last 30 days.

    Returns:
        Dictionary with:
        - since: date
        - session_count: int
        - total_amount: int
        - paid_amount: int
        - unpaid_amount: int
        - payments: list[Payment], newest session first
    """
    since = since or timezone.localdate() - timedelta(days=SUMMARY_WINDOW_DAYS)

    payments = list(
        Payment.objects
        .filter(user=user, session__play_date__gte=since)
        .select_related('session')
        .order_by('-session__play_date')
    )

    paid_amount = sum(p.amount for p in payments if p.paid)
    unpaid_amount = sum(p.amount for p in payments if not p.paid)

    return {
        'since': since,
        'session_count': len(payments),
        'total_amount': paid_amount + unpaid_amount,
        'paid_amount': paid_amount,
        'unpaid_amount': unpaid_amount,
        'payments': payments,
    }
