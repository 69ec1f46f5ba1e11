"""
Settlement orchestrator.

Loads a session's attendance, runs the classifier and the calculator, and
stores the ledger as Payment rows. The whole sequence is one transaction
holding the session row lock: concurrent settlements of the same session
serialize, and readers never see a half-replaced ledger.
"""

from dataclasses import dataclass
from typing import Iterable, Optional
from uuid import UUID

from django.db import transaction, DatabaseError
from django.utils import timezone
import structlog

from apps.payments.models import Payment
from apps.play_sessions.models import Session
from apps.play_sessions.services.audit import record_audit

from .calculator import LedgerLine, SettlementResult, calculate_settlement
from .classifier import ProxyVoteRecord, VoteRecord, classify_attendance
from .exceptions import NoParticipantsError, PersistenceFailure, SessionNotFoundError
from .pricing import PricingPolicy

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SessionSnapshot:
    """A session and its votes, read in one go."""

    session: Session
    votes: tuple[VoteRecord, ...]
    proxy_votes: tuple[ProxyVoteRecord, ...]

    @property
    def has_votes(self) -> bool:
        return bool(self.votes or self.proxy_votes)


def load_session_with_votes(session_id: UUID, *, lock: bool = False) -> SessionSnapshot:
    """
    Read a session with every vote and proxy vote, genders included.

    With ``lock=True`` the session row is locked (requires an open
    transaction).

    Raises:
        SessionNotFoundError: If session doesn't exist
    """
    queryset = Session.objects.select_for_update() if lock else Session.objects.all()
    try:
        session = queryset.get(id=session_id)
    except Session.DoesNotExist:
        raise SessionNotFoundError(session_id)

    votes = tuple(
        VoteRecord(
            user_id=vote.user.id,
            user_name=vote.user.get_display_name(),
            gender=vote.user.gender,
            vote_type=vote.vote_type,
        )
        for vote in session.votes.select_related('user').order_by('created_at', 'id')
    )
    proxy_votes = tuple(
        ProxyVoteRecord(
            voter_id=proxy_vote.voter.id,
            voter_name=proxy_vote.voter.get_display_name(),
            voter_gender=proxy_vote.voter.gender,
            target_id=proxy_vote.target.id,
            target_name=proxy_vote.target.get_display_name(),
            target_gender=proxy_vote.target.gender,
            vote_type=proxy_vote.vote_type,
        )
        for proxy_vote in (
            session.proxy_votes
            .select_related('voter', 'target')
            .order_by('created_at', 'id')
        )
    )
    return SessionSnapshot(session=session, votes=votes, proxy_votes=proxy_votes)


def update_session_totals(session: Session, total: int) -> None:
    """Cache the settled total on the session and flag it computed."""
    session.total_cost = total
    session.computed = True
    session.save(update_fields=['total_cost', 'computed', 'updated_at'])


def replace_payments(session: Session, ledger: Iterable[LedgerLine]) -> list[Payment]:
    """
    Swap the session's Payment rows for one row per ledger line.

    A user's paid mark survives when their amount is unchanged; when it
    changed the new row starts unpaid and a warning is logged. Must run
    inside the settlement transaction.
    """
    previous = {
        payment.user_id: payment
        for payment in Payment.objects.select_for_update().filter(session=session)
    }
    Payment.objects.filter(session=session).delete()

    rows = []
    for line in ledger:
        paid, paid_at = False, None
        old = previous.pop(line.user_id, None)

        if old is not None and old.paid:
            if old.amount == line.amount:
                paid, paid_at = True, old.paid_at
            else:
                logger.warning(
                    "paid_state_dropped",
                    session_id=str(session.id),
                    user_id=str(line.user_id),
                    old_amount=old.amount,
                    new_amount=line.amount,
                )

        rows.append(Payment(
            session=session,
            user_id=line.user_id,
            user_name=line.name,
            amount=line.amount,
            paid=paid,
            paid_at=paid_at,
        ))

    for old in previous.values():
        if old.paid:
            logger.warning(
                "paid_payment_removed",
                session_id=str(session.id),
                user_id=str(old.user_id),
                old_amount=old.amount,
            )

    payments = Payment.objects.bulk_create(rows)
    logger.info("payments_replaced", session_id=str(session.id), count=len(payments))
    return payments


def settle_session(session_id: UUID, pricing: Optional[PricingPolicy] = None) -> SettlementResult:
    """
    Settle a session and store its ledger.

    Safe to repeat: each run replaces the previous ledger, so the stored
    payments always reflect the latest votes and counts.

    Args:
        session_id: Session to settle
        pricing: Prices to use; defaults to ``PricingPolicy.from_settings()``

    Returns:
        SettlementResult

    Raises:
        SessionNotFoundError: If session doesn't exist
        NoParticipantsError: If nobody voted at all
        PersistenceFailure: If the database rejects any write; nothing
            from this run is kept
    """
    pricing = pricing or PricingPolicy.from_settings()

    try:
        with transaction.atomic():
            snapshot = load_session_with_votes(session_id, lock=True)
            session = snapshot.session

            if not snapshot.has_votes:
                raise NoParticipantsError(
                    f"Session {session.play_date} has no votes to settle"
                )

            counts, entries = classify_attendance(snapshot.votes, snapshot.proxy_votes)
            result = calculate_settlement(
                counts,
                entries,
                court_count=session.court_count,
                shuttle_count=session.shuttle_count,
                pricing=pricing,
                session_id=session.id,
                play_date=session.play_date,
            )

            update_session_totals(session, result.total)
            replace_payments(session, result.ledger)
            record_audit(
                session=session,
                action='COMPUTE_SESSION',
                payload={
                    'result': result.as_dict(),
                    'timestamp': timezone.now().isoformat(),
                },
            )
    except DatabaseError as exc:
        logger.error("settlement_failed", session_id=str(session_id), error=str(exc))
        raise PersistenceFailure(f"Could not store settlement for session {session_id}") from exc

    logger.info(
        "settlement_computed",
        session_id=str(session_id),
        total=result.total,
        collected=result.ledger_total,
        participants=result.counts.total_going,
        absentees=result.counts.total_not_going,
    )
    return result
