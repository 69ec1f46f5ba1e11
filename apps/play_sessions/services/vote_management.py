"""
Vote management service.

Direct votes and proxy votes for a pending session. Every operation locks
the session row, so votes never interleave with a running settlement of the
same session.
"""

from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet
import structlog

from apps.accounts.models import User, Gender
from apps.play_sessions.models import Vote, ProxyVote, VoteType

from .audit import record_audit
from .exceptions import VoteNotFoundError, ProxyVoteNotFoundError
from .session_management import lock_open_session

logger = structlog.get_logger(__name__)

BULK_NAME_PREFIX = {
    Gender.MALE: 'Male',
    Gender.FEMALE: 'Female',
}


@transaction.atomic
def cast_vote(*, session_id: UUID, user: User, vote_type: str) -> Vote:
    """
    Record the user's own going/not-going vote.

    A user holds one vote per session: casting either type replaces the
    previous one.

    Raises:
        SessionNotFoundError: If session doesn't exist
        SessionClosedError: If session is no longer pending
    """
    session = lock_open_session(session_id)

    vote, created = Vote.objects.update_or_create(
        session=session,
        user=user,
        defaults={'vote_type': vote_type},
    )

    record_audit(
        session=session,
        action='VOTE_CAST',
        payload={
            'user_id': str(user.id),
            'user_name': user.get_display_name(),
            'vote_type': vote_type,
            'replaced': not created,
        },
    )
    logger.info(
        "vote_cast",
        session_id=str(session.id),
        user_id=str(user.id),
        vote_type=vote_type,
    )
    return vote


@transaction.atomic
def retract_vote(*, session_id: UUID, user: User) -> None:
    """
    Remove the user's own vote.

    Raises:
        SessionNotFoundError: If session doesn't exist
        SessionClosedError: If session is no longer pending
        VoteNotFoundError: If the user has not voted
    """
    session = lock_open_session(session_id)

    deleted, _ = Vote.objects.filter(session=session, user=user).delete()
    if not deleted:
        raise VoteNotFoundError(f"{user.get_display_name()} has not voted in this session")

    record_audit(
        session=session,
        action='VOTE_RETRACTED',
        payload={'user_id': str(user.id)},
    )


def _assign_proxy_vote(session, voter, target, vote_type):
    """Bind ``target`` to ``voter`` in ``session``, replacing earlier proxy votes for it."""
    # A placeholder is carried by one voter per session
    ProxyVote.objects.filter(session=session, target=target).exclude(voter=voter).delete()

    proxy_vote, _ = ProxyVote.objects.update_or_create(
        session=session,
        voter=voter,
        target=target,
        defaults={'vote_type': vote_type},
    )
    return proxy_vote


@transaction.atomic
def cast_proxy_vote(
    *,
    session_id: UUID,
    voter: User,
    target_name: str,
    gender: str,
    vote_type: str = VoteType.GOING
) -> ProxyVote:
    """
    Vote on behalf of a named person.

    The target placeholder is created on first use; its gender is updated
    to ``gender`` if it differs. The voter owes the resulting share.

    Raises:
        SessionNotFoundError: If session doesn't exist
        SessionClosedError: If session is no longer pending
    """
    session = lock_open_session(session_id)
    target, _ = User.objects.get_or_create_placeholder(target_name, gender)

    proxy_vote = _assign_proxy_vote(session, voter, target, vote_type)

    record_audit(
        session=session,
        action='PROXY_VOTE_CAST',
        payload={
            'voter_id': str(voter.id),
            'voter_name': voter.get_display_name(),
            'target_id': str(target.id),
            'target_name': target.get_display_name(),
            'gender': gender,
            'vote_type': vote_type,
        },
    )
    logger.info(
        "proxy_vote_cast",
        session_id=str(session.id),
        voter_id=str(voter.id),
        target_id=str(target.id),
        vote_type=vote_type,
    )
    return proxy_vote


@transaction.atomic
def cast_bulk_proxy_votes(
    *,
    session_id: UUID,
    voter: User,
    male_count: int = 0,
    female_count: int = 0
) -> list[ProxyVote]:
    """
    Add anonymous guests as going proxy votes.

    Guests are named "Male N" / "Female N". Numbers already carried by
    another voter in this session are skipped; numbers the voter already
    carries are reused, so repeating the same request is idempotent.

    Raises:
        SessionNotFoundError: If session doesn't exist
        SessionClosedError: If session is no longer pending
    """
    session = lock_open_session(session_id)

    taken = set(
        ProxyVote.objects
        .filter(session=session, target__is_real=False)
        .exclude(voter=voter)
        .values_list('target__display_name', flat=True)
    )

    proxy_votes = []
    for gender, count in ((Gender.MALE, male_count), (Gender.FEMALE, female_count)):
        number = 0
        for _ in range(count):
            number += 1
            name = f"{BULK_NAME_PREFIX[gender]} {number}"
            while name in taken:
                number += 1
                name = f"{BULK_NAME_PREFIX[gender]} {number}"

            target, _ = User.objects.get_or_create_placeholder(name, gender)
            proxy_votes.append(
                _assign_proxy_vote(session, voter, target, VoteType.GOING)
            )

    record_audit(
        session=session,
        action='BULK_PROXY_VOTE_CAST',
        payload={
            'voter_id': str(voter.id),
            'voter_name': voter.get_display_name(),
            'male_count': male_count,
            'female_count': female_count,
            'targets': [pv.target.get_display_name() for pv in proxy_votes],
        },
    )
    logger.info(
        "bulk_proxy_votes_cast",
        session_id=str(session.id),
        voter_id=str(voter.id),
        male_count=male_count,
        female_count=female_count,
    )
    return proxy_votes


@transaction.atomic
def remove_proxy_vote(*, session_id: UUID, voter: User, target_name: str) -> None:
    """
    Withdraw a proxy vote the voter cast for ``target_name``.

    Raises:
        SessionNotFoundError: If session doesn't exist
        SessionClosedError: If session is no longer pending
        ProxyVoteNotFoundError: If the voter holds no proxy vote for that name
    """
    session = lock_open_session(session_id)

    deleted, _ = ProxyVote.objects.filter(
        session=session,
        voter=voter,
        target__display_name=target_name,
    ).delete()

    if not deleted:
        raise ProxyVoteNotFoundError(f"No proxy vote for {target_name} in this session")

    record_audit(
        session=session,
        action='PROXY_VOTE_REMOVED',
        payload={'voter_id': str(voter.id), 'target_name': target_name},
    )


def get_proxy_votes(*, session_id: UUID, voter: User) -> QuerySet[ProxyVote]:
    """Proxy votes cast by ``voter`` in the session, oldest first."""
    return (
        ProxyVote.objects
        .filter(session_id=session_id, voter=voter)
        .select_related('target')
        .order_by('created_at')
    )
