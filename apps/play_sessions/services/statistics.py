"""Statistics service - attendance and cost aggregates over settled sessions."""

from datetime import date

from django.db.models import Count, Q, Sum

from apps.accounts.models import Gender
from apps.play_sessions.models import Session, Vote, ProxyVote, VoteType


def get_statistics(*, start_date: date, end_date: date) -> dict:
    """
    Aggregate settled sessions played between two dates (inclusive).

    Participants are attendance units: every going vote and every going
    proxy vote counts once, split by the attendee's gender (the target's
    gender for proxy votes).

    Returns:
        Dictionary with:
        - total_sessions: int
        - total_cost: int - sum of cached session totals
        - total_participants: int
        - male_participants: int
        - female_participants: int
        - average_cost_per_session: int (rounded)
        - average_participants_per_session: int (rounded)

    Example:
        >>> stats = get_statistics(start_date=date(2024, 5, 1), end_date=date(2024, 5, 31))
        >>> stats['total_sessions']
        9
    """
    sessions = Session.objects.filter(
        play_date__gte=start_date,
        play_date__lte=end_date,
        computed=True,
    )

    total_sessions = sessions.count()
    total_cost = sessions.aggregate(total=Sum('total_cost'))['total'] or 0

    direct = Vote.objects.filter(
        session__in=sessions,
        vote_type=VoteType.GOING,
    ).aggregate(
        male=Count('id', filter=Q(user__gender=Gender.MALE)),
        female=Count('id', filter=Q(user__gender=Gender.FEMALE)),
    )
    proxied = ProxyVote.objects.filter(
        session__in=sessions,
        vote_type=VoteType.GOING,
    ).aggregate(
        male=Count('id', filter=Q(target__gender=Gender.MALE)),
        female=Count('id', filter=Q(target__gender=Gender.FEMALE)),
    )

    male_participants = direct['male'] + proxied['male']
    female_participants = direct['female'] + proxied['female']
    total_participants = male_participants + female_participants

    return {
        'total_sessions': total_sessions,
        'total_cost': total_cost,
        'total_participants': total_participants,
        'male_participants': male_participants,
        'female_participants': female_participants,
        'average_cost_per_session': (
            round(total_cost / total_sessions) if total_sessions else 0
        ),
        'average_participants_per_session': (
            round(total_participants / total_sessions) if total_sessions else 0
        ),
    }
