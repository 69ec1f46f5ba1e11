import pytest
from datetime import date
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, Gender
from apps.payments.services import PricingPolicy
from apps.play_sessions.models import Session, Vote, ProxyVote, VoteType


@pytest.fixture
def pricing():
    """Default prices: court 120k, shuttlecock 25k, women 40k."""
    return PricingPolicy(court_price=120000, shuttle_price=25000, female_price=40000)


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


def make_player(external_id, name, gender):
    return User.objects.create_user(
        external_id=external_id,
        password='TestPass123!',
        display_name=name,
        gender=gender,
    )


@pytest.fixture
def players(db):
    """Three men and two women, all registered."""
    return {
        'an': make_player('tg_2001', 'An', Gender.MALE),
        'binh': make_player('tg_2002', 'Binh', Gender.MALE),
        'cuong': make_player('tg_2003', 'Cuong', Gender.MALE),
        'dung': make_player('tg_2004', 'Dung', Gender.FEMALE),
        'ha': make_player('tg_2005', 'Ha', Gender.FEMALE),
    }


@pytest.fixture
def staff_user(db):
    """Create and return an organiser with staff rights."""
    return User.objects.create_user(
        external_id='tg_9001',
        password='TestPass123!',
        display_name='Organiser',
        gender=Gender.MALE,
        is_staff=True,
    )


@pytest.fixture
def staff_client(api_client, staff_user):
    """Return API client authenticated as the organiser."""
    refresh = RefreshToken.for_user(staff_user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def player_client(api_client, players):
    """Return API client authenticated as An (not staff)."""
    refresh = RefreshToken.for_user(players['an'])
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def play_session(db):
    """Pending session with 2 courts and 3 shuttlecocks."""
    return Session.objects.create(
        play_date=date(2024, 5, 4),
        court_count=2,
        shuttle_count=3,
    )


@pytest.fixture
def voted_session(play_session, players):
    """Everyone in ``players`` votes going: 315000 total, 317000 collected."""
    for user in players.values():
        Vote.objects.create(session=play_session, user=user, vote_type=VoteType.GOING)
    return play_session


@pytest.fixture
def proxy_session(play_session, players):
    """
    An goes and brings two men and one woman by proxy; Dung stays home.

    Going: 3 men (An + 2 proxies), 1 woman (proxy). Not going: Dung.
    """
    Vote.objects.create(session=play_session, user=players['an'], vote_type=VoteType.GOING)
    Vote.objects.create(session=play_session, user=players['dung'], vote_type=VoteType.NOT_GOING)
    for name, gender in (('Guest 1', Gender.MALE), ('Guest 2', Gender.MALE), ('Mai', Gender.FEMALE)):
        target, _ = User.objects.get_or_create_placeholder(name, gender)
        ProxyVote.objects.create(
            session=play_session,
            voter=players['an'],
            target=target,
            vote_type=VoteType.GOING,
        )
    return play_session
