import pytest
from datetime import timedelta
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, Gender
from apps.play_sessions.models import Session, SessionStatus


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def player(db):
    """Create and return a registered male player."""
    return User.objects.create_user(
        external_id='tg_1001',
        password='TestPass123!',
        display_name='Minh',
        gender=Gender.MALE,
    )


@pytest.fixture
def female_player(db):
    """Create and return a registered female player."""
    return User.objects.create_user(
        external_id='tg_1002',
        password='TestPass123!',
        display_name='Lan',
        gender=Gender.FEMALE,
    )


@pytest.fixture
def other_player(db):
    """Create and return another registered male player."""
    return User.objects.create_user(
        external_id='tg_1003',
        password='TestPass123!',
        display_name='Huy',
        gender=Gender.MALE,
    )


@pytest.fixture
def staff_user(db):
    """Create and return an organiser with staff rights."""
    return User.objects.create_user(
        external_id='tg_9000',
        password='TestPass123!',
        display_name='Organiser',
        gender=Gender.MALE,
        is_staff=True,
    )


@pytest.fixture
def player_client(api_client, player):
    """Return API client authenticated as a regular player."""
    refresh = RefreshToken.for_user(player)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def staff_client(api_client, staff_user):
    """Return API client authenticated as the organiser."""
    refresh = RefreshToken.for_user(staff_user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def play_session(db):
    """Today's pending session: 2 courts, 3 shuttlecocks."""
    return Session.objects.create(
        play_date=timezone.localdate(),
        court_count=2,
        shuttle_count=3,
    )


@pytest.fixture
def closed_session(db):
    """A completed session from last week."""
    return Session.objects.create(
        play_date=timezone.localdate() - timedelta(days=7),
        court_count=1,
        shuttle_count=2,
        status=SessionStatus.COMPLETED,
    )
