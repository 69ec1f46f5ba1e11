import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, Gender


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a registered player."""
    return User.objects.create_user(
        external_id='tg_3001',
        password='TestPass123!',
        display_name='Test User',
        gender=Gender.MALE,
    )


@pytest.fixture
def user_inactive(db):
    """Create and return an inactive player."""
    return User.objects.create_user(
        external_id='tg_3002',
        password='TestPass123!',
        display_name='Inactive User',
        is_active=False,
    )


@pytest.fixture
def placeholder(db):
    """Create and return a proxy placeholder."""
    user, _ = User.objects.get_or_create_placeholder('Guest', Gender.FEMALE)
    return user


@pytest.fixture
def authenticated_client(api_client, user):
    """Return API client authenticated with JWT token."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client
