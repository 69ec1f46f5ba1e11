import pytest
from datetime import date
from uuid import uuid4
from django.urls import reverse
from rest_framework import status
from apps.accounts.models import User
from apps.play_sessions.models import AuditLog, ProxyVote, Session, SessionStatus, Vote, VoteType


# =============================================================================
# Session Tests
# =============================================================================

@pytest.mark.django_db
class TestSessionList:
    """Tests for GET /api/sessions/"""

    def test_list_sessions(self, player_client, play_session, closed_session):
        url = reverse('play_sessions:session-list')
        response = player_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['results']) == 2
        # Newest first
        assert response.data['results'][0]['id'] == str(play_session.id)

    def test_list_sessions_status_filter(self, player_client, play_session, closed_session):
        url = reverse('play_sessions:session-list')
        response = player_client.get(url, {'status': SessionStatus.COMPLETED})

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['results']) == 1
        assert response.data['results'][0]['id'] == str(closed_session.id)

    def test_list_sessions_unauthenticated(self, api_client):
        url = reverse('play_sessions:session-list')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestSessionCreate:
    """Tests for POST /api/sessions/"""

    def test_create_session_for_date(self, player_client):
        url = reverse('play_sessions:session-list')
        response = player_client.post(url, {'play_date': '2024-05-04'})

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['play_date'] == '2024-05-04'
        assert Session.objects.filter(play_date=date(2024, 5, 4)).exists()

    def test_create_session_returns_existing(self, player_client, play_session):
        url = reverse('play_sessions:session-list')
        response = player_client.post(url, {'play_date': play_session.play_date.isoformat()})

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['id'] == str(play_session.id)
        assert Session.objects.count() == 1


@pytest.mark.django_db
class TestSessionDetail:
    """Tests for GET /api/sessions/{id}/"""

    def test_retrieve_session_with_votes(self, player_client, play_session, player):
        Vote.objects.create(session=play_session, user=player, vote_type=VoteType.GOING)

        url = reverse('play_sessions:session-detail', args=[play_session.id])
        response = player_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['going_count'] == 1
        assert response.data['user_vote'] == VoteType.GOING
        assert response.data['votes'][0]['user']['display_name'] == 'Minh'

    def test_retrieve_unknown_session(self, player_client):
        url = reverse('play_sessions:session-detail', args=[uuid4()])
        response = player_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestSessionAdminActions:
    """Tests for organiser-only endpoints."""

    def test_update_counts(self, staff_client, play_session):
        url = reverse('play_sessions:session-counts', args=[play_session.id])
        response = staff_client.post(url, {'court_count': 3, 'shuttle_count': 6})

        assert response.status_code == status.HTTP_200_OK
        play_session.refresh_from_db()
        assert play_session.court_count == 3
        assert play_session.shuttle_count == 6

    def test_update_counts_requires_staff(self, player_client, play_session):
        url = reverse('play_sessions:session-counts', args=[play_session.id])
        response = player_client.post(url, {'court_count': 3})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_update_counts_rejects_negative(self, staff_client, play_session):
        url = reverse('play_sessions:session-counts', args=[play_session.id])
        response = staff_client.post(url, {'court_count': -1})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_update_counts_unknown_session(self, staff_client):
        url = reverse('play_sessions:session-counts', args=[uuid4()])
        response = staff_client.post(url, {'court_count': 1})

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_complete_session(self, staff_client, play_session):
        url = reverse('play_sessions:session-complete', args=[play_session.id])
        response = staff_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == SessionStatus.COMPLETED

    def test_complete_closed_session(self, staff_client, closed_session):
        url = reverse('play_sessions:session-complete', args=[closed_session.id])
        response = staff_client.post(url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_deactivate_session(self, staff_client, play_session):
        url = reverse('play_sessions:session-deactivate', args=[play_session.id])
        response = staff_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == SessionStatus.INACTIVE

    def test_deactivate_closed_session(self, staff_client, closed_session):
        url = reverse('play_sessions:session-deactivate', args=[closed_session.id])
        response = staff_client.post(url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        closed_session.refresh_from_db()
        assert closed_session.status == SessionStatus.COMPLETED

    def test_deactivate_requires_staff(self, player_client, play_session):
        url = reverse('play_sessions:session-deactivate', args=[play_session.id])
        response = player_client.post(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        play_session.refresh_from_db()
        assert play_session.status == SessionStatus.PENDING

    def test_deactivate_unknown_session(self, staff_client):
        url = reverse('play_sessions:session-deactivate', args=[uuid4()])
        response = staff_client.post(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestSessionAdminSite:
    """Bulk actions on the Django admin session changelist."""

    @pytest.fixture
    def admin_site_client(self, client, db):
        superuser = User.objects.create_superuser(
            external_id='tg_9999',
            password='TestPass123!',
            display_name='Admin',
        )
        client.force_login(superuser)
        return client

    def run_action(self, client, action, sessions):
        return client.post(
            reverse('admin:play_sessions_session_changelist'),
            {
                'action': action,
                'index': 0,
                '_selected_action': [str(s.id) for s in sessions],
            },
        )

    def test_mark_inactive_goes_through_service(self, admin_site_client, play_session):
        response = self.run_action(admin_site_client, 'mark_inactive', [play_session])

        assert response.status_code == 302
        play_session.refresh_from_db()
        assert play_session.status == SessionStatus.INACTIVE
        assert AuditLog.objects.filter(
            session=play_session, action='SESSION_INACTIVATED'
        ).exists()

    def test_mark_completed_skips_closed_sessions(
        self, admin_site_client, play_session, closed_session
    ):
        Session.objects.filter(id=closed_session.id).update(status=SessionStatus.INACTIVE)

        self.run_action(admin_site_client, 'mark_completed', [play_session, closed_session])

        play_session.refresh_from_db()
        closed_session.refresh_from_db()
        assert play_session.status == SessionStatus.COMPLETED
        assert closed_session.status == SessionStatus.INACTIVE
        assert AuditLog.objects.filter(action='SESSION_COMPLETED').count() == 1


# =============================================================================
# Vote Tests
# =============================================================================

@pytest.mark.django_db
class TestVoteEndpoints:
    """Tests for /api/sessions/{id}/vote/ and proxy vote endpoints."""

    def test_cast_vote(self, player_client, play_session, player):
        url = reverse('play_sessions:session-vote', args=[play_session.id])
        response = player_client.post(url, {'vote_type': VoteType.GOING})

        assert response.status_code == status.HTTP_200_OK
        assert Vote.objects.get(session=play_session, user=player).vote_type == VoteType.GOING

    def test_cast_vote_invalid_type(self, player_client, play_session):
        url = reverse('play_sessions:session-vote', args=[play_session.id])
        response = player_client.post(url, {'vote_type': 'maybe'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_cast_vote_closed_session(self, player_client, closed_session):
        url = reverse('play_sessions:session-vote', args=[closed_session.id])
        response = player_client.post(url, {'vote_type': VoteType.GOING})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data

    def test_cast_vote_unknown_session(self, player_client):
        url = reverse('play_sessions:session-vote', args=[uuid4()])
        response = player_client.post(url, {'vote_type': VoteType.GOING})

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_retract_vote(self, player_client, play_session, player):
        Vote.objects.create(session=play_session, user=player, vote_type=VoteType.GOING)

        url = reverse('play_sessions:session-vote', args=[play_session.id])
        response = player_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Vote.objects.filter(session=play_session).exists()

    def test_retract_missing_vote(self, player_client, play_session):
        url = reverse('play_sessions:session-vote', args=[play_session.id])
        response = player_client.delete(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_cast_proxy_vote(self, player_client, play_session, player):
        url = reverse('play_sessions:session-proxy-votes', args=[play_session.id])
        response = player_client.post(url, {'target_name': ' Hoa ', 'gender': 'female'})

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['target']['display_name'] == 'Hoa'
        assert response.data['target']['is_real'] is False
        assert response.data['voter']['id'] == str(player.id)

    def test_remove_proxy_vote(self, player_client, play_session):
        url = reverse('play_sessions:session-proxy-votes', args=[play_session.id])
        player_client.post(url, {'target_name': 'Hoa', 'gender': 'female'})

        response = player_client.delete(url, {'target_name': 'Hoa'}, format='json')

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not ProxyVote.objects.exists()

    def test_remove_unknown_proxy_vote(self, player_client, play_session):
        url = reverse('play_sessions:session-proxy-votes', args=[play_session.id])
        response = player_client.delete(url, {'target_name': 'Nobody'}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_bulk_proxy_votes(self, player_client, play_session):
        url = reverse('play_sessions:session-bulk-proxy-votes', args=[play_session.id])
        response = player_client.post(url, {'male_count': 1, 'female_count': 2})

        assert response.status_code == status.HTTP_201_CREATED
        names = [pv['target']['display_name'] for pv in response.data]
        assert names == ['Male 1', 'Female 1', 'Female 2']

    def test_bulk_proxy_votes_requires_guests(self, player_client, play_session):
        url = reverse('play_sessions:session-bulk-proxy-votes', args=[play_session.id])
        response = player_client.post(url, {'male_count': 0, 'female_count': 0})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_my_proxy_votes(self, player_client, play_session):
        bulk_url = reverse('play_sessions:session-bulk-proxy-votes', args=[play_session.id])
        player_client.post(bulk_url, {'male_count': 2})

        url = reverse('play_sessions:session-my-proxy-votes', args=[play_session.id])
        response = player_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 2


# =============================================================================
# Statistics Tests
# =============================================================================

@pytest.mark.django_db
class TestStatisticsEndpoint:
    """Tests for GET /api/sessions/statistics/"""

    def test_statistics(self, player_client, player):
        session = Session.objects.create(
            play_date=date(2024, 5, 4), total_cost=315000, computed=True
        )
        Vote.objects.create(session=session, user=player, vote_type=VoteType.GOING)

        url = reverse('play_sessions:session-statistics')
        response = player_client.get(url, {'start_date': '2024-05-01', 'end_date': '2024-05-31'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_sessions'] == 1
        assert response.data['total_cost'] == 315000
        assert response.data['male_participants'] == 1

    def test_statistics_requires_dates(self, player_client):
        url = reverse('play_sessions:session-statistics')
        response = player_client.get(url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_statistics_rejects_reversed_range(self, player_client):
        url = reverse('play_sessions:session-statistics')
        response = player_client.get(url, {'start_date': '2024-06-01', 'end_date': '2024-05-01'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
