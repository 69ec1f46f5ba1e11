import pytest
from uuid import uuid4
from django.urls import reverse
from rest_framework import status
from apps.payments.models import Payment
from apps.accounts.models import User
from apps.play_sessions.models import AuditLog, Session, SessionStatus


# =============================================================================
# Settlement Tests
# =============================================================================

@pytest.mark.django_db
class TestSettleEndpoint:
    """Tests for POST /api/payments/settle/{session_id}/"""

    def test_settle_returns_result_and_report(self, staff_client, voted_session):
        url = reverse('payments:settle', args=[voted_session.id])
        response = staff_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        result = response.data['result']
        assert result['total'] == 315000
        assert result['male_share'] == 79000
        assert result['female_share'] == 40000
        assert len(result['participants']) == 5
        assert response.data['report'].startswith('🏸 Results for 4/5/2024:')
        assert Payment.objects.filter(session=voted_session).count() == 5

    def test_settle_twice_keeps_one_ledger(self, staff_client, voted_session):
        url = reverse('payments:settle', args=[voted_session.id])
        staff_client.post(url)
        response = staff_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert Payment.objects.filter(session=voted_session).count() == 5

    def test_settle_unknown_session(self, staff_client):
        url = reverse('payments:settle', args=[uuid4()])
        response = staff_client.post(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert 'not found' in response.data['error']

    def test_settle_without_votes(self, staff_client, play_session):
        url = reverse('payments:settle', args=[play_session.id])
        response = staff_client.post(url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_settle_requires_staff(self, player_client, voted_session):
        url = reverse('payments:settle', args=[voted_session.id])
        response = player_client.post(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert not Payment.objects.exists()

    def test_settle_unauthenticated(self, api_client, voted_session):
        url = reverse('payments:settle', args=[voted_session.id])
        response = api_client.post(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Payment Tests
# =============================================================================

@pytest.mark.django_db
class TestPaymentList:
    """Tests for GET /api/payments/"""

    @pytest.fixture
    def settled(self, staff_client, voted_session):
        staff_client.post(reverse('payments:settle', args=[voted_session.id]))
        return voted_session

    def test_list_by_session(self, staff_client, settled):
        other = Session.objects.create(play_date='2024-05-11')
        Payment.objects.create(
            session=other,
            user=Payment.objects.first().user,
            user_name='An',
            amount=10000,
        )

        url = reverse('payments:payment-list')
        response = staff_client.get(url, {'session': str(settled.id)})

        assert response.status_code == status.HTTP_200_OK
        names = [p['user_name'] for p in response.data['results']]
        assert names == ['An', 'Binh', 'Cuong', 'Dung', 'Ha']

    def test_list_by_paid_flag(self, staff_client, settled):
        Payment.objects.filter(user_name='Ha').update(paid=True)

        url = reverse('payments:payment-list')
        response = staff_client.get(url, {'session': str(settled.id), 'paid': 'true'})

        assert [p['user_name'] for p in response.data['results']] == ['Ha']

    def test_list_rejects_bad_session_id(self, staff_client):
        url = reverse('payments:payment-list')
        response = staff_client.get(url, {'session': 'not-a-uuid'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_mark_paid(self, staff_client, settled):
        payment = Payment.objects.get(session=settled, user_name='Dung')

        url = reverse('payments:payment-mark-paid', args=[payment.id])
        response = staff_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['paid'] is True

    def test_mark_paid_twice(self, staff_client, settled):
        payment = Payment.objects.get(session=settled, user_name='Dung')
        url = reverse('payments:payment-mark-paid', args=[payment.id])
        staff_client.post(url)

        response = staff_client.post(url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_mark_paid_closed_session(self, staff_client, settled):
        Session.objects.filter(id=settled.id).update(status=SessionStatus.COMPLETED)
        payment = Payment.objects.get(session=settled, user_name='Dung')

        url = reverse('payments:payment-mark-paid', args=[payment.id])
        response = staff_client.post(url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_mark_paid_unknown(self, staff_client):
        url = reverse('payments:payment-mark-paid', args=[uuid4()])
        response = staff_client.post(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestMySummary:
    """Tests for GET /api/payments/my_summary/"""

    def test_my_summary(self, player_client, players):
        session = Session.objects.create(play_date='2024-05-04')
        Payment.objects.create(session=session, user=players['an'], user_name='An', amount=79000)
        Payment.objects.create(session=session, user=players['ha'], user_name='Ha', amount=40000)

        url = reverse('payments:payment-my-summary')
        response = player_client.get(url, {'since': '2024-05-01'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['session_count'] == 1
        assert response.data['unpaid_amount'] == 79000
        assert response.data['payments'][0]['play_date'] == '2024-05-04'


@pytest.mark.django_db
class TestSessionPaymentSummaryEndpoint:
    """Tests for GET /api/payments/summary/{session_id}/"""

    def test_summary(self, staff_client, voted_session):
        staff_client.post(reverse('payments:settle', args=[voted_session.id]))
        Payment.objects.filter(session=voted_session, user_name='Dung').update(paid=True)

        url = reverse('payments:session-summary', args=[voted_session.id])
        response = staff_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['session']['id'] == str(voted_session.id)
        assert response.data['paid_count'] == 1
        assert response.data['unpaid_count'] == 4
        assert response.data['paid_amount'] == 40000
        assert response.data['completion_rate'] == 20.0
        assert [p['user_name'] for p in response.data['unpaid']] == ['An', 'Binh', 'Cuong', 'Ha']

    def test_summary_of_unsettled_session(self, staff_client, play_session):
        url = reverse('payments:session-summary', args=[play_session.id])
        response = staff_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_users'] == 0
        assert response.data['completion_rate'] == 0
        assert response.data['unpaid'] == []

    def test_summary_unknown_session(self, staff_client):
        url = reverse('payments:session-summary', args=[uuid4()])
        response = staff_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_summary_requires_staff(self, player_client, play_session):
        url = reverse('payments:session-summary', args=[play_session.id])
        response = player_client.get(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestPaymentAdminSite:
    """Bulk mark-as-paid on the Django admin payment changelist."""

    @pytest.fixture
    def admin_site_client(self, client, db):
        superuser = User.objects.create_superuser(
            external_id='tg_9999',
            password='TestPass123!',
            display_name='Admin',
        )
        client.force_login(superuser)
        return client

    def mark_as_paid(self, client, payments):
        return client.post(
            reverse('admin:payments_payment_changelist'),
            {
                'action': 'mark_as_paid',
                'index': 0,
                '_selected_action': [str(p.id) for p in payments],
            },
        )

    def test_mark_as_paid_writes_audit_entry(self, admin_site_client, play_session, players):
        payment = Payment.objects.create(
            session=play_session, user=players['an'], user_name='An', amount=79000,
        )

        response = self.mark_as_paid(admin_site_client, [payment])

        assert response.status_code == 302
        payment.refresh_from_db()
        assert payment.paid is True
        assert AuditLog.objects.filter(action='PAYMENT_MARKED_PAID').count() == 1

    def test_mark_as_paid_skips_closed_sessions(self, admin_site_client, players):
        closed = Session.objects.create(play_date='2024-05-11', status=SessionStatus.COMPLETED)
        payment = Payment.objects.create(
            session=closed, user=players['an'], user_name='An', amount=79000,
        )

        self.mark_as_paid(admin_site_client, [payment])

        payment.refresh_from_db()
        assert payment.paid is False
        assert not AuditLog.objects.filter(action='PAYMENT_MARKED_PAID').exists()
