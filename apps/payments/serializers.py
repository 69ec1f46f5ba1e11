from rest_framework import serializers
from .models import Payment
from apps.accounts.serializers import UserPublicSerializer
from apps.play_sessions.serializers import SessionListSerializer


class PaymentFilterSerializer(serializers.Serializer):
    """Query parameters for listing payments."""

    session = serializers.UUIDField(required=False)
    paid = serializers.BooleanField(required=False, allow_null=True, default=None)


class PaymentSerializer(serializers.ModelSerializer):
    """Serializer for one ledger row."""

    user = UserPublicSerializer(read_only=True)
    play_date = serializers.DateField(source='session.play_date', read_only=True)

    class Meta:
        model = Payment
        fields = [
            'id',
            'session',
            'play_date',
            'user',
            'user_name',
            'amount',
            'paid',
            'paid_at',
            'created_at',
        ]
        read_only_fields = fields


class LedgerDetailSerializer(serializers.Serializer):
    type = serializers.CharField()
    amount = serializers.IntegerField()
    target_name = serializers.CharField(allow_null=True)


class LedgerLineSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    name = serializers.CharField()
    gender = serializers.CharField()
    amount = serializers.IntegerField()
    details = LedgerDetailSerializer(many=True)


class CostBreakdownSerializer(serializers.Serializer):
    court_cost = serializers.IntegerField()
    shuttle_cost = serializers.IntegerField()
    male_total = serializers.IntegerField()
    female_total = serializers.IntegerField()
    male_not_going_total = serializers.IntegerField()
    female_not_going_total = serializers.IntegerField()
    total_participants = serializers.IntegerField()
    total_not_going = serializers.IntegerField()


class SettlementResultSerializer(serializers.Serializer):
    """Shape of ``SettlementResult.as_dict()``."""

    session_id = serializers.UUIDField()
    play_date = serializers.DateField()
    total = serializers.IntegerField()
    court_count = serializers.IntegerField()
    shuttle_count = serializers.IntegerField()
    going_male = serializers.IntegerField()
    going_female = serializers.IntegerField()
    not_going_male = serializers.IntegerField()
    not_going_female = serializers.IntegerField()
    male_share = serializers.IntegerField()
    female_share = serializers.IntegerField()
    male_not_going_share = serializers.IntegerField()
    female_not_going_share = serializers.IntegerField()
    breakdown = CostBreakdownSerializer()
    participants = LedgerLineSerializer(many=True)


class SettleResponseSerializer(serializers.Serializer):
    result = SettlementResultSerializer()
    report = serializers.CharField()


class PaymentSummaryQuerySerializer(serializers.Serializer):
    since = serializers.DateField(required=False)


class PaymentSummarySerializer(serializers.Serializer):
    """Serializer for a user's payment summary."""

    since = serializers.DateField()
    session_count = serializers.IntegerField()
    total_amount = serializers.IntegerField()
    paid_amount = serializers.IntegerField()
    unpaid_amount = serializers.IntegerField()
    payments = PaymentSerializer(many=True)


class UnpaidPaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Payment
        fields = ['id', 'user_name', 'amount']
        read_only_fields = fields


class SessionPaymentSummarySerializer(serializers.Serializer):
    """Serializer for a session's collection progress."""

    session = SessionListSerializer()
    total_users = serializers.IntegerField()
    paid_count = serializers.IntegerField()
    unpaid_count = serializers.IntegerField()
    total_amount = serializers.IntegerField()
    paid_amount = serializers.IntegerField()
    unpaid_amount = serializers.IntegerField()
    completion_rate = serializers.FloatField()
    unpaid = UnpaidPaymentSerializer(many=True)
