from rest_framework import serializers
from .models import Session, Vote, ProxyVote, VoteType
from apps.accounts.models import Gender
from apps.accounts.serializers import UserPublicSerializer


class VoteSerializer(serializers.ModelSerializer):
    """Serializer for a participant's own vote."""

    user = UserPublicSerializer(read_only=True)

    class Meta:
        model = Vote
        fields = ['id', 'user', 'vote_type', 'created_at']
        read_only_fields = fields


class ProxyVoteSerializer(serializers.ModelSerializer):
    """Serializer for a vote cast on behalf of someone else."""

    voter = UserPublicSerializer(read_only=True)
    target = UserPublicSerializer(read_only=True)

    class Meta:
        model = ProxyVote
        fields = ['id', 'voter', 'target', 'vote_type', 'created_at']
        read_only_fields = fields


class SessionSerializer(serializers.ModelSerializer):
    """Full session detail with votes and proxy votes."""

    votes = VoteSerializer(many=True, read_only=True)
    proxy_votes = ProxyVoteSerializer(many=True, read_only=True)
    going_count = serializers.SerializerMethodField()
    user_vote = serializers.SerializerMethodField()

    class Meta:
        model = Session
        fields = [
            'id',
            'play_date',
            'court_count',
            'shuttle_count',
            'status',
            'total_cost',
            'computed',
            'going_count',
            'user_vote',
            'votes',
            'proxy_votes',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_going_count(self, obj):
        """Attendance units: going votes plus going proxy votes."""
        return (
            obj.votes.filter(vote_type=VoteType.GOING).count()
            + obj.proxy_votes.filter(vote_type=VoteType.GOING).count()
        )

    def get_user_vote(self, obj):
        """Current user's own vote type, if any."""
        request = self.context.get('request')
        if request and request.user.is_authenticated:
            vote = obj.votes.filter(user=request.user).first()
            return vote.vote_type if vote else None
        return None


class SessionListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views."""

    class Meta:
        model = Session
        fields = [
            'id',
            'play_date',
            'court_count',
            'shuttle_count',
            'status',
            'total_cost',
            'computed',
        ]
        read_only_fields = fields


class SessionCreateSerializer(serializers.Serializer):
    """Open (or fetch) the session for a date."""

    play_date = serializers.DateField(required=False)


class SessionCountsSerializer(serializers.Serializer):
    """Serializer for updating resource counts."""

    court_count = serializers.IntegerField(min_value=0, required=False)
    shuttle_count = serializers.IntegerField(min_value=0, required=False)

    def validate(self, attrs):
        if 'court_count' not in attrs and 'shuttle_count' not in attrs:
            raise serializers.ValidationError(
                'Provide court_count and/or shuttle_count'
            )
        return attrs


class CastVoteSerializer(serializers.Serializer):
    vote_type = serializers.ChoiceField(choices=VoteType.choices)


class CastProxyVoteSerializer(serializers.Serializer):
    """Serializer for a named proxy vote."""

    target_name = serializers.CharField(max_length=100)
    gender = serializers.ChoiceField(choices=Gender.choices)
    vote_type = serializers.ChoiceField(
        choices=VoteType.choices,
        default=VoteType.GOING
    )

    def validate_target_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Name cannot be blank')
        return value


class RemoveProxyVoteSerializer(serializers.Serializer):
    target_name = serializers.CharField(max_length=100)


class BulkProxyVoteSerializer(serializers.Serializer):
    """Serializer for adding anonymous guests."""

    male_count = serializers.IntegerField(min_value=0, max_value=50, default=0)
    female_count = serializers.IntegerField(min_value=0, max_value=50, default=0)

    def validate(self, attrs):
        if attrs['male_count'] + attrs['female_count'] == 0:
            raise serializers.ValidationError('Add at least one guest')
        return attrs


class StatisticsQuerySerializer(serializers.Serializer):
    """Query parameters for the statistics endpoint."""

    start_date = serializers.DateField()
    end_date = serializers.DateField()

    def validate(self, attrs):
        if attrs['start_date'] > attrs['end_date']:
            raise serializers.ValidationError('start_date must not be after end_date')
        return attrs


class StatisticsSerializer(serializers.Serializer):
    total_sessions = serializers.IntegerField()
    total_cost = serializers.IntegerField()
    total_participants = serializers.IntegerField()
    male_participants = serializers.IntegerField()
    female_participants = serializers.IntegerField()
    average_cost_per_session = serializers.IntegerField()
    average_participants_per_session = serializers.IntegerField()
