from django.db import models
import uuid


class SessionStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    COMPLETED = 'completed', 'Completed'
    INACTIVE = 'inactive', 'Inactive'


class VoteType(models.TextChoices):
    GOING = 'going', 'Going'
    NOT_GOING = 'not_going', 'Not going'


class Session(models.Model):
    """One badminton outing and its resource counts."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    play_date = models.DateField(unique=True)

    # Resources used
    court_count = models.PositiveIntegerField(default=0)
    shuttle_count = models.PositiveIntegerField(default=0)

    status = models.CharField(
        max_length=20,
        choices=SessionStatus.choices,
        default=SessionStatus.PENDING
    )

    # Cached result of the last settlement
    total_cost = models.PositiveIntegerField(default=0)
    computed = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'play_sessions'
        indexes = [
            models.Index(fields=['status', 'play_date'], name='sessions_status_date_idx'),
            models.Index(fields=['computed', 'play_date'], name='sessions_computed_date_idx'),
        ]
        ordering = ['-play_date']

    def __str__(self):
        return f"Session {self.play_date} ({self.status})"

    @property
    def is_open(self):
        return self.status == SessionStatus.PENDING


class Vote(models.Model):
    """A participant's own attendance declaration."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    session = models.ForeignKey(
        Session,
        on_delete=models.CASCADE,
        related_name='votes'
    )
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='votes'
    )
    vote_type = models.CharField(max_length=20, choices=VoteType.choices)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'votes'
        constraints = [
            models.UniqueConstraint(fields=['session', 'user'], name='unique_vote_per_session_user'),
        ]
        ordering = ['created_at']

    def __str__(self):
        return f"{self.user.get_display_name()}: {self.vote_type}"


class ProxyVote(models.Model):
    """
    Attendance declared by ``voter`` on behalf of ``target``.

    The voter owes the money; the target's gender picks the pricing tier.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    session = models.ForeignKey(
        Session,
        on_delete=models.CASCADE,
        related_name='proxy_votes'
    )
    voter = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='proxy_votes_cast'
    )
    target = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='proxy_votes_received'
    )
    vote_type = models.CharField(
        max_length=20,
        choices=VoteType.choices,
        default=VoteType.GOING
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'proxy_votes'
        constraints = [
            models.UniqueConstraint(
                fields=['session', 'voter', 'target'],
                name='unique_proxy_vote_per_pair'
            ),
        ]
        indexes = [
            models.Index(fields=['session', 'voter'], name='proxy_votes_session_voter_idx'),
        ]
        ordering = ['created_at']

    def __str__(self):
        return (
            f"{self.voter.get_display_name()} for "
            f"{self.target.get_display_name()}: {self.vote_type}"
        )


class AuditLog(models.Model):
    """Append-only trace of state changes, pruned by the retention job."""

    id = models.BigAutoField(primary_key=True)
    session = models.ForeignKey(
        Session,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='audit_logs'
    )
    action = models.CharField(max_length=50)
    payload = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = 'audit_logs'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.action} @ {self.created_at}"
