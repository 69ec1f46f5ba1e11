from django.db import models
from django.utils import timezone
import uuid


class Payment(models.Model):
    """
    Amount one responsible user owes for a session.

    Rows are regenerated by every settlement; ``user_name`` is a snapshot
    of the display name at settlement time.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    session = models.ForeignKey(
        'play_sessions.Session',
        on_delete=models.CASCADE,
        related_name='payments'
    )
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='payments'
    )
    user_name = models.CharField(max_length=100)

    # Amount owed, whole currency units
    amount = models.PositiveIntegerField()

    # Payment tracking
    paid = models.BooleanField(default=False)
    paid_at = models.DateTimeField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'payments'
        constraints = [
            models.UniqueConstraint(fields=['session', 'user'], name='unique_payment_per_session_user'),
        ]
        indexes = [
            models.Index(fields=['user', 'paid'], name='payments_user_paid_idx'),
            models.Index(fields=['session', 'paid'], name='payments_session_paid_idx'),
        ]
        ordering = ['user_name']

    def __str__(self):
        state = 'paid' if self.paid else 'unpaid'
        return f"{self.user_name} owes {self.amount} ({state})"

    def mark_paid(self):
        """Mark the row as paid now."""
        self.paid = True
        self.paid_at = timezone.now()
        self.save(update_fields=['paid', 'paid_at', 'updated_at'])
