"""Audit trail helper shared by session, vote and settlement services."""

from apps.play_sessions.models import AuditLog, Session


def record_audit(*, session: Session | None, action: str, payload: dict) -> AuditLog:
    """
    Append an audit entry.

    Called inside the caller's transaction so the entry commits or rolls
    back together with the change it describes.
    """
    return AuditLog.objects.create(
        session=session,
        action=action,
        payload=payload,
    )
