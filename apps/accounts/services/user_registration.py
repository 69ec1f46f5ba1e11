"""User registration service."""

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model
import structlog

from .exceptions import UserRegistrationError

User = get_user_model()

logger = structlog.get_logger(__name__)


@transaction.atomic
def register_user(
    *,
    external_id: str,
    display_name: str,
    gender: str,
    password: str = None
) -> User:
    """
    Register a bot participant, or refresh the name and gender of a known one.

    Args:
        external_id: Messenger/bot id of the participant
        display_name: Name shown in reports and payment rows
        gender: 'male' or 'female'; picks the pricing tier
        password: Optional password for API login

    Returns:
        Created or updated User instance

    Raises:
        UserRegistrationError: If the external id belongs to a placeholder
            or the database rejects the row
    """
    user = (
        User.objects
        .select_for_update()
        .filter(external_id=external_id)
        .first()
    )

    if user is not None:
        if not user.is_real:
            raise UserRegistrationError("External id is reserved for a proxy placeholder")

        # Password is only set on creation
        user.display_name = display_name
        user.gender = gender
        user.save(update_fields=['display_name', 'gender'])
        logger.info("user_refreshed", user_id=str(user.id), gender=gender)
        return user

    try:
        user = User.objects.create_user(
            external_id=external_id,
            password=password,
            display_name=display_name,
            gender=gender,
        )
    except IntegrityError as e:
        raise UserRegistrationError(f"Registration failed: {str(e)}")

    logger.info("user_registered", user_id=str(user.id), gender=gender)
    return user
