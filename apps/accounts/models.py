from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
import uuid


class Gender(models.TextChoices):
    MALE = 'male', 'Male'
    FEMALE = 'female', 'Female'


class UserManager(BaseUserManager):
    """Custom user manager keyed on the messenger/bot external id."""

    def create_user(self, external_id, password=None, **extra_fields):
        if not external_id:
            raise ValueError('External id is required')

        user = self.model(external_id=external_id, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, external_id, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True')

        return self.create_user(external_id, password, **extra_fields)

    def get_or_create_placeholder(self, display_name, gender):
        """
        Return the proxy placeholder called ``display_name``, creating it lazily.

        An existing placeholder whose gender differs is updated, so the
        latest proxy vote decides which pricing tier the name falls into.

        Returns:
            tuple: (User, created)
        """
        user = (
            self.filter(display_name=display_name, is_real=False)
            .order_by('created_at')
            .first()
        )
        if user is None:
            user = self.create_user(
                external_id=f"proxy_{uuid.uuid4().hex}",
                display_name=display_name,
                gender=gender,
                is_real=False,
            )
            return user, True

        if user.gender != gender:
            user.gender = gender
            user.save(update_fields=['gender'])
        return user, False


class User(AbstractBaseUser, PermissionsMixin):
    """Session participant: a registered bot user or a proxy placeholder."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    external_id = models.CharField(unique=True, max_length=100, db_index=True)
    display_name = models.CharField(max_length=100, blank=True)
    gender = models.CharField(
        max_length=10,
        choices=Gender.choices,
        default=Gender.MALE
    )

    # Synthetic users created by proxy votes are not real
    is_real = models.BooleanField(default=True)

    # Permissions
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    last_login = models.DateTimeField(null=True, blank=True)

    objects = UserManager()

    USERNAME_FIELD = 'external_id'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'users'
        indexes = [
            models.Index(fields=['display_name', 'is_real'], name='users_name_real_idx'),
            models.Index(fields=['created_at'], name='users_created_idx'),
        ]

    def __str__(self):
        return self.get_display_name()

    def get_display_name(self):
        """Return display name or the external id."""
        return self.display_name or self.external_id

    @property
    def is_female(self):
        return self.gender == Gender.FEMALE
