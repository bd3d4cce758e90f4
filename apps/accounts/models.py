from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
import uuid


class Role(models.TextChoices):
    MANAGER = 'Manager', 'Manager'
    MEMBER = 'Member', 'Member'
    MASTER_MANAGER = 'MasterManager', 'Master Manager'


class RoomStatus(models.TextChoices):
    NO_ROOM = 'NoRoom', 'No Room'
    PENDING = 'Pending', 'Pending'
    APPROVED = 'Approved', 'Approved'


def default_food_preferences():
    return {'likes': [], 'dislikes': [], 'avoidance': [], 'notes': ''}


class UserManager(BaseUserManager):
    """Custom user manager for email-based authentication."""

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('Email is required')

        email = self.normalize_email(email).lower()
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_verified', True)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True')

        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """Roommate account. A user belongs to at most one room at a time."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, max_length=255, db_index=True)
    name = models.CharField(max_length=50)

    role = models.CharField(max_length=20, choices=Role.choices, default=Role.MEMBER)
    room_status = models.CharField(
        max_length=20,
        choices=RoomStatus.choices,
        default=RoomStatus.NO_ROOM,
    )
    room = models.ForeignKey(
        'rooms.Room',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='residents',
    )

    # Contact & profile
    avatar_url = models.URLField(blank=True)
    phone = models.CharField(max_length=30, blank=True)
    whatsapp = models.CharField(max_length=30, blank=True)
    facebook = models.CharField(max_length=200, blank=True)
    food_preferences = models.JSONField(default=default_food_preferences, blank=True)

    # Authentication & verification
    is_verified = models.BooleanField(default=False)
    otp = models.CharField(max_length=128, blank=True, null=True)
    otp_expires_at = models.DateTimeField(null=True, blank=True)

    # Accounts created by a master manager without real credentials
    is_dummy_account = models.BooleanField(default=False)

    # Permissions
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    last_login = models.DateTimeField(null=True, blank=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'users'
        indexes = [
            models.Index(fields=['email']),
            models.Index(fields=['room', 'room_status']),
        ]

    def __str__(self):
        return self.email

    def get_display_name(self):
        """Return name or email prefix."""
        return self.name or self.email.split('@')[0]

    @property
    def is_manager(self):
        return self.role in (Role.MANAGER, Role.MASTER_MANAGER)

    @property
    def is_master_manager(self):
        return self.role == Role.MASTER_MANAGER

    @property
    def khata_id(self):
        return self.room.khata_id if self.room_id else None

    def belongs_to(self, khata_id):
        """Approved member of the room with this code."""
        return (
            khata_id is not None
            and self.room_status == RoomStatus.APPROVED
            and self.khata_id == khata_id
        )

    def reset_room(self, save=True):
        self.room = None
        self.room_status = RoomStatus.NO_ROOM
        if save:
            self.save(update_fields=['room', 'room_status', 'updated_at'])
