from django.core.validators import MinLengthValidator, RegexValidator
from django.db import models
import uuid
import secrets
import string

KHATA_ID_ALPHABET = string.ascii_uppercase + string.digits
GENERATED_CODE_LENGTH = 6

khata_id_validator = RegexValidator(
    r'^[A-Za-z0-9_-]+$',
    'Room ID may only contain letters, digits, underscores and hyphens.',
)


def generate_khata_id(length=GENERATED_CODE_LENGTH):
    return ''.join(secrets.choice(KHATA_ID_ALPHABET) for _ in range(length))


class MembershipStatus(models.TextChoices):
    PENDING = 'Pending', 'Pending'
    APPROVED = 'Approved', 'Approved'


class Room(models.Model):
    """A khata: the shared household that bills, meals and funds belong to."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    khata_id = models.CharField(
        max_length=50,
        unique=True,
        db_index=True,
        validators=[MinLengthValidator(3), khata_id_validator],
    )
    name = models.CharField(max_length=100, validators=[MinLengthValidator(2)])
    manager = models.ForeignKey('accounts.User', on_delete=models.PROTECT, related_name='managed_rooms')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'rooms'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.name} ({self.khata_id})"

    def approved_members(self):
        return self.residents.filter(room_status='Approved')

    def pending_members(self):
        return self.residents.filter(room_status='Pending')


class RoomMembership(models.Model):
    """A user's request to live in, or approved place in, a room."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    room = models.ForeignKey(Room, on_delete=models.CASCADE, related_name='memberships')
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='room_memberships')
    status = models.CharField(
        max_length=20,
        choices=MembershipStatus.choices,
        default=MembershipStatus.PENDING,
    )
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'room_memberships'
        unique_together = [['room', 'user']]
        indexes = [
            models.Index(fields=['room', 'status']),
        ]
        ordering = ['joined_at']

    def __str__(self):
        return f"{self.user_id} in {self.room_id} ({self.status})"


class Staff(models.Model):
    """Household staff (maid, cook, guard) listed for a room."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    room = models.ForeignKey(Room, on_delete=models.CASCADE, related_name='staff')
    name = models.CharField(max_length=100)
    designation = models.CharField(max_length=100)
    phone = models.CharField(max_length=30)
    avatar_url = models.URLField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'room_staff'
        ordering = ['-created_at']
        verbose_name_plural = 'staff'

    def __str__(self):
        return f"{self.name} ({self.designation})"
