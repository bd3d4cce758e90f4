"""
Approval workflow shared by records that a room manager signs off.

Deposits, expenses and room join requests all move through the same
small state machine::

    Pending ──approve──▶ Approved
       │
       └────reject────▶ Rejected

Anything else (approving twice, rejecting an approved record) raises
InvalidTransitionError, which views translate to HTTP 400.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone

from .exceptions import InvalidTransitionError


class ApprovalStatus(models.TextChoices):
    PENDING = 'Pending', 'Pending'
    APPROVED = 'Approved', 'Approved'
    REJECTED = 'Rejected', 'Rejected'


ALLOWED_TRANSITIONS = {
    ApprovalStatus.PENDING: {ApprovalStatus.APPROVED, ApprovalStatus.REJECTED},
    ApprovalStatus.APPROVED: set(),
    ApprovalStatus.REJECTED: set(),
}


def check_transition(current: str, target: str, label: str = 'Record') -> None:
    """
    Validate a status change against ALLOWED_TRANSITIONS.

    Raises:
        InvalidTransitionError: If the move is not allowed
    """
    if target not in ALLOWED_TRANSITIONS.get(current, set()):
        raise InvalidTransitionError(
            f"{label} is already {str(current).lower()} and cannot be {str(target).lower()}"
        )


class ApprovableModel(models.Model):
    """Abstract base holding the approval fields and transitions."""

    status = models.CharField(
        max_length=20,
        choices=ApprovalStatus.choices,
        default=ApprovalStatus.PENDING,
        db_index=True,
    )
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    approved_at = models.DateTimeField(null=True, blank=True)
    rejection_reason = models.TextField(blank=True)

    approval_label = 'Record'

    class Meta:
        abstract = True

    def approve(self, actor):
        check_transition(self.status, ApprovalStatus.APPROVED, self.approval_label)
        self.status = ApprovalStatus.APPROVED
        self.approved_by = actor
        self.approved_at = timezone.now()
        self.save(update_fields=['status', 'approved_by', 'approved_at', 'updated_at'])

    def reject(self, actor, reason=''):
        check_transition(self.status, ApprovalStatus.REJECTED, self.approval_label)
        self.status = ApprovalStatus.REJECTED
        self.rejection_reason = reason or ''
        self.approved_by = actor
        self.approved_at = timezone.now()
        self.save(update_fields=[
            'status', 'rejection_reason', 'approved_by', 'approved_at', 'updated_at',
        ])
