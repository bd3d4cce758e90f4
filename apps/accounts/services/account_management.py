"""Profile, password and master-manager member administration."""

import logging
from typing import Any, Dict
from uuid import UUID

from django.db import transaction
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password

from apps.accounts.models import Role
from .exceptions import (
    InsufficientPermissionsError,
    PasswordChangeError,
    UserNotFoundError,
    UserRegistrationError,
)
from .session_cache import invalidate_user

User = get_user_model()
logger = logging.getLogger(__name__)

PROFILE_FIELDS = ('name', 'avatar_url', 'phone', 'whatsapp', 'facebook', 'food_preferences')
ADMIN_FIELDS = ('name', 'email', 'phone', 'whatsapp', 'facebook', 'role', 'avatar_url')


@transaction.atomic
def update_profile(*, user: User, **changes) -> User:
    """
    Update the caller's own profile fields.

    Unknown keys are ignored; food preferences are merged over the stored value.
    """
    user = User.objects.select_for_update().get(id=user.id)
    updated = []

    for field in PROFILE_FIELDS:
        if field not in changes:
            continue
        value = changes[field]
        if field == 'food_preferences':
            merged = dict(user.food_preferences or {})
            merged.update(value or {})
            value = merged
        setattr(user, field, value)
        updated.append(field)

    if updated:
        user.save(update_fields=updated + ['updated_at'])
        invalidate_user(user.id)
    return user


@transaction.atomic
def change_password(*, user: User, current_password: str, new_password: str) -> None:
    """
    Change the caller's password.

    Raises:
        PasswordChangeError: Wrong current password, or new equals current
        ValidationError: New password fails AUTH_PASSWORD_VALIDATORS
    """
    user = User.objects.select_for_update().get(id=user.id)

    if not user.check_password(current_password):
        raise PasswordChangeError("Current password is incorrect")
    if current_password == new_password:
        raise PasswordChangeError("New password must be different from the current password")

    validate_password(new_password, user=user)
    user.set_password(new_password)
    user.save(update_fields=['password', 'updated_at'])
    invalidate_user(user.id)


@transaction.atomic
def update_member_as_admin(*, actor: User, user_id: UUID, data: Dict[str, Any]) -> User:
    """
    Edit another account as a master manager.

    Args:
        actor: Master manager performing the edit
        user_id: Account to edit
        data: Any of ADMIN_FIELDS plus an optional ``password``

    Raises:
        InsufficientPermissionsError: Actor is not a master manager, or tries
            to change their own role
        UserNotFoundError: Target does not exist
        UserRegistrationError: Email already used by someone else
        ValidationError: Password fails validation
    """
    if actor.role != Role.MASTER_MANAGER:
        raise InsufficientPermissionsError("Only Master Managers can edit members")

    role = data.get('role')
    if str(actor.id) == str(user_id) and role and role != actor.role:
        raise InsufficientPermissionsError("Cannot change your own role")

    try:
        user = User.objects.select_for_update().get(id=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError("User not found")

    email = data.get('email')
    if email is not None:
        email = email.strip().lower()
        if User.objects.filter(email=email).exclude(id=user.id).exists():
            raise UserRegistrationError("Email already in use")
        data = {**data, 'email': email}

    updated = []
    for field in ADMIN_FIELDS:
        if field in data:
            setattr(user, field, data[field])
            updated.append(field)

    password = (data.get('password') or '').strip()
    if password:
        validate_password(password, user=user)
        user.set_password(password)
        user.is_dummy_account = False
        updated += ['password', 'is_dummy_account']

    if updated:
        user.save(update_fields=updated + ['updated_at'])
        invalidate_user(user.id)
        logger.info("Master manager %s updated user %s (%s)", actor.id, user.id, ', '.join(updated))
    return user
