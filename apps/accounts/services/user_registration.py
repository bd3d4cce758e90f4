"""User registration service."""

import logging

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model

from apps.accounts.models import Role
from .emails import send_otp_email
from .exceptions import UserRegistrationError
from .otp import issue_otp

User = get_user_model()
logger = logging.getLogger(__name__)


def register_user(
    *,
    name: str,
    email: str,
    password: str,
    role: str = Role.MEMBER
) -> User:
    """
    Register a new, unverified user and email them a verification code.

    Args:
        name: Display name
        email: User's email address (stored lower-cased)
        password: User's password (will be hashed)
        role: Manager or Member

    Returns:
        Created User instance

    Raises:
        UserRegistrationError: If the email is taken or the role is not allowed
    """
    email = email.strip().lower()
    if role not in (Role.MANAGER, Role.MEMBER):
        raise UserRegistrationError("Role must be Manager or Member")

    if User.objects.filter(email=email).exists():
        raise UserRegistrationError("User already exists")

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                email=email,
                password=password,
                name=name.strip(),
                role=role,
                is_verified=False,
            )
            code = issue_otp(user)
    except IntegrityError:
        raise UserRegistrationError("User already exists")

    send_otp_email(user, code, purpose='verify')
    logger.info("Registered user %s as %s", user.id, role)
    return user
