"""Transactional emails for account verification and password reset."""

import logging
import smtplib

from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)

SUBJECTS = {
    'verify': 'Verify your BillKhata account',
    'reset': 'Reset your BillKhata password',
}

BODIES = {
    'verify': (
        "Hi {name},\n\n"
        "Your BillKhata verification code is {code}.\n"
        "It expires in {minutes} minutes.\n"
    ),
    'reset': (
        "Hi {name},\n\n"
        "Use the code {code} to reset your BillKhata password.\n"
        "It expires in {minutes} minutes. If you did not ask for this, ignore this email.\n"
    ),
}


def send_otp_email(user, code: str, purpose: str = 'verify') -> bool:
    """
    Email a one-time code. Delivery problems are logged, not raised.

    Returns:
        True if the mail backend accepted the message
    """
    body = BODIES[purpose].format(
        name=user.get_display_name(),
        code=code,
        minutes=settings.OTP_EXPIRY_MINUTES,
    )
    try:
        send_mail(
            SUBJECTS[purpose],
            body,
            settings.DEFAULT_FROM_EMAIL,
            [user.email],
            fail_silently=False,
        )
    except (smtplib.SMTPException, OSError) as e:
        logger.warning("Could not send %s email to %s: %s", purpose, user.email, e)
        return False
    return True
