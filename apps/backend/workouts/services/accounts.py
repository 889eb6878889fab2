from __future__ import annotations

import logging

from django.conf import settings
from django.contrib.auth.models import User
from django.core import signing
from django.utils.crypto import salted_hmac

from workouts.auth import token_pair
from workouts.tasks import send_password_reset_email_task

logger = logging.getLogger(__name__)

RESET_SALT = "weekplanner-password-reset"


def user_payload(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "created_at": user.date_joined.isoformat() if user.date_joined else None,
    }


def auth_payload(user: User) -> dict:
    return {"email": user.email, "user": user_payload(user), "tokens": token_pair(user)}


def _password_fingerprint(user: User) -> str:
    # Changes whenever the password does, so a reset link works only once.
    return salted_hmac(RESET_SALT, user.password).hexdigest()[:20]


def make_reset_token(user: User) -> str:
    return signing.dumps({"uid": user.pk, "pw": _password_fingerprint(user)}, salt=RESET_SALT)


def user_for_reset_token(token: str) -> User | None:
    try:
        data = signing.loads(token, salt=RESET_SALT, max_age=settings.PASSWORD_RESET_TTL_SECONDS)
    except signing.BadSignature:
        return None
    user = User.objects.filter(pk=data.get("uid"), is_active=True).first()
    if user is None or data.get("pw") != _password_fingerprint(user):
        return None
    return user


def reset_url(token: str) -> str:
    return f"{settings.APP_BASE_URL.rstrip('/')}/reset-password/{token}"


def request_password_reset(email: str) -> bool:
    user = User.objects.filter(email__iexact=email, is_active=True).first()
    if user is None:
        return False
    send_password_reset_email_task.delay(user.id, reset_url(make_reset_token(user)))
    logger.info("Password reset requested for user=%s", user.pk)
    return True
