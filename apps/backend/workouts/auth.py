from django.conf import settings
from django.contrib.auth import get_user_model
from django.core import signing
from rest_framework import authentication
from rest_framework import exceptions


User = get_user_model()

ACCESS_SALT = "weekplanner-access"
REFRESH_SALT = "weekplanner-refresh"


def token_pair(user) -> dict:
    access_signer = signing.TimestampSigner(salt=ACCESS_SALT)
    refresh_signer = signing.TimestampSigner(salt=REFRESH_SALT)
    return {"access": access_signer.sign(str(user.id)), "refresh": refresh_signer.sign(str(user.id))}


def user_from_token(token: str, *, salt: str, max_age: int):
    signer = signing.TimestampSigner(salt=salt)
    raw = signer.unsign(token, max_age=max_age)
    return User.objects.get(id=int(raw), is_active=True)


class BearerAuthentication(authentication.BaseAuthentication):
    keyword = "Bearer"

    def authenticate(self, request):
        header = authentication.get_authorization_header(request).decode("utf-8")
        if not header:
            return None
        parts = header.split()
        if len(parts) != 2 or parts[0] != self.keyword:
            return None

        try:
            user = user_from_token(parts[1], salt=ACCESS_SALT, max_age=settings.ACCESS_TOKEN_TTL_SECONDS)
        except (signing.BadSignature, ValueError, User.DoesNotExist) as exc:
            raise exceptions.AuthenticationFailed("Invalid or expired token") from exc
        return (user, None)

    def authenticate_header(self, request):
        return self.keyword
