from typing import Optional

from django.http import HttpRequest

from .exceptions import Unauthorized
from .models import ApiToken


def resolve_user(request: HttpRequest):
    """
    Identify the caller from an `Authorization: Bearer <key>` header,
    falling back to the session user. Returns None for anonymous callers.
    """
    header = request.headers.get("Authorization", "")
    if header:
        scheme, _, key = header.partition(" ")
        if scheme.lower() != "bearer" or not key.strip():
            raise Unauthorized("Malformed Authorization header")
        token: Optional[ApiToken] = (
            ApiToken.objects.select_related("user").filter(key=key.strip()).first()
        )
        if token is None or not token.user.is_active:
            raise Unauthorized("Invalid or expired token")
        return token.user

    user = getattr(request, "user", None)
    if user is not None and user.is_authenticated:
        return user
    return None
