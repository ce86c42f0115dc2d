import logging
from typing import Optional

import jwt
from django.conf import settings
from django.contrib.auth import get_user_model
from django.http import HttpRequest
from ninja.security import HttpBearer

from squadhub.core.permissions import Actor

User = get_user_model()
logger = logging.getLogger(__name__)


class JWTAuth(HttpBearer):
    """
    Verifies bearer tokens issued by the login service.

    Tokens are HS256 JWTs carrying a ``user_id`` claim. This project never
    issues them.
    """

    def authenticate(self, request: HttpRequest, token: str) -> Optional[User]:
        try:
            # Use JWT_SECRET_KEY from settings if available, otherwise fallback to SECRET_KEY
            secret_key = getattr(settings, "JWT_SECRET_KEY", settings.SECRET_KEY)
            algorithm = getattr(settings, "JWT_ALGORITHM", "HS256")

            payload = jwt.decode(token, secret_key, algorithms=[algorithm])
        except jwt.ExpiredSignatureError:
            logger.info("Rejected expired bearer token")
            return None
        except jwt.InvalidTokenError:
            return None

        user_id = payload.get("user_id")
        if not user_id:
            return None
        return (
            User.objects.select_related("team")
            .filter(id=user_id, is_active=True)
            .first()
        )


def get_actor(request: HttpRequest) -> Actor:
    """The authorization actor for an authenticated request."""
    return Actor.from_user(request.auth)
