"""
Token-only endpoints used by prospects.

No login is involved; the token in the path is the credential. Every lookup
failure, whatever the cause, is answered with the same 404 body.
"""

from contextlib import contextmanager
from typing import Optional

from django.conf import settings
from django.http import HttpRequest
from ninja import Router

from squadhub.api.schemas.availability import AvailabilityLinkSchema
from squadhub.api.schemas.availability import PresetSchema
from squadhub.api.schemas.availability import SubmitAvailabilitySchema
from squadhub.core import ratelimit
from squadhub.core.exceptions import Unavailable
from squadhub.tryouts import matrix as availability_matrix
from squadhub.tryouts.tokens import INVALID_LINK_MESSAGE
from squadhub.tryouts.tokens import TokenService
from squadhub.tryouts.tokens import org_timezone

router = Router()


@contextmanager
def _generic_failures():
    """Keep status and Retry-After, but hide datastore and throttling details."""
    try:
        yield
    except Unavailable as e:
        e.message = INVALID_LINK_MESSAGE
        raise


def _throttle(request: HttpRequest):
    ratelimit.hit(
        "availability_token",
        request.META.get("REMOTE_ADDR") or "unknown",
        limit=getattr(settings, "TRYOUTS_RESOLVE_RATE_LIMIT", 30),
        window=getattr(settings, "TRYOUTS_RESOLVE_RATE_WINDOW", 60),
    )


def _link_view(entry, timezone_name=None):
    prospect = entry.prospect
    scheduling_round = entry.round
    matrix = TokenService.matrix_for_display(entry, timezone_name)
    return {
        "round": scheduling_round,
        "prospect": {
            "display_name": prospect.display_name,
            "username": prospect.username,
            "in_game_name": prospect.in_game_name,
            "position": prospect.position,
        },
        "matrix": matrix,
        "timezone": timezone_name or org_timezone(),
        "submitted_at": entry.submitted_at,
        "selected_count": availability_matrix.count_selected(matrix),
    }


@router.get("/presets/{preset}", response=PresetSchema, auth=None)
def get_preset(request: HttpRequest, preset: str):
    """Canned grid used to pre-fill the availability form."""
    matrix = availability_matrix.quick_fill(preset)
    return {
        "preset": preset,
        "matrix": matrix,
        "selected_count": availability_matrix.count_selected(matrix),
    }


@router.get("/{token}", response=AvailabilityLinkSchema, auth=None)
def resolve_link(request: HttpRequest, token: str, timezone: Optional[str] = None):
    with _generic_failures():
        _throttle(request)
        entry = TokenService.resolve(token)
        return _link_view(entry, timezone)


@router.put("/{token}", response=AvailabilityLinkSchema, auth=None)
def submit_availability(request: HttpRequest, token: str, payload: SubmitAvailabilitySchema):
    with _generic_failures():
        _throttle(request)
        entry = TokenService.submit(token, payload.matrix, timezone_name=payload.timezone)
        return _link_view(entry, payload.timezone)
