"""
Availability links.

Each AvailabilityEntry carries an opaque token; holding the token is enough to
read the entry (with its round and prospect) and to replace its matrix. No
login and no role check is involved on this path.
"""

import logging
import re
import secrets
from datetime import timedelta

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from squadhub.core.exceptions import Conflict
from squadhub.core.exceptions import NotFound
from squadhub.core.exceptions import ValidationError
from squadhub.core.exceptions import translate_db_errors
from squadhub.core.validation import parse_uuid
from squadhub.core.validation import parse_uuid_set
from squadhub.tryouts import matrix as availability_matrix

from .models import EXCLUDED_FROM_ROUNDS
from .models import AvailabilityEntry
from .models import Prospect
from .models import SchedulingRound

logger = logging.getLogger(__name__)

TOKEN_BYTES = 16
TOKEN_PATTERN = re.compile(r"^[0-9a-f]{32}$")

# Unknown, malformed and expired tokens all produce this same message.
INVALID_LINK_MESSAGE = "Invalid or expired link"


def _token_hint(token):
    return f"{token[:6]}…" if token else "<empty>"


def org_timezone():
    return getattr(settings, "TRYOUTS_ORG_TIMEZONE", "Europe/Paris")


class TokenService:
    """Issue, resolve and submit through availability tokens"""

    @staticmethod
    def generate_token() -> str:
        """128 random bits, lowercase hex, no separators."""
        return secrets.token_hex(TOKEN_BYTES)

    @staticmethod
    def _expiry():
        ttl_days = getattr(settings, "TRYOUTS_TOKEN_TTL_DAYS", None)
        if not ttl_days:
            return None
        return timezone.now() + timedelta(days=ttl_days)

    @staticmethod
    def issue(round_id, prospect_ids) -> dict:
        """Create one entry per prospect and return ``{prospect_id: token}``.

        Duplicate ``(round, prospect)`` pairs are rejected by the database
        unique constraint and surface as ``Conflict``; nothing is inserted
        in that case.
        """
        prospect_ids = parse_uuid_set(prospect_ids, "prospect_ids")
        if not prospect_ids:
            raise ValidationError(
                "Select at least one prospect",
                errors={"prospect_ids": "must not be empty"},
            )

        round_id = parse_uuid(round_id, "round_id")
        with translate_db_errors("token issuance"):
            scheduling_round = SchedulingRound.objects.filter(pk=round_id).first()
            if scheduling_round is None:
                raise NotFound("Scheduling round not found")

            if not scheduling_round.has_valid_window:
                raise ValidationError(
                    "Round dates are invalid",
                    errors={"end_date": "must be exactly 6 days after start_date"},
                )

            prospects = {
                p.pk: p for p in Prospect.objects.filter(pk__in=prospect_ids)
            }

        errors = {}
        for prospect_id in prospect_ids:
            prospect = prospects.get(prospect_id)
            if prospect is None:
                errors[str(prospect_id)] = "unknown prospect"
            elif prospect.team_category != scheduling_round.team_category:
                errors[str(prospect_id)] = "prospect belongs to another team category"
            elif prospect.status in EXCLUDED_FROM_ROUNDS:
                errors[str(prospect_id)] = f"prospect is {prospect.status}"
        if errors:
            raise ValidationError("Some prospects cannot join this round", errors=errors)

        expires_at = TokenService._expiry()
        entries = [
            AvailabilityEntry(
                round=scheduling_round,
                prospect_id=prospect_id,
                token=TokenService.generate_token(),
                time_slots={},
                submitted_at=None,
                expires_at=expires_at,
            )
            for prospect_id in sorted(prospect_ids)
        ]

        try:
            with translate_db_errors("token issuance"), transaction.atomic():
                AvailabilityEntry.objects.bulk_create(entries)
        except Conflict as e:
            raise Conflict(
                "One or more prospects already have a link for this round"
            ) from e.__cause__

        logger.info(
            f"Issued {len(entries)} availability tokens for round {scheduling_round.pk}"
        )
        return {entry.prospect_id: entry.token for entry in entries}

    @staticmethod
    def resolve(token) -> AvailabilityEntry:
        """Exact-match lookup. Returns the entry with round and prospect loaded."""
        if not isinstance(token, str) or not TOKEN_PATTERN.match(token):
            raise NotFound(INVALID_LINK_MESSAGE)

        with translate_db_errors("token resolution"):
            entry = (
                AvailabilityEntry.objects.select_related("round", "prospect")
                .filter(token=token)
                .first()
            )

        if entry is None or entry.is_expired():
            logger.info(f"Rejected availability token {_token_hint(token)}")
            raise NotFound(INVALID_LINK_MESSAGE)
        return entry

    @staticmethod
    def submit(token, matrix, timezone_name=None) -> AvailabilityEntry:
        """Replace the entry's matrix and stamp ``submitted_at``.

        ``timezone_name`` is the timezone the prospect filled the grid in;
        the stored matrix is always in the organisation timezone. A matrix
        without any selected slot is rejected and the stored row is left
        untouched.
        """
        entry = TokenService.resolve(token)

        canonical = availability_matrix.normalize(matrix)
        if not availability_matrix.validate(canonical):
            raise ValidationError(
                "Select at least one time slot when you are available",
                errors={"matrix": "no slot selected"},
            )
        if timezone_name:
            canonical = availability_matrix.convert_timezone(
                canonical, timezone_name, org_timezone(), entry.round.start_date
            )

        now = timezone.now()
        with translate_db_errors("availability submission"):
            updated = AvailabilityEntry.objects.filter(pk=entry.pk).update(
                time_slots=canonical,
                submitted_at=now,
                updated_at=now,
            )
        if not updated:
            raise NotFound(INVALID_LINK_MESSAGE)

        entry.time_slots = canonical
        entry.submitted_at = now
        entry.updated_at = now
        logger.info(
            f"Availability submitted for round {entry.round_id} "
            f"({availability_matrix.count_selected(canonical)} slots, token {_token_hint(token)})"
        )
        return entry

    @staticmethod
    def matrix_for_display(entry, timezone_name=None):
        """The entry's matrix, shifted into ``timezone_name`` when given."""
        if not timezone_name:
            return availability_matrix.normalize(entry.time_slots)
        return availability_matrix.convert_timezone(
            entry.time_slots, org_timezone(), timezone_name, entry.round.start_date
        )


def availability_link(token):
    """Public URL a prospect opens to fill in their availability."""
    base_url = getattr(settings, "SITE_URL", "").rstrip("/")
    return f"{base_url}/availability/{token}"
