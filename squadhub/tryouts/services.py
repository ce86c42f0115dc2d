"""
Staff-side services for tryouts: scheduling rounds and the prospect database.

Every method takes the acting ``Actor`` first and checks it against the
authorization gate before reading or writing anything.
"""

import logging
from typing import Any, Dict, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import URLValidator
from django.db import transaction
from django.db.models import Count
from django.db.models import Q

from squadhub.core.exceptions import NotFound
from squadhub.core.exceptions import ValidationError
from squadhub.core.exceptions import translate_db_errors
from squadhub.core.permissions import Action
from squadhub.core.permissions import Resource
from squadhub.core.permissions import require
from squadhub.core.validation import parse_date
from squadhub.core.validation import parse_uuid
from squadhub.core.validation import sanitize_string
from squadhub.teams.models import TeamCategory
from squadhub.users.models import UserRole

from . import matrix as availability_matrix
from .lifecycle import ProspectLifecycleService
from .models import ROUND_LENGTH
from .models import AvailabilityEntry
from .models import Position
from .models import Prospect
from .models import ProspectStatus
from .models import RoundStatus
from .models import SchedulingRound
from .tokens import TokenService

logger = logging.getLogger(__name__)

ROUND_EDITABLE_FIELDS = ("label", "notes", "status")
ROUND_LOCKED_FIELDS = ("team_category", "start_date", "end_date")

PROSPECT_TEXT_FIELDS = {
    "username": 100,
    "full_name": 255,
    "in_game_name": 100,
    "rank": 50,
    "discord": 100,
    "links": 2000,
    "notes": 5000,
}
PROSPECT_URL_FIELDS = ("tracker_url", "twitter_url")


def _check_category(team_category):
    if team_category not in TeamCategory.values:
        raise ValidationError(
            f"Unknown team category '{team_category}'",
            errors={"team_category": f"must be one of {', '.join(TeamCategory.values)}"},
        )
    return team_category


def _scope_category(actor, team_category=None, kind="tryouts") -> Optional[str]:
    """Resolve which category a staff listing covers.

    Admins without an explicit filter see every category (``None``); anyone
    else is pinned to the category the gate lets them read.
    """
    if team_category:
        _check_category(team_category)
        require(actor, Action.READ, Resource.for_category(team_category, kind=kind))
        return team_category
    if actor.role == UserRole.ADMIN:
        return None
    require(actor, Action.READ, Resource.for_category(actor.team_category, kind=kind))
    return actor.team_category


def _round_window(start_date, end_date=None):
    start = parse_date(start_date, "start_date")
    if start is None:
        raise ValidationError("Start date is required", errors={"start_date": "required"})
    expected_end = start + ROUND_LENGTH
    end = parse_date(end_date, "end_date")
    if end is not None and end != expected_end:
        raise ValidationError(
            "A round lasts exactly one week",
            errors={"end_date": f"must be {expected_end.isoformat()}"},
        )
    return start, expected_end


def _load_round(round_id) -> SchedulingRound:
    round_id = parse_uuid(round_id, "round_id")
    with translate_db_errors("round lookup"):
        scheduling_round = SchedulingRound.objects.filter(pk=round_id).first()
    if scheduling_round is None:
        raise NotFound("Scheduling round not found")
    return scheduling_round


class SchedulingService:
    """Create, edit and inspect scheduling rounds"""

    @staticmethod
    def create_round(
        actor,
        team_category,
        start_date,
        prospect_ids,
        label="",
        notes="",
        end_date=None,
    ):
        """Create a round and issue one availability token per prospect.

        Returns ``(round, {prospect_id: token})``. Either both the round and
        all of its entries are stored or nothing is.
        """
        _check_category(team_category)
        require(actor, Action.WRITE, Resource.for_category(team_category))
        start, end = _round_window(start_date, end_date)

        with translate_db_errors("round creation"), transaction.atomic():
            scheduling_round = SchedulingRound.objects.create(
                team_category=team_category,
                label=sanitize_string(label, 255),
                notes=sanitize_string(notes, 5000),
                start_date=start,
                end_date=end,
                created_by_id=actor.identity,
            )
            tokens = TokenService.issue(scheduling_round.pk, prospect_ids)

        logger.info(
            f"Round {scheduling_round.pk} ({team_category}, week of {start}) "
            f"created by user {actor.identity} with {len(tokens)} prospects"
        )
        return scheduling_round, tokens

    @staticmethod
    def add_participants(actor, round_id, prospect_ids) -> Dict[Any, str]:
        """Invite more prospects to an existing round."""
        scheduling_round = _load_round(round_id)
        require(actor, Action.WRITE, Resource.for_round(scheduling_round))
        if scheduling_round.status in (RoundStatus.COMPLETED, RoundStatus.CANCELLED):
            raise ValidationError(
                f"Cannot add prospects to a {scheduling_round.get_status_display().lower()} round"
            )
        return TokenService.issue(scheduling_round.pk, prospect_ids)

    @staticmethod
    def update_round(actor, round_id, **changes) -> SchedulingRound:
        """Edit label, notes or status.

        Category and dates may only change while no token has been issued
        for the round.
        """
        scheduling_round = _load_round(round_id)
        require(actor, Action.WRITE, Resource.for_round(scheduling_round))

        unknown = set(changes) - set(ROUND_EDITABLE_FIELDS) - set(ROUND_LOCKED_FIELDS)
        if unknown:
            raise ValidationError(
                "Unknown fields", errors={name: "not editable" for name in sorted(unknown)}
            )

        locked = [name for name in ROUND_LOCKED_FIELDS if changes.get(name) is not None]
        if locked and scheduling_round.entries.exists():
            raise ValidationError(
                "Round dates and category cannot change once links were issued",
                errors={name: "locked" for name in locked},
            )

        update_fields = ["updated_at"]
        if changes.get("team_category") is not None:
            category = _check_category(changes["team_category"])
            require(actor, Action.WRITE, Resource.for_category(category))
            scheduling_round.team_category = category
            update_fields.append("team_category")
        if changes.get("start_date") is not None or changes.get("end_date") is not None:
            start, end = _round_window(
                changes.get("start_date") or scheduling_round.start_date,
                changes.get("end_date"),
            )
            scheduling_round.start_date = start
            scheduling_round.end_date = end
            update_fields += ["start_date", "end_date"]
        if changes.get("label") is not None:
            scheduling_round.label = sanitize_string(changes["label"], 255)
            update_fields.append("label")
        if changes.get("notes") is not None:
            scheduling_round.notes = sanitize_string(changes["notes"], 5000)
            update_fields.append("notes")
        if changes.get("status") is not None:
            if changes["status"] not in RoundStatus.values:
                raise ValidationError(
                    f"Unknown round status '{changes['status']}'",
                    errors={"status": f"must be one of {', '.join(RoundStatus.values)}"},
                )
            scheduling_round.status = changes["status"]
            update_fields.append("status")

        with translate_db_errors("round update"):
            scheduling_round.save(update_fields=update_fields)
        logger.info(
            f"Round {scheduling_round.pk} updated by user {actor.identity}: "
            f"{', '.join(update_fields[1:]) or 'no changes'}"
        )
        return scheduling_round

    @staticmethod
    def delete_round(actor, round_id) -> None:
        """Delete a round together with all of its availability entries."""
        scheduling_round = _load_round(round_id)
        require(actor, Action.WRITE, Resource.for_round(scheduling_round))
        with translate_db_errors("round deletion"):
            deleted, _ = scheduling_round.delete()
        logger.info(
            f"Round {round_id} deleted by user {actor.identity} ({deleted} rows removed)"
        )

    @staticmethod
    def seed_from_template(actor, round_id, template) -> int:
        """Merge ``template`` into every entry that has not been submitted yet.

        Seeded leaves count towards ``has_response``, so even the all-false
        ``clear`` preset marks every pending entry as responded in the round
        summary. ``submitted_count`` still tells the two apart.

        Returns the number of entries updated.
        """
        scheduling_round = _load_round(round_id)
        require(actor, Action.WRITE, Resource.for_round(scheduling_round))
        template = availability_matrix.normalize(template)
        if not template:
            raise ValidationError("Template is empty", errors={"template": "required"})

        with translate_db_errors("template seeding"), transaction.atomic():
            entries = list(
                scheduling_round.entries.select_for_update().filter(submitted_at__isnull=True)
            )
            for entry in entries:
                entry.time_slots = availability_matrix.merge_override(entry.time_slots, template)
            AvailabilityEntry.objects.bulk_update(entries, ["time_slots"])

        logger.info(f"Seeded {len(entries)} entries of round {scheduling_round.pk} from a template")
        return len(entries)

    @staticmethod
    def round_detail(actor, round_id) -> Dict[str, Any]:
        scheduling_round = _load_round(round_id)
        require(actor, Action.READ, Resource.for_round(scheduling_round))
        with translate_db_errors("round detail"):
            entries = list(
                scheduling_round.entries.select_related("prospect").order_by(
                    "prospect__username"
                )
            )
        return {
            "round": scheduling_round,
            "entries": entries,
            "summary": availability_matrix.aggregate(entries),
        }

    @staticmethod
    def list_rounds(actor, team_category=None, status=None):
        category = _scope_category(actor, team_category, kind="round")
        queryset = SchedulingRound.objects.annotate(
            entry_count=Count("entries"),
            submitted_count=Count("entries", filter=Q(entries__submitted_at__isnull=False)),
        )
        if category:
            queryset = queryset.filter(team_category=category)
        if status:
            if status not in RoundStatus.values:
                raise ValidationError(f"Unknown round status '{status}'")
            queryset = queryset.filter(status=status)
        with translate_db_errors("round listing"):
            return list(queryset.order_by("-start_date", "-created_at"))


def _clean_prospect_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    """Validate and normalise editable prospect fields present in ``data``."""
    cleaned = {}
    errors = {}

    for name, max_length in PROSPECT_TEXT_FIELDS.items():
        if name in data and data[name] is not None:
            cleaned[name] = sanitize_string(data[name], max_length)

    for name in PROSPECT_URL_FIELDS:
        if name not in data:
            continue
        value = sanitize_string(data[name] or "", 200)
        if value:
            try:
                URLValidator()(value)
            except DjangoValidationError:
                errors[name] = "must be a valid URL"
                continue
        cleaned[name] = value

    if data.get("team_category") is not None:
        if data["team_category"] in TeamCategory.values:
            cleaned["team_category"] = data["team_category"]
        else:
            errors["team_category"] = f"must be one of {', '.join(TeamCategory.values)}"

    if "position" in data and data["position"] is not None:
        if data["position"] in Position.values or data["position"] == "":
            cleaned["position"] = data["position"]
        else:
            errors["position"] = f"must be one of {', '.join(Position.values)}"

    if "is_igl" in data and data["is_igl"] is not None:
        if isinstance(data["is_igl"], bool):
            cleaned["is_igl"] = data["is_igl"]
        else:
            errors["is_igl"] = "must be true or false"

    if "nationality" in data and data["nationality"] is not None:
        nationality = sanitize_string(data["nationality"], 2).upper()
        if nationality and not (len(nationality) == 2 and nationality.isalpha()):
            errors["nationality"] = "must be a two-letter country code"
        else:
            cleaned["nationality"] = nationality

    if "agent_pool" in data and data["agent_pool"] is not None:
        pool = data["agent_pool"]
        if isinstance(pool, list) and all(isinstance(agent, str) for agent in pool):
            cleaned["agent_pool"] = [sanitize_string(agent, 50) for agent in pool if agent.strip()]
        else:
            errors["agent_pool"] = "must be a list of agent names"

    if "username" in cleaned and not cleaned["username"]:
        errors["username"] = "required"

    if errors:
        raise ValidationError("Invalid prospect", errors=errors)
    return cleaned


def _load_prospect(prospect_id) -> Prospect:
    prospect_id = parse_uuid(prospect_id, "prospect_id")
    with translate_db_errors("prospect lookup"):
        prospect = Prospect.objects.filter(pk=prospect_id).first()
    if prospect is None:
        raise NotFound("Prospect not found")
    return prospect


class ProspectService:
    """The scouting database: listing, editing and per-status counts"""

    @staticmethod
    def list_prospects(actor, status=None, position=None, search=None, team_category=None, eligible=False):
        """``eligible`` limits the list to prospects that can be invited to a round."""
        category = _scope_category(actor, team_category, kind="prospect")
        if eligible:
            queryset = ProspectLifecycleService.eligible_for_round(category)
        else:
            queryset = Prospect.objects.all()
            if category:
                queryset = queryset.filter(team_category=category)
        if status:
            if status not in ProspectStatus.values:
                raise ValidationError(f"Unknown status '{status}'")
            queryset = queryset.filter(status=status)
        if position:
            if position not in Position.values:
                raise ValidationError(f"Unknown position '{position}'")
            queryset = queryset.filter(position=position)
        search = sanitize_string(search or "", 100)
        if search:
            queryset = queryset.filter(
                Q(username__icontains=search)
                | Q(full_name__icontains=search)
                | Q(in_game_name__icontains=search)
                | Q(discord__icontains=search)
            )
        with translate_db_errors("prospect listing"):
            return list(queryset.order_by("username"))

    @staticmethod
    def get_prospect(actor, prospect_id) -> Prospect:
        prospect = _load_prospect(prospect_id)
        require(actor, Action.READ, Resource.for_prospect(prospect))
        return prospect

    @staticmethod
    def create_prospect(actor, data: Dict[str, Any]) -> Prospect:
        if "status" in data and data["status"] == ProspectStatus.PLAYER:
            raise ValidationError(
                "A prospect becomes a player only through promotion",
                errors={"status": "use promote instead"},
            )
        cleaned = _clean_prospect_fields(data)
        missing = [name for name in ("username", "team_category") if not cleaned.get(name)]
        if missing:
            raise ValidationError(
                "Missing required fields", errors={name: "required" for name in missing}
            )
        require(actor, Action.WRITE, Resource.for_category(cleaned["team_category"], kind="prospect"))

        status = data.get("status") or ProspectStatus.NOT_CONTACTED
        if status not in ProspectStatus.values:
            raise ValidationError(f"Unknown status '{status}'")

        with translate_db_errors("prospect creation"):
            prospect = Prospect.objects.create(
                status=status,
                managed_by_id=actor.identity,
                **cleaned,
            )
        logger.info(
            f"Prospect {prospect.pk} ({prospect.display_name}) created by user {actor.identity}"
        )
        return prospect

    @staticmethod
    def update_prospect(actor, prospect_id, data: Dict[str, Any]) -> Prospect:
        """Edit profile fields. Status changes go through the lifecycle service."""
        if data.get("status") is not None:
            raise ValidationError(
                "Use the status endpoint to change a prospect's status",
                errors={"status": "not editable here"},
            )
        prospect = _load_prospect(prospect_id)
        require(actor, Action.WRITE, Resource.for_prospect(prospect))

        cleaned = _clean_prospect_fields(data)
        if cleaned.get("team_category") and cleaned["team_category"] != prospect.team_category:
            require(
                actor,
                Action.WRITE,
                Resource.for_category(cleaned["team_category"], kind="prospect"),
            )
        if not cleaned:
            return prospect

        for name, value in cleaned.items():
            setattr(prospect, name, value)
        with translate_db_errors("prospect update"):
            prospect.save(update_fields=[*cleaned, "updated_at"])
        logger.info(f"Prospect {prospect.pk} updated by user {actor.identity}")
        return prospect

    @staticmethod
    def delete_prospect(actor, prospect_id) -> None:
        prospect = _load_prospect(prospect_id)
        require(actor, Action.WRITE, Resource.for_prospect(prospect))
        with translate_db_errors("prospect deletion"):
            prospect.delete()
        logger.info(f"Prospect {prospect_id} deleted by user {actor.identity}")

    @staticmethod
    def status_summary(actor, team_category=None) -> Dict[str, int]:
        """Count prospects per status. Every status is present, zero included."""
        category = _scope_category(actor, team_category, kind="prospect")
        queryset = Prospect.objects.all()
        if category:
            queryset = queryset.filter(team_category=category)
        with translate_db_errors("status summary"):
            rows = queryset.values("status").annotate(count=Count("id")).order_by()
            counts = {row["status"]: row["count"] for row in rows}

        summary = {status: counts.get(status, 0) for status in ProspectStatus.values}
        summary["total"] = sum(summary.values())
        return summary
