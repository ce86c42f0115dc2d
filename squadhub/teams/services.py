"""
Roster players' own weekly availability.

Uses the same matrix layout as tryout availability, but records belong to
logged-in users and every access goes through the authorization gate.
"""

import logging
from types import SimpleNamespace

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from squadhub.core.exceptions import NotFound
from squadhub.core.exceptions import ValidationError
from squadhub.core.exceptions import translate_db_errors
from squadhub.core.permissions import Action
from squadhub.core.permissions import Resource
from squadhub.core.permissions import require
from squadhub.core.validation import parse_date
from squadhub.core.validation import parse_uuid
from squadhub.core.validation import sanitize_string
from squadhub.tryouts import matrix as availability_matrix
from squadhub.tryouts.models import ROUND_LENGTH
from squadhub.users.models import UserRole

from .models import Team
from .models import WeeklyAvailability

User = get_user_model()
logger = logging.getLogger(__name__)


def _load_team(team_id) -> Team:
    team_id = parse_uuid(team_id, "team_id")
    team = Team.objects.filter(pk=team_id).first()
    if team is None:
        raise NotFound("Team not found")
    return team


def _load_player(player_id):
    try:
        player = User.objects.filter(pk=int(player_id)).first()
    except (TypeError, ValueError):
        raise ValidationError("Invalid player_id", errors={"player_id": "must be an integer"})
    if player is None:
        raise NotFound("Player not found")
    return player


def _team_resource(team) -> Resource:
    return Resource(kind="weekly_availability", team_id=team.pk, team_category=team.category)


def _player_resource(player) -> Resource:
    return Resource(kind="weekly_availability", team_id=player.team_id, owner_id=player.pk)


class WeeklyAvailabilityService:
    """Read and write the weekly availability of roster players"""

    @staticmethod
    def list_for(actor, player_id=None, team_id=None, week_start=None):
        """Records visible to ``actor``, filtered by player, team and week.

        Without filters admins see every record; everyone else sees their
        own team.
        """
        queryset = WeeklyAvailability.objects.select_related("player", "team")

        with translate_db_errors("weekly availability listing"):
            if team_id:
                team = _load_team(team_id)
                require(actor, Action.READ, _team_resource(team))
                queryset = queryset.filter(team=team)
            if player_id:
                player = _load_player(player_id)
                if not team_id:
                    require(actor, Action.READ, _player_resource(player))
                queryset = queryset.filter(player=player)
            if not team_id and not player_id and actor.role != UserRole.ADMIN:
                require(
                    actor,
                    Action.READ,
                    Resource(kind="weekly_availability", team_id=actor.team_id, owner_id=actor.identity),
                )
                queryset = queryset.filter(team_id=actor.team_id)

            week = parse_date(week_start, "week_start")
            if week is not None:
                queryset = queryset.filter(week_start=week)

            return list(queryset.order_by("-week_start", "player__username"))

    @staticmethod
    def save(actor, team_id, week_start, matrix, player_id=None, notes="") -> WeeklyAvailability:
        """Create or replace one player's grid for the week starting ``week_start``.

        ``player_id`` defaults to the actor. The ``(player, team, week_start)``
        unique constraint makes concurrent saves converge on a single row.
        """
        start = parse_date(week_start, "week_start")
        if start is None:
            raise ValidationError("Week start is required", errors={"week_start": "required"})

        canonical = availability_matrix.normalize(matrix)
        if not availability_matrix.validate(canonical):
            raise ValidationError(
                "Select at least one time slot when you are available",
                errors={"matrix": "no slot selected"},
            )

        with translate_db_errors("weekly availability lookup"):
            team = _load_team(team_id)
            player = _load_player(player_id if player_id is not None else actor.identity)

        require(
            actor,
            Action.WRITE,
            Resource(
                kind="weekly_availability",
                team_id=team.pk,
                team_category=team.category,
                owner_id=player.pk,
            ),
        )

        with translate_db_errors("weekly availability save"), transaction.atomic():
            record, created = WeeklyAvailability.objects.update_or_create(
                player=player,
                team=team,
                week_start=start,
                defaults={
                    "week_end": start + ROUND_LENGTH,
                    "time_slots": canonical,
                    "notes": sanitize_string(notes, 2000),
                    "submitted_at": timezone.now(),
                },
            )

        logger.info(
            f"Weekly availability {'created' if created else 'updated'} for player "
            f"{player.pk} in team {team.name}, week of {start}"
        )
        return record

    @staticmethod
    def delete(actor, record_id) -> None:
        record_id = parse_uuid(record_id, "id")
        with translate_db_errors("weekly availability deletion"):
            record = WeeklyAvailability.objects.filter(pk=record_id).first()
            if record is None:
                raise NotFound("Availability record not found")
            require(actor, Action.WRITE, Resource.for_weekly_availability(record))
            record.delete()
        logger.info(f"Weekly availability {record_id} deleted by user {actor.identity}")

    @staticmethod
    def team_summary(actor, team_id, week_start) -> dict:
        """Heatmap of a team's availability for one week."""
        records = WeeklyAvailabilityService.list_for(actor, team_id=team_id, week_start=week_start)
        return availability_matrix.aggregate(
            _PlayerEntry(record) for record in records
        ).as_dict()


class _PlayerEntry:
    """Adapts a WeeklyAvailability record to what ``matrix.aggregate`` reads."""

    def __init__(self, record):
        self.time_slots = record.time_slots
        self.submitted_at = record.submitted_at
        self.prospect = SimpleNamespace(display_name=record.player.name or record.player.username)
