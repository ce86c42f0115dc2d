"""
Prospect status state machine.

Any status may move to any other status through ``set_status`` with two
exceptions: ``player`` is only reachable through ``promote``, and once a
prospect is a ``player`` its status never changes again.
"""

import logging

from django.db import transaction
from django.utils import timezone

from squadhub.core.exceptions import NotFound
from squadhub.core.exceptions import PreconditionFailed
from squadhub.core.exceptions import ValidationError
from squadhub.core.exceptions import translate_db_errors
from squadhub.core.permissions import Action
from squadhub.core.permissions import Resource
from squadhub.core.permissions import require
from squadhub.core.validation import parse_uuid
from squadhub.teams.models import RosterMember
from squadhub.teams.models import Team

from .models import EXCLUDED_FROM_ROUNDS
from .models import Prospect
from .models import ProspectStatus

logger = logging.getLogger(__name__)

# Fields copied verbatim from a prospect onto the roster member it becomes.
PROMOTED_FIELDS = (
    "username",
    "full_name",
    "in_game_name",
    "position",
    "is_igl",
    "nationality",
    "agent_pool",
    "rank",
    "tracker_url",
    "twitter_url",
)


def _load_prospect(prospect, for_update=False):
    if isinstance(prospect, Prospect):
        prospect = prospect.pk
    prospect_id = parse_uuid(prospect, "prospect_id")
    queryset = Prospect.objects.all()
    if for_update:
        queryset = queryset.select_for_update()
    instance = queryset.filter(pk=prospect_id).first()
    if instance is None:
        raise NotFound("Prospect not found")
    return instance


class ProspectLifecycleService:
    """Status transitions and promotion to the roster"""

    @staticmethod
    def set_status(prospect, new_status, actor) -> Prospect:
        """Move ``prospect`` to ``new_status`` on behalf of ``actor``.

        Leaving ``not_contacted`` records who made contact and when, unless
        that was already recorded.
        """
        try:
            new_status = ProspectStatus(new_status)
        except ValueError:
            raise ValidationError(
                f"Unknown status '{new_status}'",
                errors={"status": f"must be one of {', '.join(ProspectStatus.values)}"},
            )
        if new_status == ProspectStatus.PLAYER:
            raise ValidationError(
                "A prospect becomes a player only through promotion",
                errors={"status": "use promote instead"},
            )

        with translate_db_errors("status change"), transaction.atomic():
            instance = _load_prospect(prospect, for_update=True)
            require(actor, Action.WRITE, Resource.for_prospect(instance))

            old_status = instance.status
            if old_status == ProspectStatus.PLAYER:
                raise PreconditionFailed("Prospect has already been promoted to player")
            if old_status == new_status:
                return instance

            update_fields = ["status", "updated_at"]
            instance.status = new_status
            if old_status == ProspectStatus.NOT_CONTACTED:
                if instance.contacted_by_id is None:
                    instance.contacted_by_id = actor.identity
                    update_fields.append("contacted_by")
                if instance.last_contacted_at is None:
                    instance.last_contacted_at = timezone.now()
                    update_fields.append("last_contacted_at")
            instance.save(update_fields=update_fields)

        logger.info(
            f"Prospect {instance.pk} status changed {old_status} -> {new_status} "
            f"by user {actor.identity}"
        )
        return instance

    @staticmethod
    def promote(prospect_id, team_id, actor) -> RosterMember:
        """Turn an accepted prospect into a roster member of ``team_id``.

        The status update is a compare-and-set on ``accepted``, so of two
        concurrent calls only one creates a roster member; the other gets
        ``PreconditionFailed``.
        """
        if not team_id:
            raise ValidationError("A team is required", errors={"team_id": "required"})
        team_id = parse_uuid(team_id, "team_id")

        with translate_db_errors("promotion"):
            team = Team.objects.filter(pk=team_id).first()
            if team is None:
                raise NotFound("Team not found")
            prospect = _load_prospect(prospect_id)

        require(actor, Action.WRITE, Resource.for_prospect(prospect))
        require(actor, Action.WRITE, Resource.for_team(team))

        with translate_db_errors("promotion"), transaction.atomic():
            promoted = Prospect.objects.filter(
                pk=prospect.pk, status=ProspectStatus.ACCEPTED
            ).update(status=ProspectStatus.PLAYER, updated_at=timezone.now())
            if not promoted:
                raise PreconditionFailed(
                    "Only accepted prospects can be promoted",
                    errors={"status": prospect.status},
                )

            member = RosterMember.objects.create(
                team=team,
                prospect=prospect,
                **{name: getattr(prospect, name) for name in PROMOTED_FIELDS},
            )

        prospect.status = ProspectStatus.PLAYER
        logger.info(
            f"Prospect {prospect.pk} promoted to roster member {member.pk} "
            f"of team {team.name} by user {actor.identity}"
        )
        return member

    @staticmethod
    def eligible_for_round(team_category=None):
        """Prospects that may be invited to a new round, optionally of one category."""
        queryset = Prospect.objects.exclude(status__in=EXCLUDED_FROM_ROUNDS)
        if team_category:
            queryset = queryset.filter(team_category=team_category)
        return queryset
