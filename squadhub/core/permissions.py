"""
Authorization gate shared by every service.

``authorize`` is a pure function of (actor, action, resource): it performs no
queries and keeps no state. Services build the ``Actor`` from the
authenticated user and a ``Resource`` from the object they are about to touch,
then call ``require`` before reading or writing it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from squadhub.core.exceptions import Denied
from squadhub.users.models import UserRole


class Action(str, Enum):
    READ = "read"
    WRITE = "write"


@dataclass(frozen=True)
class Actor:
    identity: Any
    role: str
    team_id: Any = None
    team_category: Optional[str] = None
    display_name: str = ""

    @classmethod
    def from_user(cls, user) -> "Actor":
        role = UserRole.ADMIN if user.is_superuser else user.role
        team = getattr(user, "team", None)
        return cls(
            identity=user.pk,
            role=role,
            team_id=team.pk if team else None,
            team_category=team.category if team else None,
            display_name=user.name or user.username,
        )


@dataclass(frozen=True)
class Resource:
    """What the gate needs to know about the object being accessed.

    ``team_id`` is set for team-scoped objects, ``team_category`` for objects
    scoped by a team category (prospects, scheduling rounds) and ``owner_id``
    for objects that belong to a single user.
    """

    kind: str
    team_id: Any = None
    team_category: Optional[str] = None
    owner_id: Any = None

    @classmethod
    def for_team(cls, team) -> "Resource":
        return cls(kind="team", team_id=team.pk, team_category=team.category)

    @classmethod
    def for_category(cls, team_category, kind="tryouts") -> "Resource":
        return cls(kind=kind, team_category=team_category)

    @classmethod
    def for_prospect(cls, prospect) -> "Resource":
        return cls(kind="prospect", team_category=prospect.team_category)

    @classmethod
    def for_round(cls, scheduling_round) -> "Resource":
        return cls(kind="round", team_category=scheduling_round.team_category)

    @classmethod
    def for_weekly_availability(cls, record) -> "Resource":
        return cls(
            kind="weekly_availability",
            team_id=record.team_id,
            owner_id=record.player_id,
        )


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str = ""

    @classmethod
    def deny(cls, reason="access denied") -> "Decision":
        return cls(allowed=False, reason=reason)

    def __bool__(self):
        return self.allowed


ALLOW = Decision(allowed=True)
DENY = Decision.deny()


def _admin_policy(actor: Actor, action: Action, resource: Resource) -> Decision:
    return ALLOW


def _manager_policy(actor: Actor, action: Action, resource: Resource) -> Decision:
    if resource.team_id is not None and resource.team_id == actor.team_id:
        return ALLOW
    if resource.team_category and resource.team_category == actor.team_category:
        return ALLOW
    return Decision.deny("resource belongs to another team")


def _player_policy(actor: Actor, action: Action, resource: Resource) -> Decision:
    is_owner = resource.owner_id is not None and resource.owner_id == actor.identity
    if action == Action.WRITE:
        return ALLOW if is_owner else Decision.deny("players may only modify their own records")
    if is_owner:
        return ALLOW
    if resource.team_id is not None and resource.team_id == actor.team_id:
        return ALLOW
    return DENY


_POLICIES: dict[str, Callable[[Actor, Action, Resource], Decision]] = {
    UserRole.ADMIN.value: _admin_policy,
    UserRole.MANAGER.value: _manager_policy,
    UserRole.PLAYER.value: _player_policy,
}

# Adding a role without a policy must fail at import time.
assert set(_POLICIES) == set(UserRole.values), "every UserRole needs an authorization policy"


def authorize(actor: Actor, action: Action, resource: Resource) -> Decision:
    policy = _POLICIES.get(str(actor.role))
    if policy is None:
        return DENY
    return policy(actor, Action(action), resource)


def require(actor: Actor, action: Action, resource: Resource) -> None:
    """Raise ``Denied`` unless ``authorize`` allows the action."""
    decision = authorize(actor, action, resource)
    if not decision:
        raise Denied(decision.reason)
