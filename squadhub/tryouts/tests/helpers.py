from datetime import date

from squadhub.core.permissions import Actor
from squadhub.teams.models import Team
from squadhub.teams.models import TeamCategory
from squadhub.tryouts.models import Prospect
from squadhub.tryouts.models import ProspectStatus
from squadhub.users.models import User
from squadhub.users.models import UserRole

WEEK_START = date(2024, 1, 1)
WEEK_END = date(2024, 1, 7)


def make_team(category=TeamCategory.MAIN, name=None):
    return Team.objects.create(name=name or f"Team {category}", tag=category, category=category)


def make_user(username, role=UserRole.PLAYER, team=None, **kwargs):
    return User.objects.create_user(
        username=username,
        email=f"{username}@example.com",
        password="testpass123",
        role=role,
        team=team,
        **kwargs,
    )


def make_prospect(username, team_category=TeamCategory.MAIN, status=ProspectStatus.NOT_CONTACTED, **kwargs):
    return Prospect.objects.create(
        username=username,
        in_game_name=kwargs.pop("in_game_name", username.title()),
        team_category=team_category,
        status=status,
        **kwargs,
    )


def actor_for(user):
    return Actor.from_user(user)
