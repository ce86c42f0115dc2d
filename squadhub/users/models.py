import zoneinfo

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.db.models import CharField
from django.utils.translation import gettext_lazy as _


def get_timezone_choices():
    """Get timezone choices using zoneinfo.available_timezones()"""
    common_timezones = [
        "UTC",
        "Europe/London",
        "Europe/Lisbon",
        "Europe/Paris",
        "Europe/Berlin",
        "Europe/Madrid",
        "Europe/Rome",
        "Europe/Warsaw",
        "Europe/Helsinki",
        "Europe/Athens",
        "Europe/Bucharest",
        "Europe/Kyiv",
        "Europe/Istanbul",
        "Europe/Moscow",
    ]

    choices = []
    for tz in common_timezones:
        try:
            zoneinfo.ZoneInfo(tz)
            display_name = tz.replace("_", " ").replace("/", " - ")
            choices.append((tz, display_name))
        except zoneinfo.ZoneInfoNotFoundError:
            continue

    return choices


class UserRole(models.TextChoices):
    ADMIN = "admin", _("Admin")
    MANAGER = "manager", _("Manager")
    PLAYER = "player", _("Player")


class User(AbstractUser):
    """
    Default custom user model for SquadHub.

    Accounts are created by the login service; this project reads ``role`` and
    ``team`` to authorize every tryout and availability operation.
    """

    # First and last name do not cover name patterns around the globe
    name = CharField(_("Name of User"), blank=True, max_length=255)
    first_name = None  # type: ignore[assignment]
    last_name = None  # type: ignore[assignment]

    role = models.CharField(
        _("Role"),
        max_length=20,
        choices=UserRole,
        default=UserRole.PLAYER,
    )
    team = models.ForeignKey(
        "teams.Team",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="users",
        help_text=_("Team a manager runs or a player belongs to"),
    )

    timezone = models.CharField(
        _("Timezone"),
        max_length=50,
        choices=get_timezone_choices(),
        default="UTC",
        help_text=_("Your preferred timezone for displaying dates and times"),
    )

    class Meta:
        indexes = [
            models.Index(fields=["role"], name="user_role_idx"),
            models.Index(fields=["team"], name="user_team_idx"),
        ]

    def __str__(self):
        return self.username
