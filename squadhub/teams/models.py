import uuid

from django.conf import settings
from django.db import models


class TeamCategory(models.TextChoices):
    MAIN = "21L", "21L"
    GAME_CHANGERS = "21GC", "21GC"
    ACADEMY = "21ACA", "21 ACA"


class Team(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    tag = models.CharField(max_length=10, blank=True)
    game = models.CharField(max_length=50, default="valorant")

    # Prospects and scheduling rounds are scoped by category, not by team id.
    category = models.CharField(
        max_length=10,
        choices=TeamCategory,
        unique=True,
        help_text="Tryout category this team recruits for",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class RosterMember(models.Model):
    """A full roster member. Created directly or by promoting an accepted prospect."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="roster")
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="roster_member",
    )

    # Unique, so a prospect can materialise at most one roster member.
    prospect = models.OneToOneField(
        "tryouts.Prospect",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="roster_member",
    )

    username = models.CharField(max_length=100)
    full_name = models.CharField(max_length=255, blank=True)
    in_game_name = models.CharField(max_length=100, blank=True)
    position = models.CharField(max_length=50, blank=True)
    is_igl = models.BooleanField(default=False)
    is_substitute = models.BooleanField(default=False)
    nationality = models.CharField(max_length=2, blank=True)
    agent_pool = models.JSONField(default=list, blank=True)
    rank = models.CharField(max_length=50, blank=True)
    tracker_url = models.URLField(blank=True)
    twitter_url = models.URLField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=["team"], name="roster_member_team_idx"),
        ]

    def __str__(self):
        return f"{self.in_game_name or self.username} ({self.team.name})"


class WeeklyAvailability(models.Model):
    """
    A roster player's own availability grid for one week.

    ``time_slots`` uses the same day -> hour -> bool layout as tryout
    availability entries (see squadhub.tryouts.matrix).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    player = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="weekly_availability",
    )
    team = models.ForeignKey(
        Team,
        on_delete=models.CASCADE,
        related_name="weekly_availability",
    )
    week_start = models.DateField()
    week_end = models.DateField()
    time_slots = models.JSONField(default=dict, blank=True)
    notes = models.TextField(blank=True)
    submitted_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-week_start"]
        constraints = [
            models.UniqueConstraint(
                fields=["player", "team", "week_start"],
                name="weekly_availability_unique_player_week",
            ),
        ]
        indexes = [
            models.Index(fields=["team", "week_start"], name="weekly_avail_team_week_idx"),
        ]

    def __str__(self):
        return f"{self.player} - week of {self.week_start}"
