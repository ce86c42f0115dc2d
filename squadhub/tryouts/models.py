import uuid
from datetime import timedelta

from django.conf import settings
from django.db import models
from django.utils import timezone

from squadhub.teams.models import TeamCategory

# A scheduling round always covers one calendar week.
ROUND_LENGTH = timedelta(days=6)


class RoundStatus(models.TextChoices):
    SCHEDULED = "scheduled", "Scheduled"
    IN_PROGRESS = "in_progress", "In Progress"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"


class ProspectStatus(models.TextChoices):
    NOT_CONTACTED = "not_contacted", "Not Contacted"
    CONTACTED = "contacted", "Contacted"
    IN_TRYOUTS = "in_tryouts", "In Tryouts"
    ACCEPTED = "accepted", "Accepted"
    SUBSTITUTE = "substitute", "Substitute"
    REJECTED = "rejected", "Rejected"
    LEFT = "left", "Left"
    PLAYER = "player", "Player"


# Prospects in these states are never offered for a new round.
EXCLUDED_FROM_ROUNDS = (ProspectStatus.REJECTED, ProspectStatus.LEFT)


class Position(models.TextChoices):
    DUELIST = "Duelist", "Duelist"
    INITIATOR = "Initiator", "Initiator"
    CONTROLLER = "Controller", "Controller"
    SENTINEL = "Sentinel", "Sentinel"
    FLEX = "Flex", "Flex"


class SchedulingRound(models.Model):
    """
    One week during which selected prospects are asked for their availability.
    Each selected prospect gets an AvailabilityEntry with its own access token.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    team_category = models.CharField(max_length=10, choices=TeamCategory)
    label = models.CharField(max_length=255, blank=True)
    start_date = models.DateField()
    end_date = models.DateField()
    notes = models.TextField(blank=True)
    status = models.CharField(
        max_length=20,
        choices=RoundStatus,
        default=RoundStatus.SCHEDULED,
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_rounds",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-start_date"]
        indexes = [
            models.Index(fields=["team_category", "status"], name="round_category_status_idx"),
            models.Index(fields=["start_date"], name="round_start_date_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gte=models.F("start_date")),
                name="scheduling_round_valid_date_range",
            ),
        ]

    def __str__(self):
        label = self.label or f"Week of {self.start_date}"
        return f"{label} ({self.team_category})"

    @property
    def has_valid_window(self):
        return (
            self.start_date is not None
            and self.end_date is not None
            and self.end_date - self.start_date == ROUND_LENGTH
        )


class Prospect(models.Model):
    """A scouted player tracked through the recruitment pipeline."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    username = models.CharField(max_length=100)
    full_name = models.CharField(max_length=255, blank=True)
    in_game_name = models.CharField(max_length=100, blank=True)
    team_category = models.CharField(max_length=10, choices=TeamCategory)
    position = models.CharField(max_length=50, choices=Position, blank=True)
    is_igl = models.BooleanField(default=False)
    nationality = models.CharField(max_length=2, blank=True, help_text="ISO country code")
    agent_pool = models.JSONField(default=list, blank=True)
    rank = models.CharField(max_length=50, blank=True)

    tracker_url = models.URLField(blank=True)
    twitter_url = models.URLField(blank=True)
    discord = models.CharField(max_length=100, blank=True)
    links = models.TextField(blank=True)
    notes = models.TextField(blank=True)

    status = models.CharField(
        max_length=20,
        choices=ProspectStatus,
        default=ProspectStatus.NOT_CONTACTED,
    )

    contacted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="contacted_prospects",
    )
    last_contacted_at = models.DateTimeField(null=True, blank=True)
    managed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="managed_prospects",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["username"]
        indexes = [
            models.Index(fields=["team_category", "status"], name="prospect_category_status_idx"),
            models.Index(fields=["position"], name="prospect_position_idx"),
        ]

    def __str__(self):
        return f"{self.in_game_name or self.username} ({self.get_status_display()})"

    @property
    def display_name(self):
        return self.in_game_name or self.username


class AvailabilityEntry(models.Model):
    """
    Links one prospect to one scheduling round.

    ``token`` is the only credential needed to read or update this row.
    ``time_slots`` stays empty and ``submitted_at`` null until the prospect
    answers.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    round = models.ForeignKey(
        SchedulingRound,
        on_delete=models.CASCADE,
        related_name="entries",
    )
    prospect = models.ForeignKey(
        Prospect,
        on_delete=models.CASCADE,
        related_name="availability_entries",
    )
    token = models.CharField(max_length=64, unique=True)
    time_slots = models.JSONField(default=dict, blank=True)
    submitted_at = models.DateTimeField(null=True, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "availability entries"
        constraints = [
            models.UniqueConstraint(
                fields=["round", "prospect"],
                name="availability_entry_unique_round_prospect",
            ),
        ]
        indexes = [
            models.Index(fields=["round", "submitted_at"], name="entry_round_submitted_idx"),
        ]

    def __str__(self):
        return f"{self.prospect.display_name} - {self.round}"

    def is_expired(self):
        return self.expires_at is not None and timezone.now() > self.expires_at
