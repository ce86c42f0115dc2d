import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="SchedulingRound",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "team_category",
                    models.CharField(choices=[("21L", "21L"), ("21GC", "21GC"), ("21ACA", "21 ACA")], max_length=10),
                ),
                ("label", models.CharField(blank=True, max_length=255)),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
                ("notes", models.TextField(blank=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("scheduled", "Scheduled"),
                            ("in_progress", "In Progress"),
                            ("completed", "Completed"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="scheduled",
                        max_length=20,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="created_rounds",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-start_date"],
                "indexes": [
                    models.Index(fields=["team_category", "status"], name="round_category_status_idx"),
                    models.Index(fields=["start_date"], name="round_start_date_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("end_date__gte", models.F("start_date"))),
                        name="scheduling_round_valid_date_range",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Prospect",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("username", models.CharField(max_length=100)),
                ("full_name", models.CharField(blank=True, max_length=255)),
                ("in_game_name", models.CharField(blank=True, max_length=100)),
                (
                    "team_category",
                    models.CharField(choices=[("21L", "21L"), ("21GC", "21GC"), ("21ACA", "21 ACA")], max_length=10),
                ),
                (
                    "position",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("Duelist", "Duelist"),
                            ("Initiator", "Initiator"),
                            ("Controller", "Controller"),
                            ("Sentinel", "Sentinel"),
                            ("Flex", "Flex"),
                        ],
                        max_length=50,
                    ),
                ),
                ("is_igl", models.BooleanField(default=False)),
                ("nationality", models.CharField(blank=True, help_text="ISO country code", max_length=2)),
                ("agent_pool", models.JSONField(blank=True, default=list)),
                ("rank", models.CharField(blank=True, max_length=50)),
                ("tracker_url", models.URLField(blank=True)),
                ("twitter_url", models.URLField(blank=True)),
                ("discord", models.CharField(blank=True, max_length=100)),
                ("links", models.TextField(blank=True)),
                ("notes", models.TextField(blank=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("not_contacted", "Not Contacted"),
                            ("contacted", "Contacted"),
                            ("in_tryouts", "In Tryouts"),
                            ("accepted", "Accepted"),
                            ("substitute", "Substitute"),
                            ("rejected", "Rejected"),
                            ("left", "Left"),
                            ("player", "Player"),
                        ],
                        default="not_contacted",
                        max_length=20,
                    ),
                ),
                ("last_contacted_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "contacted_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="contacted_prospects",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "managed_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="managed_prospects",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["username"],
                "indexes": [
                    models.Index(fields=["team_category", "status"], name="prospect_category_status_idx"),
                    models.Index(fields=["position"], name="prospect_position_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="AvailabilityEntry",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("token", models.CharField(max_length=64, unique=True)),
                ("time_slots", models.JSONField(blank=True, default=dict)),
                ("submitted_at", models.DateTimeField(blank=True, null=True)),
                ("expires_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "prospect",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="availability_entries",
                        to="tryouts.prospect",
                    ),
                ),
                (
                    "round",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="entries",
                        to="tryouts.schedulinground",
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "availability entries",
                "indexes": [
                    models.Index(fields=["round", "submitted_at"], name="entry_round_submitted_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("round", "prospect"),
                        name="availability_entry_unique_round_prospect",
                    ),
                ],
            },
        ),
    ]
