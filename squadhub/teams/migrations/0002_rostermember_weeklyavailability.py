import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("teams", "0001_initial"),
        ("tryouts", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="RosterMember",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("username", models.CharField(max_length=100)),
                ("full_name", models.CharField(blank=True, max_length=255)),
                ("in_game_name", models.CharField(blank=True, max_length=100)),
                ("position", models.CharField(blank=True, max_length=50)),
                ("is_igl", models.BooleanField(default=False)),
                ("is_substitute", models.BooleanField(default=False)),
                ("nationality", models.CharField(blank=True, max_length=2)),
                ("agent_pool", models.JSONField(blank=True, default=list)),
                ("rank", models.CharField(blank=True, max_length=50)),
                ("tracker_url", models.URLField(blank=True)),
                ("twitter_url", models.URLField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "prospect",
                    models.OneToOneField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="roster_member",
                        to="tryouts.prospect",
                    ),
                ),
                (
                    "team",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="roster",
                        to="teams.team",
                    ),
                ),
                (
                    "user",
                    models.OneToOneField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="roster_member",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "indexes": [
                    models.Index(fields=["team"], name="roster_member_team_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="WeeklyAvailability",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("week_start", models.DateField()),
                ("week_end", models.DateField()),
                ("time_slots", models.JSONField(blank=True, default=dict)),
                ("notes", models.TextField(blank=True)),
                ("submitted_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "player",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="weekly_availability",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "team",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="weekly_availability",
                        to="teams.team",
                    ),
                ),
            ],
            options={
                "ordering": ["-week_start"],
                "indexes": [
                    models.Index(fields=["team", "week_start"], name="weekly_avail_team_week_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("player", "team", "week_start"),
                        name="weekly_availability_unique_player_week",
                    ),
                ],
            },
        ),
    ]
