from datetime import timedelta

from django.db import IntegrityError
from django.db import transaction
from django.test import TestCase

from squadhub.teams.models import TeamCategory
from squadhub.tryouts.models import SchedulingRound

from .helpers import WEEK_START


class SchedulingRoundModelTest(TestCase):
    def test_end_before_start_rejected_by_database(self):
        with self.assertRaises(IntegrityError), transaction.atomic():
            SchedulingRound.objects.create(
                team_category=TeamCategory.MAIN,
                start_date=WEEK_START,
                end_date=WEEK_START - timedelta(days=1),
            )

    def test_date_range_constraint(self):
        constraint = next(
            c for c in SchedulingRound._meta.constraints if c.name == "scheduling_round_valid_date_range"
        )
        _, _, kwargs = constraint.deconstruct()
        self.assertIn("condition", kwargs)
        self.assertNotIn("check", kwargs)
