"""
Tests for availability token issuance, resolution and submission
"""

import re
import uuid
from datetime import timedelta
from unittest.mock import patch

from django.db import OperationalError
from django.test import TestCase
from django.test import override_settings
from django.utils import timezone

from squadhub.core.exceptions import Conflict
from squadhub.core.exceptions import NotFound
from squadhub.core.exceptions import Unavailable
from squadhub.core.exceptions import ValidationError
from squadhub.teams.models import TeamCategory
from squadhub.tryouts.matrix import count_selected
from squadhub.tryouts.models import AvailabilityEntry
from squadhub.tryouts.models import ProspectStatus
from squadhub.tryouts.models import SchedulingRound
from squadhub.tryouts.tokens import INVALID_LINK_MESSAGE
from squadhub.tryouts.tokens import TokenService
from squadhub.tryouts.tokens import availability_link

from .helpers import WEEK_END
from .helpers import WEEK_START
from .helpers import make_prospect


class TokenServiceTestBase(TestCase):
    def setUp(self):
        self.round = SchedulingRound.objects.create(
            team_category=TeamCategory.MAIN,
            label="Week 1",
            start_date=WEEK_START,
            end_date=WEEK_END,
        )
        self.alpha = make_prospect("alpha", position="Duelist")
        self.bravo = make_prospect("bravo")


class GenerateTokenTest(TestCase):
    def test_format(self):
        token = TokenService.generate_token()
        self.assertRegex(token, r"^[0-9a-f]{32}$")

    def test_unique(self):
        tokens = {TokenService.generate_token() for _ in range(200)}
        self.assertEqual(len(tokens), 200)


class IssueTest(TokenServiceTestBase):
    def test_one_entry_per_prospect(self):
        tokens = TokenService.issue(self.round.pk, {self.alpha.pk, self.bravo.pk})

        self.assertEqual(set(tokens), {self.alpha.pk, self.bravo.pk})
        self.assertEqual(len(set(tokens.values())), 2)
        self.assertEqual(self.round.entries.count(), 2)
        for prospect_id, token in tokens.items():
            entry = TokenService.resolve(token)
            self.assertEqual(entry.prospect_id, prospect_id)
            self.assertEqual(entry.round_id, self.round.pk)
            self.assertEqual(entry.time_slots, {})
            self.assertIsNone(entry.submitted_at)
            self.assertIsNone(entry.expires_at)

    def test_accepts_string_ids(self):
        tokens = TokenService.issue(str(self.round.pk), [str(self.alpha.pk)])
        self.assertEqual(list(tokens), [self.alpha.pk])

    def test_empty_prospect_ids(self):
        with self.assertRaises(ValidationError):
            TokenService.issue(self.round.pk, set())
        self.assertFalse(AvailabilityEntry.objects.exists())

    def test_malformed_prospect_id(self):
        with self.assertRaises(ValidationError):
            TokenService.issue(self.round.pk, ["not-a-uuid"])

    def test_unknown_round(self):
        with self.assertRaises(NotFound):
            TokenService.issue(uuid.uuid4(), {self.alpha.pk})

    def test_round_window_must_be_one_week(self):
        self.round.end_date = WEEK_START + timedelta(days=3)
        self.round.save()
        with self.assertRaises(ValidationError) as context:
            TokenService.issue(self.round.pk, {self.alpha.pk})
        self.assertIn("end_date", context.exception.errors)

    def test_rejects_excluded_and_foreign_prospects(self):
        rejected = make_prospect("charlie", status=ProspectStatus.REJECTED)
        left = make_prospect("delta", status=ProspectStatus.LEFT)
        academy = make_prospect("echo", team_category=TeamCategory.ACADEMY)

        with self.assertRaises(ValidationError) as context:
            TokenService.issue(
                self.round.pk,
                {self.alpha.pk, rejected.pk, left.pk, academy.pk, uuid.uuid4()},
            )

        self.assertEqual(len(context.exception.errors), 4)
        self.assertNotIn(str(self.alpha.pk), context.exception.errors)
        self.assertFalse(AvailabilityEntry.objects.exists())

    def test_duplicate_issue_conflicts(self):
        TokenService.issue(self.round.pk, {self.alpha.pk})

        with self.assertRaises(Conflict):
            TokenService.issue(self.round.pk, {self.alpha.pk, self.bravo.pk})

        # Nothing from the failed batch was stored
        self.assertEqual(self.round.entries.count(), 1)
        self.assertFalse(self.round.entries.filter(prospect=self.bravo).exists())

    @override_settings(TRYOUTS_TOKEN_TTL_DAYS=14)
    def test_expiry_from_settings(self):
        tokens = TokenService.issue(self.round.pk, {self.alpha.pk})
        entry = AvailabilityEntry.objects.get(token=tokens[self.alpha.pk])
        self.assertIsNotNone(entry.expires_at)
        self.assertGreater(entry.expires_at, timezone.now() + timedelta(days=13))


class ResolveTest(TokenServiceTestBase):
    def setUp(self):
        super().setUp()
        self.token = TokenService.issue(self.round.pk, {self.alpha.pk})[self.alpha.pk]

    def test_resolves_round_and_prospect(self):
        entry = TokenService.resolve(self.token)
        self.assertEqual(entry.prospect.display_name, "Alpha")
        self.assertEqual(entry.prospect.position, "Duelist")
        self.assertEqual(entry.round.label, "Week 1")

    def test_unknown_malformed_and_expired_look_the_same(self):
        AvailabilityEntry.objects.filter(token=self.token).update(
            expires_at=timezone.now() - timedelta(minutes=1)
        )
        candidates = [
            self.token,
            TokenService.generate_token(),
            "short",
            self.token.upper(),
            "",
            None,
        ]
        for candidate in candidates:
            with self.subTest(token=candidate):
                with self.assertRaises(NotFound) as context:
                    TokenService.resolve(candidate)
                self.assertEqual(str(context.exception), INVALID_LINK_MESSAGE)

    @patch("squadhub.tryouts.tokens.AvailabilityEntry.objects.select_related")
    def test_datastore_failure_is_unavailable(self, mock_select_related):
        mock_select_related.side_effect = OperationalError("database is locked")
        with self.assertRaises(Unavailable):
            TokenService.resolve(self.token)


class SubmitTest(TokenServiceTestBase):
    def setUp(self):
        super().setUp()
        self.token = TokenService.issue(self.round.pk, {self.alpha.pk})[self.alpha.pk]

    def test_submit_overwrites_and_stamps(self):
        entry = TokenService.submit(self.token, {"monday": {"18": True}})
        self.assertEqual(entry.time_slots, {"monday": {"18": True}})
        self.assertIsNotNone(entry.submitted_at)

        TokenService.submit(self.token, {"tuesday": {20: True}})
        stored = AvailabilityEntry.objects.get(token=self.token)
        self.assertEqual(stored.time_slots, {"tuesday": {"20": True}})

    def test_resubmitting_same_matrix_only_moves_timestamp(self):
        first = TokenService.submit(self.token, {"monday": {"18": True}})
        first_submitted_at = first.submitted_at
        second = TokenService.submit(self.token, {"monday": {"18": True}})

        self.assertEqual(first.time_slots, second.time_slots)
        self.assertGreaterEqual(second.submitted_at, first_submitted_at)

    def test_empty_or_all_false_rejected_and_row_untouched(self):
        TokenService.submit(self.token, {"monday": {"18": True}})
        before = AvailabilityEntry.objects.get(token=self.token)

        for matrix in ({}, {"monday": {"18": False, "19": False}}):
            with self.subTest(matrix=matrix):
                with self.assertRaises(ValidationError):
                    TokenService.submit(self.token, matrix)

        after = AvailabilityEntry.objects.get(token=self.token)
        self.assertEqual(after.time_slots, {"monday": {"18": True}})
        self.assertEqual(after.submitted_at, before.submitted_at)

    def test_invalid_structure_rejected(self):
        with self.assertRaises(ValidationError):
            TokenService.submit(self.token, {"someday": {"18": True}})

    def test_unknown_token(self):
        with self.assertRaises(NotFound):
            TokenService.submit(TokenService.generate_token(), {"monday": {"18": True}})

    def test_submit_in_prospect_timezone_is_stored_in_org_time(self):
        entry = TokenService.submit(
            self.token, {"monday": {"18": True}}, timezone_name="Europe/London"
        )
        self.assertEqual(entry.time_slots, {"monday": {"19": True}})
        self.assertEqual(
            TokenService.matrix_for_display(entry, "Europe/London"),
            {"monday": {"18": True}},
        )


class RoundScenarioTest(TestCase):
    """Create a round for two prospects, answer with one, then try to clear it"""

    def test_scenario(self):
        scheduling_round = SchedulingRound.objects.create(
            team_category=TeamCategory.MAIN, start_date=WEEK_START, end_date=WEEK_END
        )
        prospect_a = make_prospect("prospect-a")
        prospect_b = make_prospect("prospect-b")

        tokens = TokenService.issue(scheduling_round.pk, {prospect_a.pk, prospect_b.pk})
        token_a, token_b = tokens[prospect_a.pk], tokens[prospect_b.pk]
        self.assertNotEqual(token_a, token_b)

        entry = TokenService.resolve(token_a)
        self.assertEqual(entry.prospect, prospect_a)
        self.assertEqual(entry.round, scheduling_round)

        entry = TokenService.submit(token_a, {"monday": {18: True}})
        self.assertEqual(count_selected(entry.time_slots), 1)

        with self.assertRaises(ValidationError):
            TokenService.submit(token_a, {})
        self.assertEqual(
            AvailabilityEntry.objects.get(token=token_a).time_slots,
            {"monday": {"18": True}},
        )


class AvailabilityLinkTest(TestCase):
    @override_settings(SITE_URL="https://squadhub.example/")
    def test_link(self):
        link = availability_link("ab" * 16)
        self.assertEqual(link, "https://squadhub.example/availability/" + "ab" * 16)
        self.assertTrue(re.search(r"/availability/[0-9a-f]{32}$", link))
