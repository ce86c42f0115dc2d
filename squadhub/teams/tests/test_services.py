"""
Tests for roster players' weekly availability
"""

import uuid
from datetime import date

from django.test import TestCase

from squadhub.core.exceptions import Denied
from squadhub.core.exceptions import NotFound
from squadhub.core.exceptions import ValidationError
from squadhub.teams.models import TeamCategory
from squadhub.teams.models import WeeklyAvailability
from squadhub.teams.services import WeeklyAvailabilityService
from squadhub.tryouts.tests.helpers import actor_for
from squadhub.tryouts.tests.helpers import make_team
from squadhub.tryouts.tests.helpers import make_user
from squadhub.users.models import UserRole

MONDAY = date(2024, 1, 8)


class WeeklyAvailabilityServiceTest(TestCase):
    def setUp(self):
        self.team = make_team(TeamCategory.MAIN)
        self.other_team = make_team(TeamCategory.GAME_CHANGERS)
        self.player_user = make_user("player", team=self.team, name="Player One")
        self.teammate_user = make_user("teammate", team=self.team)
        self.outsider_user = make_user("outsider", team=self.other_team)
        self.player = actor_for(self.player_user)
        self.teammate = actor_for(self.teammate_user)
        self.outsider = actor_for(self.outsider_user)
        self.manager = actor_for(make_user("manager", role=UserRole.MANAGER, team=self.team))
        self.admin = actor_for(make_user("admin", role=UserRole.ADMIN))

    def test_save_own_availability(self):
        record = WeeklyAvailabilityService.save(
            self.player, self.team.pk, MONDAY, {"monday": {"20": True}}, notes="Late on Fridays"
        )
        self.assertEqual(record.player, self.player_user)
        self.assertEqual(record.week_end, date(2024, 1, 14))
        self.assertEqual(record.time_slots, {"monday": {"20": True}})
        self.assertIsNotNone(record.submitted_at)

    def test_save_twice_updates_single_row(self):
        WeeklyAvailabilityService.save(self.player, self.team.pk, MONDAY, {"monday": {"20": True}})
        WeeklyAvailabilityService.save(self.player, self.team.pk, "2024-01-08", {"friday": {"21": True}})

        records = WeeklyAvailability.objects.filter(player=self.player_user)
        self.assertEqual(records.count(), 1)
        self.assertEqual(records.get().time_slots, {"friday": {"21": True}})

    def test_empty_matrix_rejected(self):
        with self.assertRaises(ValidationError):
            WeeklyAvailabilityService.save(self.player, self.team.pk, MONDAY, {"monday": {"20": False}})
        with self.assertRaises(ValidationError):
            WeeklyAvailabilityService.save(self.player, self.team.pk, None, {"monday": {"20": True}})

    def test_player_cannot_write_teammate_record(self):
        with self.assertRaises(Denied):
            WeeklyAvailabilityService.save(
                self.player,
                self.team.pk,
                MONDAY,
                {"monday": {"20": True}},
                player_id=self.teammate_user.pk,
            )
        self.assertFalse(WeeklyAvailability.objects.exists())

    def test_manager_can_write_for_own_team(self):
        record = WeeklyAvailabilityService.save(
            self.manager,
            self.team.pk,
            MONDAY,
            {"monday": {"20": True}},
            player_id=self.teammate_user.pk,
        )
        self.assertEqual(record.player, self.teammate_user)

    def test_list_team_visibility(self):
        WeeklyAvailabilityService.save(self.player, self.team.pk, MONDAY, {"monday": {"20": True}})
        WeeklyAvailabilityService.save(self.teammate, self.team.pk, MONDAY, {"monday": {"21": True}})

        self.assertEqual(len(WeeklyAvailabilityService.list_for(self.player, team_id=self.team.pk)), 2)
        self.assertEqual(len(WeeklyAvailabilityService.list_for(self.player)), 2)
        self.assertEqual(
            len(WeeklyAvailabilityService.list_for(self.manager, player_id=self.teammate_user.pk)), 1
        )
        self.assertEqual(
            len(WeeklyAvailabilityService.list_for(self.admin, week_start="2024-01-15")), 0
        )

        with self.assertRaises(Denied):
            WeeklyAvailabilityService.list_for(self.outsider, team_id=self.team.pk)
        with self.assertRaises(Denied):
            WeeklyAvailabilityService.list_for(self.outsider, player_id=self.player_user.pk)

    def test_list_unknown_team(self):
        with self.assertRaises(NotFound):
            WeeklyAvailabilityService.list_for(self.admin, team_id=uuid.uuid4())

    def test_delete(self):
        record = WeeklyAvailabilityService.save(self.player, self.team.pk, MONDAY, {"monday": {"20": True}})

        with self.assertRaises(Denied):
            WeeklyAvailabilityService.delete(self.teammate, record.pk)
        WeeklyAvailabilityService.delete(self.player, record.pk)
        self.assertFalse(WeeklyAvailability.objects.exists())

        with self.assertRaises(NotFound):
            WeeklyAvailabilityService.delete(self.player, record.pk)

    def test_team_summary(self):
        WeeklyAvailabilityService.save(self.player, self.team.pk, MONDAY, {"monday": {"20": True}})
        WeeklyAvailabilityService.save(self.teammate, self.team.pk, MONDAY, {"monday": {"20": True}})

        summary = WeeklyAvailabilityService.team_summary(self.manager, self.team.pk, MONDAY)

        self.assertEqual(summary["total"], 2)
        self.assertEqual(summary["heatmap"]["monday"]["20"], 2)
        self.assertEqual(sorted(summary["players_by_slot"]["monday"]["20"]), ["Player One", "teammate"])
