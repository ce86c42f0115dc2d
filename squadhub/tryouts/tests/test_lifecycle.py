"""
Tests for prospect status transitions and promotion
"""

import uuid
from unittest.mock import patch

from django.db import IntegrityError
from django.test import TestCase

from squadhub.core.exceptions import Conflict
from squadhub.core.exceptions import Denied
from squadhub.core.exceptions import NotFound
from squadhub.core.exceptions import PreconditionFailed
from squadhub.core.exceptions import ValidationError
from squadhub.teams.models import RosterMember
from squadhub.teams.models import TeamCategory
from squadhub.tryouts.lifecycle import ProspectLifecycleService
from squadhub.tryouts.models import Prospect
from squadhub.tryouts.models import ProspectStatus
from squadhub.users.models import UserRole

from .helpers import actor_for
from .helpers import make_prospect
from .helpers import make_team
from .helpers import make_user


class LifecycleTestBase(TestCase):
    def setUp(self):
        self.main_team = make_team(TeamCategory.MAIN, name="team-42")
        self.academy_team = make_team(TeamCategory.ACADEMY)
        self.admin = actor_for(make_user("admin", role=UserRole.ADMIN))
        self.manager_user = make_user("manager", role=UserRole.MANAGER, team=self.main_team)
        self.manager = actor_for(self.manager_user)
        self.academy_manager = actor_for(
            make_user("academy-manager", role=UserRole.MANAGER, team=self.academy_team)
        )
        self.player = actor_for(make_user("player", role=UserRole.PLAYER, team=self.main_team))


class SetStatusTest(LifecycleTestBase):
    def test_leaving_not_contacted_stamps_contact(self):
        prospect = make_prospect("alpha")

        updated = ProspectLifecycleService.set_status(prospect, ProspectStatus.CONTACTED, self.manager)

        self.assertEqual(updated.status, ProspectStatus.CONTACTED)
        prospect.refresh_from_db()
        self.assertEqual(prospect.status, ProspectStatus.CONTACTED)
        self.assertEqual(prospect.contacted_by, self.manager_user)
        self.assertIsNotNone(prospect.last_contacted_at)

    def test_existing_contact_metadata_kept(self):
        other = make_user("scout", role=UserRole.MANAGER, team=self.main_team)
        prospect = make_prospect("alpha", contacted_by=other)

        ProspectLifecycleService.set_status(prospect.pk, "in_tryouts", self.manager)

        prospect.refresh_from_db()
        self.assertEqual(prospect.contacted_by, other)
        self.assertIsNotNone(prospect.last_contacted_at)

    def test_any_to_any_except_player(self):
        prospect = make_prospect("alpha", status=ProspectStatus.REJECTED)
        for status in (ProspectStatus.ACCEPTED, ProspectStatus.LEFT, ProspectStatus.NOT_CONTACTED):
            ProspectLifecycleService.set_status(prospect.pk, status, self.admin)
            prospect.refresh_from_db()
            self.assertEqual(prospect.status, status)

    def test_into_player_rejected(self):
        prospect = make_prospect("alpha", status=ProspectStatus.ACCEPTED)
        with self.assertRaises(ValidationError):
            ProspectLifecycleService.set_status(prospect.pk, ProspectStatus.PLAYER, self.admin)
        prospect.refresh_from_db()
        self.assertEqual(prospect.status, ProspectStatus.ACCEPTED)

    def test_out_of_player_is_precondition_failure(self):
        prospect = make_prospect("alpha", status=ProspectStatus.PLAYER)
        with self.assertRaises(PreconditionFailed):
            ProspectLifecycleService.set_status(prospect.pk, ProspectStatus.LEFT, self.admin)

    def test_unknown_status(self):
        prospect = make_prospect("alpha")
        with self.assertRaises(ValidationError):
            ProspectLifecycleService.set_status(prospect.pk, "hired", self.admin)

    def test_gated(self):
        prospect = make_prospect("alpha")
        with self.assertRaises(Denied):
            ProspectLifecycleService.set_status(prospect.pk, "contacted", self.academy_manager)
        with self.assertRaises(Denied):
            ProspectLifecycleService.set_status(prospect.pk, "contacted", self.player)
        prospect.refresh_from_db()
        self.assertEqual(prospect.status, ProspectStatus.NOT_CONTACTED)

    def test_unknown_prospect(self):
        with self.assertRaises(NotFound):
            ProspectLifecycleService.set_status(uuid.uuid4(), "contacted", self.admin)


class PromoteTest(LifecycleTestBase):
    def setUp(self):
        super().setUp()
        self.prospect = make_prospect(
            "alpha",
            status=ProspectStatus.ACCEPTED,
            full_name="Alex Alpha",
            in_game_name="Alph4",
            position="Controller",
            is_igl=True,
            nationality="FR",
            agent_pool=["Omen", "Viper"],
            rank="Immortal 3",
            tracker_url="https://tracker.gg/valorant/profile/riot/alpha",
        )

    def test_promote_scenario(self):
        """Promoting twice creates a single roster member"""
        member = ProspectLifecycleService.promote(self.prospect.pk, self.main_team.pk, self.manager)

        self.assertEqual(member.team_id, self.main_team.pk)
        self.assertEqual(member.team.name, "team-42")
        self.prospect.refresh_from_db()
        self.assertEqual(self.prospect.status, ProspectStatus.PLAYER)

        with self.assertRaises(PreconditionFailed):
            ProspectLifecycleService.promote(self.prospect.pk, self.main_team.pk, self.manager)
        self.assertEqual(RosterMember.objects.filter(prospect=self.prospect).count(), 1)

    def test_identity_fields_copied(self):
        member = ProspectLifecycleService.promote(self.prospect.pk, self.main_team.pk, self.admin)
        self.assertEqual(member.prospect, self.prospect)
        self.assertEqual(member.username, "alpha")
        self.assertEqual(member.full_name, "Alex Alpha")
        self.assertEqual(member.in_game_name, "Alph4")
        self.assertEqual(member.position, "Controller")
        self.assertTrue(member.is_igl)
        self.assertEqual(member.nationality, "FR")
        self.assertEqual(member.agent_pool, ["Omen", "Viper"])
        self.assertEqual(member.rank, "Immortal 3")
        self.assertEqual(member.tracker_url, "https://tracker.gg/valorant/profile/riot/alpha")

    def test_only_accepted_can_be_promoted(self):
        for status in (ProspectStatus.IN_TRYOUTS, ProspectStatus.SUBSTITUTE, ProspectStatus.REJECTED):
            Prospect.objects.filter(pk=self.prospect.pk).update(status=status)
            with self.assertRaises(PreconditionFailed):
                ProspectLifecycleService.promote(self.prospect.pk, self.main_team.pk, self.admin)
        self.assertFalse(RosterMember.objects.exists())

    def test_team_required(self):
        for team_id in (None, ""):
            with self.assertRaises(ValidationError):
                ProspectLifecycleService.promote(self.prospect.pk, team_id, self.admin)

    def test_unknown_team(self):
        with self.assertRaises(NotFound):
            ProspectLifecycleService.promote(self.prospect.pk, uuid.uuid4(), self.admin)

    def test_manager_limited_to_own_team(self):
        with self.assertRaises(Denied):
            ProspectLifecycleService.promote(self.prospect.pk, self.academy_team.pk, self.manager)
        with self.assertRaises(Denied):
            ProspectLifecycleService.promote(self.prospect.pk, self.main_team.pk, self.academy_manager)
        self.prospect.refresh_from_db()
        self.assertEqual(self.prospect.status, ProspectStatus.ACCEPTED)

    def test_admin_may_promote_into_any_team(self):
        member = ProspectLifecycleService.promote(self.prospect.pk, self.academy_team.pk, self.admin)
        self.assertEqual(member.team, self.academy_team)

    @patch("squadhub.tryouts.lifecycle.RosterMember.objects.create")
    def test_failed_insert_rolls_back_status(self, mock_create):
        mock_create.side_effect = IntegrityError("UNIQUE constraint failed: teams_rostermember.prospect_id")

        with self.assertRaises(Conflict):
            ProspectLifecycleService.promote(self.prospect.pk, self.main_team.pk, self.admin)

        self.prospect.refresh_from_db()
        self.assertEqual(self.prospect.status, ProspectStatus.ACCEPTED)


class EligibleForRoundTest(LifecycleTestBase):
    def test_excludes_rejected_and_left(self):
        make_prospect("alpha")
        make_prospect("bravo", status=ProspectStatus.IN_TRYOUTS)
        make_prospect("charlie", status=ProspectStatus.REJECTED)
        make_prospect("delta", status=ProspectStatus.LEFT)
        make_prospect("echo", team_category=TeamCategory.ACADEMY)

        usernames = set(
            ProspectLifecycleService.eligible_for_round(TeamCategory.MAIN).values_list("username", flat=True)
        )
        self.assertEqual(usernames, {"alpha", "bravo"})
