"""
Print the availability link of every prospect in a scheduling round.

Staff paste these links into direct messages; the token in each link is the
prospect's only credential.
"""

import logging

from django.core.management.base import BaseCommand, CommandError

from squadhub.core.exceptions import ValidationError
from squadhub.core.validation import parse_uuid
from squadhub.tryouts.models import SchedulingRound
from squadhub.tryouts.tokens import availability_link


logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Print one availability link per prospect of a scheduling round"

    def add_arguments(self, parser):
        parser.add_argument("round_id", type=str, help="Scheduling round UUID")
        parser.add_argument(
            "--pending-only",
            action="store_true",
            help="Only list prospects who have not answered yet",
        )

    def handle(self, *args, **options):
        try:
            round_id = parse_uuid(options["round_id"], "round_id")
        except ValidationError as e:
            raise CommandError(str(e))

        scheduling_round = SchedulingRound.objects.filter(pk=round_id).first()
        if scheduling_round is None:
            raise CommandError(f"Scheduling round {round_id} does not exist")

        entries = scheduling_round.entries.select_related("prospect").order_by("prospect__username")
        if options["pending_only"]:
            entries = entries.filter(submitted_at__isnull=True)

        entries = list(entries)
        if not entries:
            self.stdout.write(self.style.WARNING("No matching entries."))
            return

        self.stdout.write(self.style.SUCCESS(f"{scheduling_round} - {len(entries)} links"))
        for entry in entries:
            state = "answered" if entry.submitted_at else "pending"
            self.stdout.write(
                f"{entry.prospect.display_name}\t{state}\t{availability_link(entry.token)}"
            )

        logger.info(f"Exported {len(entries)} availability links for round {scheduling_round.pk}")
