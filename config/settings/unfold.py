"""
Unfold Admin Configuration
"""
import json
from datetime import timedelta

from django.db.models import Count
from django.templatetags.static import static
from django.urls import reverse_lazy
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


# Unfold Configuration
UNFOLD = {
    "SITE_TITLE": "SquadHub",
    "SITE_HEADER": "SquadHub",
    "SITE_SUBHEADER": "Tryouts & rosters",
    "SITE_URL": "/",
    "SITE_ICON": {
        "light": lambda request: static("icon.svg"),
        "dark": lambda request: static("icon.svg"),
    },
    "SHOW_HISTORY": True,
    "SHOW_VIEW_ON_SITE": False,
    "SHOW_BACK_BUTTON": False,
    "DASHBOARD_CALLBACK": "config.settings.unfold.dashboard_callback",
    "THEME": "dark",
    "BORDER_RADIUS": "6px",
    "COLORS": {
        "primary": {
            "50": "255, 241, 242",
            "100": "255, 228, 230",
            "200": "254, 205, 211",
            "300": "253, 164, 175",
            "400": "251, 113, 133",
            "500": "244, 63, 94",
            "600": "225, 29, 72",
            "700": "190, 18, 60",
            "800": "159, 18, 57",
            "900": "136, 19, 55",
            "950": "76, 5, 25",
        },
    },
    "SIDEBAR": {
        "show_search": True,
        "show_all_applications": False,
        "navigation": [
            {
                "title": _("Dashboard"),
                "separator": True,
                "items": [
                    {
                        "title": _("Dashboard"),
                        "icon": "dashboard",
                        "link": reverse_lazy("admin:index"),
                    },
                ],
            },
            {
                "title": _("Users & Teams"),
                "separator": True,
                "collapsible": True,
                "items": [
                    {
                        "title": _("Users"),
                        "icon": "people",
                        "link": reverse_lazy("admin:users_user_changelist"),
                    },
                    {
                        "title": _("Teams"),
                        "icon": "groups",
                        "link": reverse_lazy("admin:teams_team_changelist"),
                    },
                    {
                        "title": _("Roster"),
                        "icon": "badge",
                        "link": reverse_lazy("admin:teams_rostermember_changelist"),
                    },
                    {
                        "title": _("Weekly Availability"),
                        "icon": "calendar_month",
                        "link": reverse_lazy("admin:teams_weeklyavailability_changelist"),
                    },
                ],
            },
            {
                "title": _("Tryouts"),
                "separator": True,
                "collapsible": True,
                "items": [
                    {
                        "title": _("Prospects"),
                        "icon": "person_search",
                        "link": reverse_lazy("admin:tryouts_prospect_changelist"),
                    },
                    {
                        "title": _("Scheduling Rounds"),
                        "icon": "event",
                        "link": reverse_lazy("admin:tryouts_schedulinground_changelist"),
                    },
                    {
                        "title": _("Availability Entries"),
                        "icon": "schedule",
                        "link": reverse_lazy("admin:tryouts_availabilityentry_changelist"),
                    },
                ],
            },
        ],
    },
}


def dashboard_callback(request, context):
    """
    Callback to prepare custom variables for index template which is used as dashboard
    template. It can be overridden in application by creating custom admin/index.html.
    """
    from squadhub.teams.models import RosterMember
    from squadhub.tryouts.models import AvailabilityEntry
    from squadhub.tryouts.models import Prospect
    from squadhub.tryouts.models import ProspectStatus
    from squadhub.tryouts.models import SchedulingRound

    end_date = timezone.now().date()
    start_date = end_date - timedelta(days=30)

    # Submissions per day for the last 30 days
    daily_submissions = []
    daily_labels = []

    for i in range(30):
        date = start_date + timedelta(days=i)
        count = AvailabilityEntry.objects.filter(submitted_at__date=date).count()
        daily_submissions.append(count)
        daily_labels.append(date.strftime("%m/%d"))

    prospects_by_status = (
        Prospect.objects.values("status").annotate(count=Count("id")).order_by("status")
    )
    status_labels = []
    status_data = []
    for item in prospects_by_status:
        status_labels.append(ProspectStatus(item["status"]).label)
        status_data.append(item["count"])

    total_entries = AvailabilityEntry.objects.count()
    submitted_entries = AvailabilityEntry.objects.filter(
        submitted_at__isnull=False
    ).count()

    response_rate = 0
    if total_entries > 0:
        response_rate = (submitted_entries / total_entries) * 100

    context.update(
        {
            # Chart data
            "daily_submissions_data": json.dumps(daily_submissions),
            "daily_submissions_labels": json.dumps(daily_labels),
            "prospect_status_data": json.dumps(status_data),
            "prospect_status_labels": json.dumps(status_labels),
            # Overall counts
            "total_prospects": Prospect.objects.count(),
            "total_rounds": SchedulingRound.objects.count(),
            "open_rounds": SchedulingRound.objects.filter(
                status__in=["scheduled", "in_progress"]
            ).count(),
            "total_roster_members": RosterMember.objects.count(),
            "total_entries": total_entries,
            "submitted_entries": submitted_entries,
            "response_rate": round(response_rate, 1),
            # Recent activity
            "recent_rounds": SchedulingRound.objects.order_by("-created_at")[:5],
            "recent_promotions": RosterMember.objects.filter(
                prospect__isnull=False
            ).order_by("-created_at")[:5],
        }
    )
    return context
