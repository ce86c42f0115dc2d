from django.contrib import admin
from unfold.admin import ModelAdmin

from .models import RosterMember
from .models import Team
from .models import WeeklyAvailability


@admin.register(Team)
class TeamAdmin(ModelAdmin):
    list_display = ["name", "tag", "category", "game", "created_at"]
    list_filter = ["category", "game"]
    search_fields = ["name", "tag"]
    readonly_fields = ["created_at", "updated_at"]


@admin.register(RosterMember)
class RosterMemberAdmin(ModelAdmin):
    list_display = [
        "in_game_name",
        "username",
        "team",
        "position",
        "is_igl",
        "is_substitute",
        "created_at",
    ]
    list_filter = ["team", "position", "is_igl", "is_substitute"]
    search_fields = ["username", "in_game_name", "full_name", "user__username"]
    readonly_fields = ["created_at", "updated_at"]
    raw_id_fields = ["team", "user", "prospect"]


@admin.register(WeeklyAvailability)
class WeeklyAvailabilityAdmin(ModelAdmin):
    list_display = ["player", "team", "week_start", "week_end", "get_slot_count", "submitted_at"]
    list_filter = ["team", "week_start"]
    search_fields = ["player__username", "player__name", "team__name"]
    readonly_fields = ["submitted_at", "created_at", "updated_at"]
    raw_id_fields = ["player", "team"]
    date_hierarchy = "week_start"

    @admin.display(description="Slots")
    def get_slot_count(self, obj):
        from squadhub.tryouts.matrix import count_selected

        return count_selected(obj.time_slots)
