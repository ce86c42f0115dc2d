from django.contrib import admin
from django.utils.html import format_html
from unfold.admin import ModelAdmin
from unfold.admin import TabularInline

from .matrix import count_selected
from .models import AvailabilityEntry
from .models import Prospect
from .models import SchedulingRound


class AvailabilityEntryInline(TabularInline):
    model = AvailabilityEntry
    extra = 0
    fields = ["prospect", "submitted_at", "get_slot_count"]
    readonly_fields = ["prospect", "submitted_at", "get_slot_count"]
    can_delete = False
    show_change_link = True

    @admin.display(description="Slots")
    def get_slot_count(self, obj):
        return count_selected(obj.time_slots)


@admin.register(SchedulingRound)
class SchedulingRoundAdmin(ModelAdmin):
    list_display = [
        "__str__",
        "team_category",
        "start_date",
        "end_date",
        "status",
        "get_response_count",
        "created_by",
    ]
    list_filter = ["team_category", "status", "start_date"]
    search_fields = ["label", "notes"]
    readonly_fields = ["created_by", "created_at", "updated_at"]
    date_hierarchy = "start_date"
    inlines = [AvailabilityEntryInline]

    @admin.display(description="Responses")
    def get_response_count(self, obj):
        entries = obj.entries.all()
        submitted = sum(1 for entry in entries if entry.submitted_at is not None)
        return f"{submitted}/{len(entries)}"

    def get_queryset(self, request):
        return super().get_queryset(request).prefetch_related("entries")


@admin.register(Prospect)
class ProspectAdmin(ModelAdmin):
    list_display = [
        "username",
        "in_game_name",
        "team_category",
        "position",
        "rank",
        "status",
        "managed_by",
        "last_contacted_at",
    ]
    list_filter = ["team_category", "status", "position", "is_igl"]
    search_fields = ["username", "full_name", "in_game_name", "discord"]
    readonly_fields = ["created_at", "updated_at"]
    raw_id_fields = ["contacted_by", "managed_by"]

    fieldsets = (
        (None, {"fields": ("username", "full_name", "in_game_name", "team_category")}),
        ("Profile", {"fields": ("position", "is_igl", "nationality", "agent_pool", "rank")}),
        ("Links", {"fields": ("tracker_url", "twitter_url", "discord", "links")}),
        ("Pipeline", {"fields": ("status", "contacted_by", "last_contacted_at", "managed_by", "notes")}),
        ("Timestamps", {"fields": ("created_at", "updated_at"), "classes": ("collapse",)}),
    )


@admin.register(AvailabilityEntry)
class AvailabilityEntryAdmin(ModelAdmin):
    list_display = ["prospect", "round", "get_slot_count", "submitted_at", "expires_at"]
    list_filter = ["round__team_category", "submitted_at"]
    search_fields = ["prospect__username", "prospect__in_game_name", "round__label"]
    readonly_fields = ["token_preview", "submitted_at", "created_at", "updated_at"]
    exclude = ["token"]
    raw_id_fields = ["round", "prospect"]

    @admin.display(description="Slots")
    def get_slot_count(self, obj):
        return count_selected(obj.time_slots)

    @admin.display(description="Token")
    def token_preview(self, obj):
        # The full token is a credential; staff share links via export_round_links.
        return format_html("<code>{}…</code>", obj.token[:6]) if obj.token else "-"
