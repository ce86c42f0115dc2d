from django.contrib import admin
from django.contrib.auth import admin as auth_admin
from django.utils.translation import gettext_lazy as _
from unfold.admin import ModelAdmin

from .models import User


@admin.register(User)
class UserAdmin(auth_admin.UserAdmin, ModelAdmin):
    fieldsets = (
        (None, {"fields": ("username", "password")}),
        (_("Personal info"), {"fields": ("name", "email", "timezone")}),
        (_("Team access"), {"fields": ("role", "team")}),
        (
            _("Permissions"),
            {
                "fields": (
                    "is_active",
                    "is_staff",
                    "is_superuser",
                    "groups",
                    "user_permissions",
                ),
            },
        ),
        (_("Important dates"), {"fields": ("last_login", "date_joined")}),
    )
    list_display = ["username", "name", "role", "team", "is_superuser"]
    list_filter = ["role", "team", "is_superuser", "is_active"]
    search_fields = ["name", "username", "email"]
    raw_id_fields = ["team"]
