from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class TryoutsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "squadhub.tryouts"
    verbose_name = _("Tryouts")
