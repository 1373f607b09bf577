from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class UniversitiesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "study_hub.universities"
    verbose_name = _("Universities")
