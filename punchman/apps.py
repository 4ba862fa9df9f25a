from django.apps import AppConfig


class PunchmanConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "punchman"
    verbose_name = "Punchman - Loyalty Punch Cards"
