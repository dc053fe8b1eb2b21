from django.apps import AppConfig


class AssessmentsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.domains.assessments"
    label = "assessments"
    verbose_name = "Assessments (quiz / attempt)"
