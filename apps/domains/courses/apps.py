from django.apps import AppConfig


class CoursesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.domains.courses"
    label = "courses"
    verbose_name = "Courses (lesson catalog)"
