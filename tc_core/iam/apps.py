from django.apps import AppConfig


class IamConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "tc_core.iam"
    verbose_name = "Accounts"

    def ready(self) -> None:
        # registers the cookie/Bearer auth scheme with drf-spectacular
        from tc_core.iam import openapi  # noqa: F401
