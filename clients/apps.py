# clients/apps.py
from django.apps import AppConfig


class ClientsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "clients"
    verbose_name = "Clients"

    def ready(self):
        # register domain event handlers
        from . import handlers  # noqa
