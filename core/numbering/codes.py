# core/numbering/codes.py
from django.db import models
from django.utils.translation import gettext_lazy as _


class SequenceType(models.TextChoices):
    """Counting series kept in the id_sequences table."""

    CLIENT = "client", _("Client")
    QUOTATION = "quotation", _("Quotation")
    INVOICE = "invoice", _("Invoice")


class ProjectCode(models.TextChoices):
    """First letter of a client id: size/category of the engagement."""

    ENTERPRISE = "E", _("Enterprise")
    STARTUP = "S", _("Startup")
    MEDIUM = "M", _("Medium business")
    PERSONAL = "P", _("Personal / small")


class PlatformCode(models.TextChoices):
    """Second letter of a client id: delivery platform."""

    APP = "A", _("App (mobile)")
    WEB = "W", _("Web")
    BOTH = "B", _("Both (app + web)")
    HYBRID = "H", _("Hybrid")
