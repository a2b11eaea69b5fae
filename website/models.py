# website/models.py
from django.db import models
from django.utils.translation import gettext_lazy as _

from core.models import TimeStampedModel


class Inquiry(TimeStampedModel):
    """
    A project request sent from the public website.
    Staff follow it up and may convert it into a client account.
    """

    class ServiceInterest(models.TextChoices):
        WEB = "web_development", _("Web development")
        APP = "app_development", _("App development")
        UI_UX = "ui_ux", _("UI/UX design")
        DIGITAL_MARKETING = "digital_marketing", _("Digital marketing")
        SOCIAL_MEDIA = "social_media", _("Social media")
        AI_AUTOMATIONS = "ai_automations", _("AI automations")
        MVP = "mvp", _("MVP")
        OTHER = "other", _("Other")

    class Status(models.TextChoices):
        NEW = "new", _("New")
        CONTACTED = "contacted", _("Contacted")
        CONVERTED = "converted", _("Converted")
        CLOSED = "closed", _("Closed")

    company_name = models.CharField(max_length=255, verbose_name=_("Company name"))
    contact_name = models.CharField(max_length=255, verbose_name=_("Contact name"))
    email = models.EmailField(verbose_name=_("Email"))
    phone = models.CharField(max_length=50, blank=True, verbose_name=_("Phone"))
    country = models.CharField(max_length=100, blank=True, verbose_name=_("Country"))
    city = models.CharField(max_length=100, blank=True, verbose_name=_("City"))

    service_interest = models.CharField(
        max_length=30,
        choices=ServiceInterest.choices,
        default=ServiceInterest.WEB,
        verbose_name=_("Service"),
    )
    project_description = models.TextField(blank=True, verbose_name=_("Project description"))
    budget = models.CharField(max_length=100, blank=True, verbose_name=_("Budget"))
    timeline = models.CharField(max_length=100, blank=True, verbose_name=_("Timeline"))

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.NEW,
        db_index=True,
        verbose_name=_("Status"),
    )
    converted_client = models.ForeignKey(
        "clients.Client",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="inquiries",
        verbose_name=_("Converted client"),
    )

    class Meta:
        ordering = ("-created_at", "-id")
        verbose_name = _("Inquiry")
        verbose_name_plural = _("Inquiries")

    def __str__(self) -> str:
        return f"{self.company_name} ({self.email})"
