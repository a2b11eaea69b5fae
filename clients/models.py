# clients/models.py
from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel
from core.numbering import PlatformCode, ProjectCode, base_client_id

from .managers import ClientManager, ProjectQuerySet


class Client(BaseModel):
    """
    A customer of the agency with a portal login.

    `client_id` is the public identifier (e.g. EA701-IND-253); it is assigned
    once at onboarding and never regenerated. The integer pk stays internal.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="client_profile",
        verbose_name=_("Portal user"),
    )

    company_name = models.CharField(max_length=255, verbose_name=_("Company name"))
    contact_email = models.EmailField(verbose_name=_("Contact email"))
    phone = models.CharField(max_length=50, blank=True, verbose_name=_("Phone"))

    address = models.CharField(max_length=255, blank=True, verbose_name=_("Address"))
    city = models.CharField(max_length=100, blank=True, verbose_name=_("City"))
    state = models.CharField(max_length=100, blank=True, verbose_name=_("State"))
    zip_code = models.CharField(max_length=20, blank=True, verbose_name=_("ZIP"))
    country = models.CharField(
        max_length=3,
        default="IND",
        verbose_name=_("Country code"),
        help_text=_("Three letter code, used in the client id."),
    )

    # ---------- Identifier ----------
    client_id = models.CharField(
        max_length=32,
        unique=True,
        editable=False,
        verbose_name=_("Client ID"),
    )
    project_code = models.CharField(
        max_length=1,
        choices=ProjectCode.choices,
        default=ProjectCode.ENTERPRISE,
        verbose_name=_("Project code"),
    )
    platform_code = models.CharField(
        max_length=1,
        choices=PlatformCode.choices,
        default=PlatformCode.WEB,
        verbose_name=_("Platform code"),
    )
    year_hex = models.CharField(
        max_length=3,
        editable=False,
        verbose_name=_("Year + hex month"),
    )
    client_sequence_number = models.PositiveIntegerField(
        editable=False,
        verbose_name=_("Client sequence number"),
    )

    manager = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="managed_clients",
        verbose_name=_("Account manager"),
    )

    is_active = models.BooleanField(default=True, verbose_name=_("Active"))

    objects = ClientManager()

    class Meta:
        ordering = ("-created_at", "-id")
        verbose_name = _("Client")
        verbose_name_plural = _("Clients")

    def __str__(self) -> str:
        return f"{self.client_id} - {self.company_name}"

    @property
    def base_client_id(self) -> str:
        """EA701 for EA701-IND-253: the scope of quotation/invoice counters."""
        return base_client_id(self.client_id)


class Project(BaseModel):
    class Status(models.TextChoices):
        ACTIVE = "active", _("Active")
        ON_HOLD = "on_hold", _("On hold")
        COMPLETED = "completed", _("Completed")
        CANCELLED = "cancelled", _("Cancelled")

    client = models.ForeignKey(
        Client,
        on_delete=models.CASCADE,
        related_name="projects",
        verbose_name=_("Client"),
    )
    title = models.CharField(max_length=255, verbose_name=_("Title"))
    description = models.TextField(blank=True, verbose_name=_("Description"))
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.ACTIVE,
        db_index=True,
        verbose_name=_("Status"),
    )

    objects = ProjectQuerySet.as_manager()

    class Meta:
        ordering = ("-created_at", "-id")
        verbose_name = _("Project")
        verbose_name_plural = _("Projects")

    def __str__(self) -> str:
        return self.title
