from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class TimeStampedModel(models.Model):
    """
    Adds created_at / updated_at fields.
    Use this for almost all models.
    """
    created_at = models.DateTimeField(
        default=timezone.now,
        editable=False,
        verbose_name=_("Created at"),
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name=_("Updated at"),
    )

    class Meta:
        abstract = True


class UserStampedModel(models.Model):
    """
    Adds created_by / updated_by fields.
    These are optional and filled in by services.
    """
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="%(app_label)s_%(class)s_created",
        verbose_name=_("Created by"),
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="%(app_label)s_%(class)s_updated",
        verbose_name=_("Updated by"),
    )

    class Meta:
        abstract = True


class BaseModel(TimeStampedModel, UserStampedModel):
    """
    Base model for portal records (clients, projects, quotations, invoices).

    Note:
    - The integer `id` stays the internal primary key. Public, human-readable
      identifiers (client_id, quotation_id, invoice_id) are separate unique
      fields assigned once by the numbering service.
    """

    class Meta:
        abstract = True

    def stamp(self, user) -> None:
        """Set created_by/updated_by from an authenticated user (if any)."""
        if user is None or not getattr(user, "is_authenticated", False):
            return
        if self._state.adding and self.created_by_id is None:
            self.created_by = user
        self.updated_by = user
