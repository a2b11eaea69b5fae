# core/services/numbering.py
"""
Sequence allocation and identifier generation.

Usage:

    from core.services.numbering import (
        generate_client_id, generate_quotation_id, generate_invoice_id,
    )

    ident = generate_client_id("E", "A", "ind")     # EA701-IND-253
    quote = generate_quotation_id(ident.value)       # QN1-EA701-001
    inv = generate_invoice_id(ident.value)           # IN1-FY24-EA701-001

Allocation commits on its own. Callers allocate first and only then open the
transaction that creates the record, so a failed insert burns the number
(sequences are unique and increasing, not gap-free).
"""
from __future__ import annotations

import abc
import datetime
import logging
from typing import Optional

from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import F
from django.utils import timezone
from django.utils.module_loading import import_string

from core.models import IdSequence
from core.numbering import (
    ClientIdComponents,
    ClientIdentifier,
    InvalidArgument,
    InvoiceIdentifier,
    PlatformCode,
    ProjectCode,
    QuotationIdentifier,
    SequenceAllocationFailed,
    SequenceType,
    base_client_id,
    fiscal_year,
    hex_month,
    two_digit_year,
    validate_version,
)

logger = logging.getLogger(__name__)

DEFAULT_SEQUENCE_STORE = "core.services.numbering.DatabaseSequenceStore"


# =====================================================================
# Sequence stores
# =====================================================================

class SequenceStore(abc.ABC):
    """
    Durable counter keyed by (sequence_type, scope_key, fiscal_year).

    allocate() must be a single atomic increment-and-return: two concurrent
    callers never get the same value for the same key.
    """

    @abc.abstractmethod
    def allocate(
        self,
        sequence_type: SequenceType | str,
        scope_key: Optional[str] = None,
        fiscal_year: Optional[str] = None,
    ) -> int:
        """Return the next value of the series (1 for a brand new series)."""


class DatabaseSequenceStore(SequenceStore):
    """
    SequenceStore backed by the id_sequences table.

    The increment is expressed as UPDATE ... SET current_value = current_value + 1
    (an F() expression), so the database serializes concurrent writers on the
    row lock; the value read back inside the same transaction is ours.
    """

    def __init__(self, using: str = "default"):
        self.using = using

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def allocate(self, sequence_type, scope_key=None, fiscal_year=None) -> int:
        identity = self._identity(sequence_type, scope_key, fiscal_year)

        try:
            with transaction.atomic(using=self.using):
                value = self._increment(identity)
                if value is None:
                    value = self._insert_if_absent(identity)
        except DatabaseError as exc:
            logger.error(
                "Sequence allocation failed for %s (scope=%r, fy=%r): %s",
                identity["sequence_type"],
                scope_key,
                fiscal_year,
                exc,
            )
            raise SequenceAllocationFailed(
                identity["sequence_type"],
                scope_key,
                fiscal_year,
                cause=exc,
            ) from exc

        logger.debug(
            "Allocated %s sequence %d (scope=%r, fy=%r)",
            identity["sequence_type"],
            value,
            scope_key,
            fiscal_year,
        )
        return value

    def current_value(self, sequence_type, scope_key=None, fiscal_year=None) -> Optional[int]:
        """
        Last issued value, or None if the series was never allocated.
        Read-only; never use it to compute the next value.
        """
        identity = self._identity(sequence_type, scope_key, fiscal_year)
        return (
            IdSequence.objects.using(self.using)
            .filter(**identity)
            .values_list("current_value", flat=True)
            .first()
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _identity(sequence_type, scope_key, fiscal_year) -> dict:
        try:
            sequence_type = SequenceType(sequence_type)
        except ValueError:
            raise InvalidArgument(f"Unknown sequence type {sequence_type!r}") from None

        return {
            "sequence_type": sequence_type.value,
            "scope_key": scope_key or "",
            "fiscal_year": fiscal_year or "",
        }

    def _increment(self, identity: dict) -> Optional[int]:
        qs = IdSequence.objects.using(self.using).filter(**identity)
        updated = qs.update(
            current_value=F("current_value") + 1,
            updated_at=timezone.now(),
        )
        if not updated:
            return None
        return qs.values_list("current_value", flat=True).get()

    def _insert_if_absent(self, identity: dict) -> int:
        try:
            with transaction.atomic(using=self.using):
                row = IdSequence.objects.using(self.using).create(
                    current_value=1,
                    **identity,
                )
            return row.current_value
        except IntegrityError:
            # Another caller created the row between our UPDATE and INSERT.
            value = self._increment(identity)
            if value is None:
                raise
            return value


def get_sequence_store() -> SequenceStore:
    """Instantiate the store configured in settings.NUMBERING_SEQUENCE_STORE."""
    path = getattr(settings, "NUMBERING_SEQUENCE_STORE", DEFAULT_SEQUENCE_STORE)
    return import_string(path)()


# =====================================================================
# Identifier generators
# =====================================================================

def _coerce_choice(value: str, choices, label: str) -> str:
    try:
        return choices(value).value
    except ValueError:
        allowed = ", ".join(choices.values)
        raise InvalidArgument(f"Invalid {label} {value!r} (allowed: {allowed})") from None


def generate_client_id(
    project_code: ProjectCode | str,
    platform_code: PlatformCode | str,
    country_code: Optional[str] = None,
    *,
    on: Optional[datetime.date] = None,
    store: Optional[SequenceStore] = None,
) -> ClientIdentifier:
    """
    Build a new client id: <project><platform>7<seq>-<COUNTRY>-<yy><hex month>.

    The client counter is a single global series (no scope, no fiscal year).
    Codes are validated before the counter is touched.
    """
    project = _coerce_choice(project_code, ProjectCode, "project code")
    platform = _coerce_choice(platform_code, PlatformCode, "platform code")
    if country_code is None:
        country_code = getattr(settings, "NUMBERING_DEFAULT_COUNTRY", "IND")

    on = on or timezone.localdate()
    month = hex_month(on.month)
    year = two_digit_year(on)

    store = store or get_sequence_store()
    sequence_number = store.allocate(SequenceType.CLIENT)

    identifier = ClientIdentifier(
        components=ClientIdComponents(
            project_code=project,
            platform_code=platform,
            sequence_number=f"{sequence_number:02d}",
            country_code=country_code.upper(),
            year=year,
            month=month,
        ),
        sequence_number=sequence_number,
    )
    logger.info("Generated client id %s (sequence=%d)", identifier, sequence_number)
    return identifier


def generate_quotation_id(
    client_id: str,
    version: int = 1,
    *,
    store: Optional[SequenceStore] = None,
) -> QuotationIdentifier:
    """QN<version>-<base client id>-<seq:03d>, counted per base client id."""
    base = base_client_id(client_id)
    validate_version(version)

    store = store or get_sequence_store()
    sequence_number = store.allocate(SequenceType.QUOTATION, scope_key=base)

    identifier = QuotationIdentifier(
        base_client_id=base,
        version=version,
        sequence_number=sequence_number,
    )
    logger.info("Generated quotation id %s (sequence=%d)", identifier, sequence_number)
    return identifier


def generate_invoice_id(
    client_id: str,
    version: int = 1,
    *,
    on: Optional[datetime.date] = None,
    store: Optional[SequenceStore] = None,
) -> InvoiceIdentifier:
    """
    IN<version>-FY<fy short>-<base client id>-<seq:03d>, counted per
    base client id and fiscal year of ``on`` (default: today).
    """
    base = base_client_id(client_id)
    fy = fiscal_year(on)
    validate_version(version)

    store = store or get_sequence_store()
    sequence_number = store.allocate(SequenceType.INVOICE, scope_key=base, fiscal_year=fy)

    identifier = InvoiceIdentifier(
        base_client_id=base,
        version=version,
        fiscal_year=fy,
        sequence_number=sequence_number,
    )
    logger.info("Generated invoice id %s (sequence=%d)", identifier, sequence_number)
    return identifier
