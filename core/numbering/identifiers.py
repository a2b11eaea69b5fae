# core/numbering/identifiers.py
"""
Text form of the three public identifiers.

Client:    <project><platform>7<seq:02d>-<COUNTRY>-<yy><hex month>   EA701-IND-253
Quotation: QN<version>-<base client id>-<seq:03d>                   QN1-EA701-001
Invoice:   IN<version>-FY<fy short>-<base client id>-<seq:03d>      IN1-FY24-EA701-001

Padding is a minimum width: a client sequence of 100 is written "100", not
truncated. Identifiers are never re-generated once stored on a record.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar, Optional

from .calendar import fiscal_year_short
from .codes import SequenceType
from .exceptions import InvalidArgument

CLIENT_ID_FORMAT_DIGIT = "7"

CLIENT_ID_PATTERN = re.compile(
    r"^(?P<project_code>[A-Z])"
    r"(?P<platform_code>[A-Z])"
    + CLIENT_ID_FORMAT_DIGIT
    + r"(?P<sequence_number>\d{2})"
    r"-(?P<country_code>[A-Z]{3})"
    r"-(?P<year>\d{2})"
    r"(?P<month>[0-9A-C])$",
    re.ASCII,
)


@dataclass(frozen=True)
class ClientIdComponents:
    """Textual fields of a client id, exactly as they appear in the string."""

    project_code: str
    platform_code: str
    sequence_number: str
    country_code: str
    year: str
    month: str

    def __str__(self) -> str:
        return format_client_id(self)


@dataclass(frozen=True)
class ClientIdentifier:
    components: ClientIdComponents
    sequence_number: int

    kind: ClassVar[SequenceType] = SequenceType.CLIENT

    @property
    def value(self) -> str:
        return format_client_id(self.components)

    @property
    def base(self) -> str:
        return base_client_id(self.value)

    @property
    def year_hex(self) -> str:
        return f"{self.components.year}{self.components.month}"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class QuotationIdentifier:
    base_client_id: str
    version: int
    sequence_number: int

    kind: ClassVar[SequenceType] = SequenceType.QUOTATION

    @property
    def value(self) -> str:
        return format_quotation_id(self.base_client_id, self.version, self.sequence_number)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class InvoiceIdentifier:
    base_client_id: str
    version: int
    fiscal_year: str
    sequence_number: int

    kind: ClassVar[SequenceType] = SequenceType.INVOICE

    @property
    def value(self) -> str:
        return format_invoice_id(
            self.base_client_id,
            self.version,
            self.fiscal_year,
            self.sequence_number,
        )

    def __str__(self) -> str:
        return self.value


# ----------------------------------------------------------------------
# Formatting
# ----------------------------------------------------------------------

def validate_version(version: int) -> None:
    if isinstance(version, bool) or not isinstance(version, int) or version < 1:
        raise InvalidArgument(f"Version must be a positive integer, got {version!r}")


def format_client_id(components: ClientIdComponents) -> str:
    c = components
    return (
        f"{c.project_code}{c.platform_code}{CLIENT_ID_FORMAT_DIGIT}{c.sequence_number}"
        f"-{c.country_code}-{c.year}{c.month}"
    )


def format_quotation_id(base_client_id: str, version: int, sequence_number: int) -> str:
    validate_version(version)
    return f"QN{version}-{base_client_id}-{sequence_number:03d}"


def format_invoice_id(
    base_client_id: str,
    version: int,
    fiscal_year: str,
    sequence_number: int,
) -> str:
    validate_version(version)
    return f"IN{version}-FY{fiscal_year_short(fiscal_year)}-{base_client_id}-{sequence_number:03d}"


# ----------------------------------------------------------------------
# Parsing
# ----------------------------------------------------------------------

def base_client_id(client_id: str) -> str:
    """
    Portion of a decorated client id before the first "-".

    Permissive: a string without "-" is returned whole.
    """
    return client_id.split("-", 1)[0]


def parse_client_id(client_id) -> Optional[ClientIdComponents]:
    """
    Split a client id into its components, or return None when it does not
    match the grammar. Never raises.
    """
    if not isinstance(client_id, str):
        return None
    match = CLIENT_ID_PATTERN.fullmatch(client_id)
    if match is None:
        return None
    return ClientIdComponents(**match.groupdict())


def is_valid_client_id(client_id) -> bool:
    return parse_client_id(client_id) is not None
