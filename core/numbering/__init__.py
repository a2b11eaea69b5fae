"""
Human-readable business identifiers (client, quotation, invoice).

Pure formatting and parsing lives here; allocation of the sequence numbers
behind them lives in ``core.services.numbering``.
"""
from .calendar import fiscal_year, fiscal_year_short, hex_month, two_digit_year
from .codes import PlatformCode, ProjectCode, SequenceType
from .exceptions import InvalidArgument, NumberingError, SequenceAllocationFailed
from .identifiers import (
    CLIENT_ID_PATTERN,
    ClientIdComponents,
    ClientIdentifier,
    InvoiceIdentifier,
    QuotationIdentifier,
    base_client_id,
    format_client_id,
    format_invoice_id,
    format_quotation_id,
    is_valid_client_id,
    parse_client_id,
    validate_version,
)

__all__ = [
    "fiscal_year",
    "fiscal_year_short",
    "hex_month",
    "two_digit_year",
    "PlatformCode",
    "ProjectCode",
    "SequenceType",
    "InvalidArgument",
    "NumberingError",
    "SequenceAllocationFailed",
    "CLIENT_ID_PATTERN",
    "ClientIdComponents",
    "ClientIdentifier",
    "InvoiceIdentifier",
    "QuotationIdentifier",
    "base_client_id",
    "format_client_id",
    "format_invoice_id",
    "format_quotation_id",
    "is_valid_client_id",
    "parse_client_id",
    "validate_version",
]
