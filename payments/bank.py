# payments/bank.py
"""
Agency bank account used for direct transfers and UPI links.
Values come from settings.AGENCY_BANK_DETAILS (see the BANK_* env variables).
"""
from dataclasses import dataclass
from decimal import Decimal
from urllib.parse import urlencode

from django.conf import settings

UPI_CURRENCY = "INR"


@dataclass(frozen=True)
class BankDetails:
    bank_name: str = ""
    account_holder_name: str = ""
    account_number: str = ""
    ifsc_code: str = ""
    branch_name: str = ""
    upi_id: str = ""

    @classmethod
    def from_settings(cls) -> "BankDetails":
        raw = getattr(settings, "AGENCY_BANK_DETAILS", {}) or {}
        return cls(**{key: str(raw.get(key) or "") for key in cls.__dataclass_fields__})


def upi_payment_link(amount, invoice_id: str, details: BankDetails = None) -> str:
    """
    upi://pay?pa=<upi id>&pn=<holder>&am=<amount>&cu=INR&tn=Payment for Invoice <id>
    Empty string when no UPI id is configured.
    """
    details = details or BankDetails.from_settings()
    if not details.upi_id:
        return ""

    params = {
        "pa": details.upi_id,
        "pn": details.account_holder_name,
        "am": str(Decimal(str(amount)).quantize(Decimal("0.01"))),
        "cu": UPI_CURRENCY,
        "tn": f"Payment for Invoice {invoice_id}",
    }
    return f"upi://pay?{urlencode(params)}"


def format_bank_details(details: BankDetails = None) -> str:
    details = details or BankDetails.from_settings()
    lines = [
        f"Bank: {details.bank_name}",
        f"Account Holder: {details.account_holder_name}",
        f"Account Number: {details.account_number}",
        f"IFSC Code: {details.ifsc_code}",
        f"Branch: {details.branch_name}",
    ]
    if details.upi_id:
        lines.append(f"UPI ID: {details.upi_id}")
    return "\n".join(lines)
