# accounting/exports.py
from io import BytesIO
from typing import Iterable

from openpyxl import Workbook
from openpyxl.styles import Font

from .models import Invoice

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

INVOICE_COLUMNS = [
    "invoice_id",
    "client_id",
    "company",
    "financial_year",
    "issue_date",
    "due_date",
    "status",
    "currency",
    "subtotal",
    "discount",
    "tax",
    "total",
    "payment_method",
    "payment_reference",
    "paid_at",
]


def export_invoices_xlsx(invoices: Iterable[Invoice]) -> bytes:
    """One sheet, one row per invoice. Amounts stay numeric for Excel sums."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Invoices"

    ws.append(INVOICE_COLUMNS)
    for cell in ws[1]:
        cell.font = Font(bold=True)

    for inv in invoices:
        ws.append([
            inv.invoice_id,
            inv.client.client_id,
            inv.client.company_name,
            inv.financial_year,
            inv.issue_date,
            inv.due_date,
            inv.get_status_display(),
            inv.currency,
            inv.subtotal,
            inv.discount_amount,
            inv.tax_amount,
            inv.total_amount,
            inv.get_payment_method_display() if inv.payment_method else "",
            inv.payment_reference,
            inv.paid_at.replace(tzinfo=None) if inv.paid_at else None,
        ])

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
