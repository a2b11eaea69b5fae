# accounting/admin.py
from django.contrib import admin, messages
from django.core.exceptions import ValidationError
from django.http import HttpResponse

from .exports import XLSX_CONTENT_TYPE, export_invoices_xlsx
from .models import Invoice
from .services import InvoiceService


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ("invoice_id", "client", "financial_year", "status", "total_amount", "currency", "due_date")
    list_filter = ("status", "financial_year", "currency")
    search_fields = ("invoice_id", "client__company_name", "client__client_id")
    readonly_fields = (
        "invoice_id",
        "financial_year",
        "client_sequence",
        "subtotal",
        "discount_amount",
        "tax_amount",
        "total_amount",
        "paid_at",
    )
    actions = ["send_to_client", "export_xlsx"]

    @admin.action(description="Send selected draft invoices to the client")
    def send_to_client(self, request, queryset):
        for invoice in queryset:
            try:
                InvoiceService.send_invoice(invoice, actor=request.user)
            except ValidationError as exc:
                self.message_user(
                    request, f"{invoice.invoice_id}: {' '.join(exc.messages)}", messages.WARNING
                )

    @admin.action(description="Export selected invoices to Excel")
    def export_xlsx(self, request, queryset):
        response = HttpResponse(
            export_invoices_xlsx(queryset.select_related("client")),
            content_type=XLSX_CONTENT_TYPE,
        )
        response["Content-Disposition"] = 'attachment; filename="invoices.xlsx"'
        return response
