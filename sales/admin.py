# sales/admin.py
from django.contrib import admin, messages
from django.core.exceptions import ValidationError

from .models import Quotation
from .services import QuotationService


@admin.register(Quotation)
class QuotationAdmin(admin.ModelAdmin):
    list_display = ("quotation_id", "client", "status", "total_amount", "currency", "valid_until")
    list_filter = ("status", "currency")
    search_fields = ("quotation_id", "client__company_name", "client__client_id")
    readonly_fields = (
        "quotation_id",
        "client_sequence",
        "subtotal",
        "discount_amount",
        "tax_amount",
        "total_amount",
        "accepted_by_name",
        "accepted_at",
    )
    actions = ["send_to_client"]

    @admin.action(description="Send selected draft quotations to the client")
    def send_to_client(self, request, queryset):
        sent = 0
        for quotation in queryset:
            try:
                QuotationService.send_quotation(quotation, actor=request.user)
            except ValidationError as exc:
                self.message_user(
                    request, f"{quotation.quotation_id}: {' '.join(exc.messages)}", messages.WARNING
                )
            else:
                sent += 1
        if sent:
            self.message_user(request, f"{sent} quotation(s) sent.", messages.SUCCESS)
