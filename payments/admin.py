# payments/admin.py
from django.contrib import admin, messages
from django.core.exceptions import ValidationError

from .models import PaymentSubmission
from .services import PaymentService


@admin.register(PaymentSubmission)
class PaymentSubmissionAdmin(admin.ModelAdmin):
    list_display = ("invoice", "amount", "method", "transaction_reference", "status", "created_at")
    list_filter = ("status", "method")
    search_fields = ("transaction_reference", "invoice__invoice_id", "payer_name")
    readonly_fields = ("status", "reviewed_by", "reviewed_at", "submitted_by", "created_at")
    actions = ["verify_payments"]

    @admin.action(description="Verify selected payments (marks invoices paid)")
    def verify_payments(self, request, queryset):
        for submission in queryset.select_related("invoice"):
            try:
                PaymentService.verify(submission, actor=request.user)
            except ValidationError as exc:
                self.message_user(
                    request,
                    f"{submission}: {' '.join(exc.messages)}",
                    messages.WARNING,
                )
