# payments/views.py
from django.contrib import messages
from django.core.exceptions import ValidationError
from django.shortcuts import get_object_or_404, redirect
from django.utils.translation import gettext as _
from django.views import View
from django.views.generic import ListView

from clients.models import Client
from core.permissions import StaffOrManagerRequiredMixin

from .models import PaymentSubmission
from .services import PaymentService


def _visible_submissions(user):
    return PaymentSubmission.objects.filter(
        invoice__client__in=Client.objects.visible_to(user)
    ).select_related("invoice", "invoice__client")


class PendingPaymentListView(StaffOrManagerRequiredMixin, ListView):
    template_name = "payments/pending_list.html"
    context_object_name = "submissions"
    paginate_by = 25

    def get_queryset(self):
        return _visible_submissions(self.request.user).filter(
            status=PaymentSubmission.Status.PENDING
        ).order_by("created_at", "id")


class PaymentReviewView(StaffOrManagerRequiredMixin, View):
    """POST decision=verify|reject (+ reason when rejecting)."""

    def post(self, request, pk):
        submission = get_object_or_404(_visible_submissions(request.user), pk=pk)
        decision = request.POST.get("decision", "")

        try:
            if decision == "verify":
                PaymentService.verify(submission, actor=request.user)
                messages.success(request, _("Payment verified and invoice marked as paid."))
            elif decision == "reject":
                PaymentService.reject(
                    submission,
                    reason=request.POST.get("reason", ""),
                    actor=request.user,
                )
                messages.success(request, _("Payment rejected. The client was notified."))
            else:
                messages.error(request, _("Unknown action."))
        except ValidationError as exc:
            messages.error(request, " ".join(exc.messages))

        return redirect("payments:pending_list")
