# portal/views.py

from django.contrib import messages
from django.contrib.auth.views import redirect_to_login
from django.core.exceptions import PermissionDenied, ValidationError
from django.shortcuts import get_object_or_404, redirect
from django.utils.translation import gettext_lazy as _
from django.views.generic import DetailView, TemplateView

from accounting.models import Invoice
from clients.models import Client
from core.permissions import is_staff_member
from payments.bank import BankDetails, format_bank_details, upi_payment_link
from payments.forms import PaymentSubmissionForm
from payments.services import PaymentService
from sales.models import Quotation
from sales.services import QuotationService

from .forms import QuotationAcceptanceForm, QuotationRejectionForm


# ------------------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------------------

def get_portal_client_or_403(user) -> Client:
    """
    Client profile linked to ``user``.
    Raises PermissionDenied when the user has none.
    """
    try:
        return Client.objects.select_related("user").get(user=user, is_active=True)
    except Client.DoesNotExist:
        raise PermissionDenied(_("No client account is linked to this user.")) from None


# ------------------------------------------------------------------------------
# Mixins
# ------------------------------------------------------------------------------

class ClientPortalMixin:
    """
    Base mixin for portal views.

    - Anonymous users are redirected to login.
    - Users without a client profile get a 403.
    - The client is stored in `self.client`.
    """

    client: Client | None = None

    def dispatch(self, request, *args, **kwargs):
        if not request.user.is_authenticated:
            return redirect_to_login(request.get_full_path())

        self.client = get_portal_client_or_403(request.user)
        return super().dispatch(request, *args, **kwargs)


class ClientOwnedObjectMixin(ClientPortalMixin):
    """
    Detail views on records that belong to a client.
    Someone else's record is a 403, not a 404.
    """

    def get_object(self, queryset=None):
        obj = get_object_or_404(self.model, pk=self.kwargs["pk"])
        if obj.client_id != self.client.pk:
            raise PermissionDenied(_("You do not have access to this record."))
        return obj


# ------------------------------------------------------------------------------
# Dashboard
# ------------------------------------------------------------------------------

class PortalDashboardView(ClientPortalMixin, TemplateView):
    """
    Client home: projects, quotations, invoices and the amount still due.
    Staff landing here after login are sent to the clients list.
    """
    template_name = "portal/dashboard.html"

    def dispatch(self, request, *args, **kwargs):
        if (
            request.user.is_authenticated
            and is_staff_member(request.user)
            and not Client.objects.filter(user=request.user).exists()
        ):
            return redirect("clients:client_list")
        return super().dispatch(request, *args, **kwargs)

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        invoices = Invoice.objects.for_client(self.client).exclude(status=Invoice.Status.DRAFT)

        ctx["client"] = self.client
        ctx["projects"] = self.client.projects.all()
        ctx["quotations"] = (
            Quotation.objects.for_client(self.client)
            .exclude(status=Quotation.Status.DRAFT)
            .order_by("-created_at", "-id")
        )
        ctx["invoices"] = invoices.order_by("-issue_date", "-id")
        ctx["outstanding_total"] = invoices.outstanding().sum_total()
        ctx["overdue_count"] = invoices.overdue().count()
        return ctx


# ------------------------------------------------------------------------------
# Invoices
# ------------------------------------------------------------------------------

class PortalInvoiceDetailView(ClientOwnedObjectMixin, DetailView):
    """
    Invoice with bank details, a UPI link and the "I have paid" form.
    POST submits the payment reference for verification.
    """
    model = Invoice
    template_name = "portal/invoice_detail.html"
    context_object_name = "invoice"

    def get_object(self, queryset=None):
        invoice = super().get_object(queryset)
        # drafts are not visible to the client yet
        if invoice.status == Invoice.Status.DRAFT:
            raise PermissionDenied(_("You do not have access to this record."))
        return invoice

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        invoice = self.object
        details = BankDetails.from_settings()
        ctx["bank_details"] = details
        ctx["bank_details_text"] = format_bank_details(details)
        ctx["upi_link"] = upi_payment_link(invoice.total_amount, invoice.invoice_id, details)
        ctx["submissions"] = invoice.payment_submissions.all()
        ctx.setdefault("payment_form", PaymentSubmissionForm(invoice=invoice))
        return ctx

    def post(self, request, *args, **kwargs):
        self.object = self.get_object()
        form = PaymentSubmissionForm(request.POST, invoice=self.object)

        if form.is_valid():
            data = form.cleaned_data
            try:
                PaymentService.submit(
                    self.object,
                    method=data["method"],
                    amount=data["amount"],
                    reference=data["transaction_reference"],
                    payer_name=data["payer_name"],
                    remarks=data["remarks"],
                    submitted_by=request.user,
                )
            except ValidationError as exc:
                form.add_error(None, " ".join(exc.messages))
            else:
                messages.success(
                    request,
                    _("Thanks! We will verify your payment and update the invoice shortly."),
                )
                return redirect("portal:invoice_detail", pk=self.object.pk)

        return self.render_to_response(self.get_context_data(payment_form=form))


# ------------------------------------------------------------------------------
# Quotations
# ------------------------------------------------------------------------------

class PortalQuotationDetailView(ClientOwnedObjectMixin, DetailView):
    """
    Quotation with accept (typed signature) and reject forms.
    POST with decision=accept|reject.
    """
    model = Quotation
    template_name = "portal/quotation_detail.html"
    context_object_name = "quotation"

    def get_object(self, queryset=None):
        quotation = super().get_object(queryset)
        if quotation.status == Quotation.Status.DRAFT:
            raise PermissionDenied(_("You do not have access to this record."))
        return quotation

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        ctx.setdefault("accept_form", QuotationAcceptanceForm())
        ctx.setdefault("reject_form", QuotationRejectionForm())
        ctx["can_respond"] = (
            self.object.status == Quotation.Status.SENT and not self.object.is_expired
        )
        return ctx

    def post(self, request, *args, **kwargs):
        self.object = self.get_object()
        decision = request.POST.get("decision")

        if decision == "accept":
            form = QuotationAcceptanceForm(request.POST)
            extra = {"accept_form": form}
            if form.is_valid():
                try:
                    QuotationService.accept_quotation(
                        self.object,
                        signer_name=form.cleaned_data["signer_name"],
                        actor=request.user,
                    )
                except ValidationError as exc:
                    form.add_error(None, " ".join(exc.messages))
                else:
                    messages.success(request, _("Quotation accepted. We will be in touch shortly."))
                    return redirect("portal:quotation_detail", pk=self.object.pk)

        elif decision == "reject":
            form = QuotationRejectionForm(request.POST)
            extra = {"reject_form": form}
            if form.is_valid():
                try:
                    QuotationService.reject_quotation(
                        self.object,
                        reason=form.cleaned_data["reason"],
                        actor=request.user,
                    )
                except ValidationError as exc:
                    form.add_error(None, " ".join(exc.messages))
                else:
                    messages.info(request, _("Quotation declined. Thank you for letting us know."))
                    return redirect("portal:quotation_detail", pk=self.object.pk)
        else:
            messages.error(request, _("Unknown action."))
            return redirect("portal:quotation_detail", pk=self.object.pk)

        return self.render_to_response(self.get_context_data(**extra))
