# accounting/views.py
from django.http import HttpResponse
from django.utils import timezone
from django.views import View

from clients.models import Client
from core.permissions import StaffOrManagerRequiredMixin

from .exports import XLSX_CONTENT_TYPE, export_invoices_xlsx
from .models import Invoice


class InvoiceExportView(StaffOrManagerRequiredMixin, View):
    """
    Download invoices as .xlsx.
    Optional filters: ?status=sent&fy=2425
    Managers only get the invoices of their own clients.
    """

    def get(self, request, *args, **kwargs):
        qs = (
            Invoice.objects.filter(client__in=Client.objects.visible_to(request.user))
            .select_related("client")
            .order_by("issue_date", "id")
        )

        status = request.GET.get("status", "").strip()
        if status in Invoice.Status.values:
            qs = qs.filter(status=status)

        fy = request.GET.get("fy", "").strip()
        if fy:
            qs = qs.in_financial_year(fy)

        filename = f"invoices_{timezone.localdate():%Y%m%d}.xlsx"
        response = HttpResponse(export_invoices_xlsx(qs), content_type=XLSX_CONTENT_TYPE)
        response["Content-Disposition"] = f'attachment; filename="{filename}"'
        return response
