# accounting/urls.py
from django.urls import path

from . import views

app_name = "accounting"

urlpatterns = [
    path("invoices/export/", views.InvoiceExportView.as_view(), name="invoice_export"),
]
