# portal/urls.py
from django.urls import path

from . import views

app_name = "portal"

urlpatterns = [
    path("", views.PortalDashboardView.as_view(), name="dashboard"),
    path("invoices/<int:pk>/", views.PortalInvoiceDetailView.as_view(), name="invoice_detail"),
    path("quotations/<int:pk>/", views.PortalQuotationDetailView.as_view(), name="quotation_detail"),
]
