# payments/urls.py
from django.urls import path

from . import views

app_name = "payments"

urlpatterns = [
    path("pending/", views.PendingPaymentListView.as_view(), name="pending_list"),
    path("<int:pk>/review/", views.PaymentReviewView.as_view(), name="review"),
]
