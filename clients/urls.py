# clients/urls.py
from django.urls import path

from . import views

app_name = "clients"

urlpatterns = [
    path("", views.ClientListView.as_view(), name="client_list"),
    path("new/", views.ClientCreateView.as_view(), name="client_create"),
    path(
        "inquiries/<int:pk>/convert/",
        views.InquiryConvertView.as_view(),
        name="inquiry_convert",
    ),
]
