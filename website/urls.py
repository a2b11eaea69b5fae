# website/urls.py
from django.urls import path

from .views import InquiryCreateView, InquiryThanksView

app_name = "website"

urlpatterns = [
    path("", InquiryCreateView.as_view(), name="inquiry"),
    path("thanks/", InquiryThanksView.as_view(), name="inquiry_thanks"),
]
