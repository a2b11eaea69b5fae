from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("accounts/", include("django.contrib.auth.urls")),
    path("", include("website.urls")),
    path("clients/", include("clients.urls")),
    path("accounting/", include("accounting.urls")),
    path("payments/", include("payments.urls")),
    path("portal/", include("portal.urls")),
]
