# website/admin.py
from django.contrib import admin

from .models import Inquiry


@admin.register(Inquiry)
class InquiryAdmin(admin.ModelAdmin):
    list_display = ("company_name", "contact_name", "email", "service_interest", "status", "created_at")
    list_filter = ("status", "service_interest")
    search_fields = ("company_name", "contact_name", "email")
    readonly_fields = ("converted_client", "created_at", "updated_at")
