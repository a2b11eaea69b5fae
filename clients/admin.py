# clients/admin.py
from django.contrib import admin

from .models import Client, Project


class ProjectInline(admin.TabularInline):
    model = Project
    extra = 0
    fields = ("title", "status")


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ("client_id", "company_name", "contact_email", "country", "manager", "is_active")
    list_filter = ("is_active", "project_code", "platform_code", "country")
    search_fields = ("client_id", "company_name", "contact_email")
    readonly_fields = ("client_id", "year_hex", "client_sequence_number", "created_at", "updated_at")
    inlines = [ProjectInline]


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ("title", "client", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("title", "client__company_name", "client__client_id")
