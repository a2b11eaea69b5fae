from django.contrib import admin

from core.models import AuditLog, IdSequence


@admin.register(IdSequence)
class IdSequenceAdmin(admin.ModelAdmin):
    list_display = ("sequence_type", "scope_key", "fiscal_year", "current_value", "updated_at")
    list_filter = ("sequence_type", "fiscal_year")
    search_fields = ("scope_key",)

    # Counters move only through the numbering service.
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("created_at", "action", "actor", "message")
    list_filter = ("action",)
    search_fields = ("message",)
    readonly_fields = [field.name for field in AuditLog._meta.fields]
