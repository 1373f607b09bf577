from django.contrib import admin

from study_hub.audit.models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ["created_at", "action", "actor", "model_name", "record_id"]
    list_filter = ["action", "model_name"]
    search_fields = ["message"]
    readonly_fields = [f.name for f in AuditLog._meta.fields]  # noqa: SLF001
