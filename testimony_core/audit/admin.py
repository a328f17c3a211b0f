# testimony_core/audit/admin.py
from django.contrib import admin

from testimony_core.audit.models import AuditLogEntry
from testimony_core.common.admin import ReadOnlyAdminMixin


@admin.register(AuditLogEntry)
class AuditLogEntryAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = (
        "timestamp",
        "action",
        "target_type",
        "target_id",
        "actor_user_id",
        "actor_phone",
    )
    list_filter = ("action", "target_type")
    search_fields = ("target_id", "actor_email", "actor_phone")
    ordering = ("-timestamp",)
