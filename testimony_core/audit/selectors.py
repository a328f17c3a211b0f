# testimony_core/audit/selectors.py
from __future__ import annotations

from django.db.models import QuerySet

from testimony_core.audit.models import AuditLogEntry


def list_audit_entries() -> QuerySet[AuditLogEntry]:
    """
    Newest first. Request filters are applied by audit.api.filters.AuditLogEntryFilter.
    """
    return AuditLogEntry.objects.order_by("-timestamp")
