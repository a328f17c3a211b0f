# testimony_core/audit/api/views.py
from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import mixins, viewsets

from testimony_core.audit.api.filters import AuditLogEntryFilter
from testimony_core.audit.api.serializers import AuditLogEntrySerializer
from testimony_core.audit.models import AuditLogEntry
from testimony_core.audit.selectors import list_audit_entries
from testimony_core.common.api.pagination import DefaultPagination
from testimony_core.iam.permissions import IsAdminMember


@extend_schema(tags=["Audit"])
class AuditLogViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    Read-only audit trail, newest first. Admin membership required.
    """

    permission_classes = [IsAdminMember]
    serializer_class = AuditLogEntrySerializer
    pagination_class = DefaultPagination
    filter_backends = [DjangoFilterBackend]
    filterset_class = AuditLogEntryFilter
    queryset = AuditLogEntry.objects.none()

    def get_queryset(self):
        return list_audit_entries()
