# testimony_core/audit/api/filters.py
from __future__ import annotations

import django_filters
from django.db.models import Q

from testimony_core.audit.models import AuditAction, AuditLogEntry, AuditTargetType


class AuditLogEntryFilter(django_filters.FilterSet):
    action = django_filters.ChoiceFilter(choices=AuditAction.choices)
    target_type = django_filters.ChoiceFilter(choices=AuditTargetType.choices)
    target_id = django_filters.CharFilter()
    actor_user_id = django_filters.NumberFilter(field_name="actor_user_id")
    since = django_filters.IsoDateTimeFilter(field_name="timestamp", lookup_expr="gte")
    until = django_filters.IsoDateTimeFilter(field_name="timestamp", lookup_expr="lte")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = AuditLogEntry
        fields = ["action", "target_type", "target_id"]

    def filter_search(self, queryset, name, value):
        value = (value or "").strip()
        if not value:
            return queryset
        # details is JSON; match on its text form
        return queryset.filter(
            Q(target_id__icontains=value)
            | Q(actor_phone__icontains=value)
            | Q(actor_email__icontains=value)
            | Q(details__icontains=value)
        )
