# testimony_core/common/admin.py
from __future__ import annotations


class ReadOnlyAdminMixin:
    """
    Django admin as a viewer only. Every write to these models goes through a
    service that enforces the lifecycle rules and emits the audit entry.
    """

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
