# testimony_core/iam/permissions.py
from __future__ import annotations

from rest_framework.permissions import BasePermission

from testimony_core.iam.identity import request_identity


class IsAdminMember(BasePermission):
    """
    Admin surfaces: authenticated AND holds an admin membership record.
    Re-verified server-side on every request; client-supplied flags are ignored.
    Unauthenticated -> 401, authenticated non-admin -> 403.
    """

    message = "Admin privileges required."

    def has_permission(self, request, view) -> bool:
        user = request.user
        if not user or not getattr(user, "is_authenticated", False):
            return False

        identity = request_identity(request)
        return bool(identity and identity.is_admin)

    def has_object_permission(self, request, view, obj) -> bool:
        return self.has_permission(request, view)
