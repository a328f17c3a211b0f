# testimony_core/iam/selectors.py
from __future__ import annotations

from django.db.models import Exists, OuterRef, Q, QuerySet

from testimony_core.iam.models import AdminMembership, UserProfile


def list_users(*, search: str = "", admins_only: bool = False) -> QuerySet[UserProfile]:
    """
    Profiles annotated with the derived `is_admin` capability.
    """
    qs = UserProfile.objects.select_related("user").annotate(
        is_admin=Exists(AdminMembership.objects.filter(user_id=OuterRef("user_id")))
    )

    search = (search or "").strip()
    if search:
        qs = qs.filter(
            Q(first_name__icontains=search)
            | Q(last_name__icontains=search)
            | Q(email__icontains=search)
            | Q(phone__icontains=search)
        )

    if admins_only:
        qs = qs.filter(is_admin=True)

    return qs.order_by("-created_at")
