# testimony_core/iam/services/membership.py
from __future__ import annotations

from testimony_core.iam.models import AdminMembership


def is_admin_member(user_id: int | None) -> bool:
    """
    Single source of truth for admin capability: presence of a membership record.
    """
    if not user_id:
        return False
    return AdminMembership.objects.filter(user_id=user_id).exists()


def admin_user_ids(user_ids) -> set[int]:
    return set(AdminMembership.objects.filter(user_id__in=list(user_ids)).values_list("user_id", flat=True))


def grant_admin(*, user_id: int, added_by_id: int | None) -> bool:
    """
    Returns True if a membership was created, False if it already existed.
    """
    _, created = AdminMembership.objects.get_or_create(user_id=user_id, defaults={"added_by_id": added_by_id})
    return created


def revoke_admin(*, user_id: int) -> bool:
    """
    Returns True if a membership was removed.
    """
    deleted, _ = AdminMembership.objects.filter(user_id=user_id).delete()
    return deleted > 0
