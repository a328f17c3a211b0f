# testimony_core/iam/identity.py
from __future__ import annotations

from dataclasses import dataclass

from testimony_core.common.phone import normalize_phone
from testimony_core.iam.models import UserProfile
from testimony_core.iam.services.membership import is_admin_member

_REQUEST_ATTR = "_tv_identity"


@dataclass(frozen=True)
class Identity:
    """
    Verified session identity, passed explicitly into services and the viewer gate.
    `is_admin` is derived from admin membership at resolution time, never stored on the user.
    """
    user_id: int
    phone: str = ""
    email: str | None = None
    is_admin: bool = False


def identity_for_user(user) -> Identity | None:
    if not user or not getattr(user, "is_authenticated", False):
        return None

    email = getattr(user, "email", None) or None
    try:
        profile = UserProfile.objects.get(user_id=user.id)
    except UserProfile.DoesNotExist:
        profile = None

    # accounts created outside user administration (e.g. createsuperuser) have no profile/phone
    phone = ""
    if profile is not None:
        phone = normalize_phone(profile.phone)
        email = profile.email or email

    return Identity(
        user_id=user.id,
        phone=phone,
        email=email,
        is_admin=is_admin_member(user.id),
    )


def request_identity(request) -> Identity | None:
    """
    Resolve the request's identity once and cache it on the request.
    """
    if hasattr(request, _REQUEST_ATTR):
        return getattr(request, _REQUEST_ATTR)

    identity = identity_for_user(getattr(request, "user", None))
    setattr(request, _REQUEST_ATTR, identity)
    return identity
