# testimony_core/iam/services/sessions.py
from __future__ import annotations

from dataclasses import dataclass

from django.conf import settings
from django.contrib.auth.models import update_last_login
from rest_framework_simplejwt.tokens import RefreshToken

from testimony_core.common.phone import normalize_phone
from testimony_core.iam.models import UserProfile


class IdentityNotFound(Exception):
    pass


@dataclass(frozen=True)
class SessionTokens:
    access: str
    refresh: str


def issue_session_tokens(user) -> SessionTokens:
    """
    Exchange a verified identity for an access/refresh pair.
    The normalized phone travels as a claim for clients; the server always
    re-reads it from the profile.
    """
    refresh = RefreshToken.for_user(user)
    phone = UserProfile.objects.filter(user_id=user.id).values_list("phone", flat=True).first() or ""
    refresh["phone_number"] = phone

    if (getattr(settings, "SIMPLE_JWT", {}) or {}).get("UPDATE_LAST_LOGIN", False):
        update_last_login(None, user)

    return SessionTokens(access=str(refresh.access_token), refresh=str(refresh))


def find_identity_by_phone(phone: str):
    """
    Phone login never creates identities: an active profile must already exist.
    """
    normalized = normalize_phone(phone)
    if not normalized:
        raise IdentityNotFound()

    profile = (
        UserProfile.objects.select_related("user")
        .filter(phone=normalized, is_active=True, user__is_active=True)
        .first()
    )
    if profile is None:
        raise IdentityNotFound()
    return profile.user
