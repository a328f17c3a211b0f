# testimony_core/iam/auth.py

from __future__ import annotations

from django.conf import settings
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication

from testimony_core.iam.models import UserProfile


def _access_cookie_name() -> str:
    return (getattr(settings, "SIMPLE_JWT", {}) or {}).get("AUTH_COOKIE", "tv_access")


class CookieOrHeaderJWTAuthentication(JWTAuthentication):
    """
    verify_session(token): resolves the bearer of a valid access token.

    Token sources, in order:
      1) Authorization: Bearer <access>
      2) the HttpOnly access cookie set by the login views

    A token stays cryptographically valid until it expires, so a profile
    deactivated by an administrator is refused here on every request.
    Accounts without a profile (Django superusers) pass through.
    """

    def authenticate(self, request):
        if self.get_header(request):
            result = super().authenticate(request)
        else:
            raw_token = request.COOKIES.get(_access_cookie_name())
            if not raw_token:
                return None
            validated_token = self.get_validated_token(raw_token)
            result = (self.get_user(validated_token), validated_token)

        if result is None:
            return None

        user, token = result
        self._ensure_active_profile(user)
        return user, token

    @staticmethod
    def _ensure_active_profile(user) -> None:
        if UserProfile.objects.filter(user_id=user.id, is_active=False).exists():
            raise AuthenticationFailed("This account has been deactivated.", code="user_inactive")
