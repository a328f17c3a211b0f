# testimony_core/iam/openapi.py
from __future__ import annotations

from django.conf import settings
from drf_spectacular.extensions import OpenApiAuthenticationExtension


def _cookie_names() -> tuple[str, str]:
    jwt_cfg = getattr(settings, "SIMPLE_JWT", {}) or {}
    return jwt_cfg.get("AUTH_COOKIE", "tv_access"), jwt_cfg.get("AUTH_COOKIE_REFRESH", "tv_refresh")


class CookieOrHeaderJWTAuthenticationScheme(OpenApiAuthenticationExtension):
    """
    Registered through IamConfig.ready(). Swagger's "Authorize" button only
    speaks Bearer, so the scheme is declared as http/bearer and the cookie
    path is described in text.
    """

    target_class = "testimony_core.iam.auth.CookieOrHeaderJWTAuthentication"
    name = "BearerOrCookieJWT"

    def get_security_definition(self, auto_schema):
        access_cookie, refresh_cookie = _cookie_names()
        return {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
            "description": (
                "Obtain tokens from `auth/phone-login/` or `auth/login/`. "
                "Send the access token as `Authorization: Bearer <token>`, or rely on the "
                f"HttpOnly `{access_cookie}` cookie those endpoints set. "
                f"`auth/refresh/` accepts the refresh token in the body or the `{refresh_cookie}` cookie. "
                "Deactivated accounts are refused even with an unexpired token."
            ),
        }
