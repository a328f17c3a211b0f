# testimony_core/iam/api/auth.py

from __future__ import annotations

from datetime import timedelta
from typing import Any

from django.conf import settings
from django.contrib.auth import authenticate
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed, NotFound, ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.serializers import TokenRefreshSerializer

from testimony_core.common.phone import normalize_phone
from testimony_core.iam.api.schema_serializers import (
    DetailResponseSerializer,
    LoginRequestSerializer,
    PhoneLoginRequestSerializer,
    RefreshRequestSerializer,
    TokenPairResponseSerializer,
)
from testimony_core.iam.services.sessions import IdentityNotFound, find_identity_by_phone, issue_session_tokens


def _seconds(value: Any) -> int:
    """
    Convert a JWT lifetime setting into seconds.
    Supports timedelta OR int/float (already seconds).
    """
    if isinstance(value, timedelta):
        return int(value.total_seconds())
    try:
        return int(value)
    except (TypeError, ValueError):
        # 0 means "session cookie"
        return 0


def _set_auth_cookies(response: Response, *, access: str, refresh: str) -> None:
    jwt_cfg = getattr(settings, "SIMPLE_JWT", {}) or {}

    access_name = jwt_cfg.get("AUTH_COOKIE", "tv_access")
    refresh_name = jwt_cfg.get("AUTH_COOKIE_REFRESH", "tv_refresh")

    access_lifetime = _seconds(jwt_cfg.get("ACCESS_TOKEN_LIFETIME", timedelta(minutes=30)))
    refresh_lifetime = _seconds(jwt_cfg.get("REFRESH_TOKEN_LIFETIME", timedelta(days=1)))

    secure = bool(jwt_cfg.get("AUTH_COOKIE_SECURE", False))
    samesite = jwt_cfg.get("AUTH_COOKIE_SAMESITE", "Lax")

    response.set_cookie(
        access_name,
        access,
        max_age=access_lifetime,
        httponly=True,
        secure=secure,
        samesite=samesite,
        path="/",
    )
    response.set_cookie(
        refresh_name,
        refresh,
        max_age=refresh_lifetime,
        httponly=True,
        secure=secure,
        samesite=samesite,
        path="/",
    )


def _clear_auth_cookies(response: Response) -> None:
    jwt_cfg = getattr(settings, "SIMPLE_JWT", {}) or {}
    response.delete_cookie(jwt_cfg.get("AUTH_COOKIE", "tv_access"), path="/")
    response.delete_cookie(jwt_cfg.get("AUTH_COOKIE_REFRESH", "tv_refresh"), path="/")


def _token_response(user, detail: str) -> Response:
    tokens = issue_session_tokens(user)
    res = Response(
        {"detail": detail, "access": tokens.access, "refresh": tokens.refresh},
        status=status.HTTP_200_OK,
    )
    _set_auth_cookies(res, access=tokens.access, refresh=tokens.refresh)
    return res


class PhoneLoginView(APIView):
    """
    Exchange a phone number for a session, only for an existing active account.
    Unknown numbers get 404; no identity is ever created here.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        request=PhoneLoginRequestSerializer,
        responses={200: TokenPairResponseSerializer},
        tags=["IAM"],
    )
    def post(self, request):
        if not getattr(settings, "PHONE_LOGIN_ENABLED", True):
            raise NotFound("Phone login is disabled.")

        serializer = PhoneLoginRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            user = find_identity_by_phone(serializer.validated_data["phone"])
        except IdentityNotFound:
            raise NotFound("No account found for this phone number. Please contact an administrator.")

        return _token_response(user, "login ok")


class LoginView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get_authenticate_header(self, request):
        # bad credentials answer 401, which DRF only keeps when a challenge header exists
        return 'Bearer realm="api"'

    @extend_schema(
        request=LoginRequestSerializer,
        responses={200: TokenPairResponseSerializer},
        tags=["IAM"],
    )
    def post(self, request):
        serializer = LoginRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        username = normalize_phone(serializer.validated_data["phone"])
        if not username:
            raise ValidationError({"phone": "Enter a valid phone number."})

        user = authenticate(request, username=username, password=serializer.validated_data["password"])
        if user is None:
            raise AuthenticationFailed("Invalid phone number or password.")

        return _token_response(user, "login ok")


class RefreshView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get_authenticate_header(self, request):
        return 'Bearer realm="api"'

    @extend_schema(
        request=RefreshRequestSerializer,
        responses={200: TokenPairResponseSerializer},
        tags=["IAM"],
    )
    def post(self, request):
        jwt_cfg = getattr(settings, "SIMPLE_JWT", {}) or {}
        refresh_cookie_name = jwt_cfg.get("AUTH_COOKIE_REFRESH", "tv_refresh")
        refresh = request.data.get("refresh") or request.COOKIES.get(refresh_cookie_name)

        serializer = TokenRefreshSerializer(data={"refresh": refresh})
        try:
            serializer.is_valid(raise_exception=True)
        except TokenError as e:
            raise InvalidToken(e.args[0]) from e

        access = serializer.validated_data["access"]
        new_refresh = serializer.validated_data.get("refresh", refresh)

        res = Response({"detail": "refreshed", "access": access, "refresh": new_refresh}, status=status.HTTP_200_OK)
        _set_auth_cookies(res, access=access, refresh=new_refresh)
        return res


class LogoutView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        request=None,
        responses={200: DetailResponseSerializer},
        tags=["IAM"],
    )
    def post(self, request):
        res = Response({"detail": "logged out"}, status=status.HTTP_200_OK)
        _clear_auth_cookies(res)
        return res
