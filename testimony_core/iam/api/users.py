# testimony_core/iam/api/users.py
from __future__ import annotations

from django.core.exceptions import ValidationError as DjangoValidationError
from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from testimony_core.common.api.exceptions import ConflictError, to_drf_validation_error
from testimony_core.common.api.pagination import paginate
from testimony_core.iam.api.serializers import CreateUserSerializer, ResetPasswordSerializer, UserProfileSerializer
from testimony_core.iam.identity import request_identity
from testimony_core.iam.permissions import IsAdminMember
from testimony_core.iam.selectors import list_users
from testimony_core.iam.services.users import UserService


class AdminUserViewSet(viewsets.ViewSet):
    """
    Privileged user administration. Every call re-verifies admin membership.
    Lookup is by auth user id.
    """

    permission_classes = [IsAdminMember]

    def _run(self, fn, **kwargs):
        try:
            return fn(actor=request_identity(self.request), **kwargs)
        except UserService.NotFound:
            raise NotFound("User not found.")
        except UserService.Conflict as e:
            raise ConflictError(str(e))
        except DjangoValidationError as e:
            raise to_drf_validation_error(e)

    @extend_schema(responses={200: UserProfileSerializer(many=True)}, tags=["Admin users"])
    def list(self, request):
        qs = list_users(
            search=request.query_params.get("search", ""),
            admins_only=request.query_params.get("role") == "admin",
        )
        return paginate(request, qs, UserProfileSerializer)

    @extend_schema(request=CreateUserSerializer, responses={201: UserProfileSerializer}, tags=["Admin users"])
    def create(self, request):
        s = CreateUserSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        profile = self._run(UserService.create_user, **s.validated_data)
        return Response(UserProfileSerializer(profile).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={204: None}, tags=["Admin users"])
    def destroy(self, request, pk=None):
        self._run(UserService.delete_user, user_id=pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=ResetPasswordSerializer, responses={200: None}, tags=["Admin users"])
    @action(detail=True, methods=["post"], url_path="reset-password")
    def reset_password(self, request, pk=None):
        s = ResetPasswordSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        self._run(UserService.reset_password, user_id=pk, new_password=s.validated_data["new_password"])
        return Response({"detail": "Password reset successfully."}, status=status.HTTP_200_OK)

    @extend_schema(request=None, responses={200: None}, tags=["Admin users"])
    @action(detail=True, methods=["post"])
    def promote(self, request, pk=None):
        self._run(UserService.promote_admin, user_id=pk)
        return Response({"detail": "User promoted to admin.", "is_admin": True}, status=status.HTTP_200_OK)

    @extend_schema(request=None, responses={200: None}, tags=["Admin users"])
    @action(detail=True, methods=["post"])
    def demote(self, request, pk=None):
        self._run(UserService.demote_admin, user_id=pk)
        return Response({"detail": "Admin access removed.", "is_admin": False}, status=status.HTTP_200_OK)
