# testimony_core/iam/api/me.py

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from testimony_core.iam.api.schema_serializers import MeResponseSerializer
from testimony_core.iam.identity import request_identity
from testimony_core.iam.models import UserProfile


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: MeResponseSerializer}, tags=["IAM"])
    def get(self, request):
        """
        Returns the session identity plus the derived admin capability.
        """
        identity = request_identity(request)
        profile = UserProfile.objects.filter(user_id=request.user.id).first()

        return Response(
            {
                "user": {
                    "id": request.user.id,
                    "username": getattr(request.user, "username", None),
                    "email": identity.email,
                    "phone": identity.phone,
                    "first_name": profile.first_name if profile else request.user.first_name,
                    "last_name": profile.last_name if profile else request.user.last_name,
                },
                "is_admin": identity.is_admin,
            },
            status=status.HTTP_200_OK,
        )
