# testimony_core/elearning/api/views.py
from __future__ import annotations

from django.core.exceptions import ValidationError as DjangoValidationError
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.exceptions import NotFound
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from testimony_core.common.api.exceptions import to_drf_validation_error
from testimony_core.common.api.pagination import paginate
from testimony_core.elearning.api.serializers import ELearningPostSerializer, ELearningWriteSerializer
from testimony_core.elearning.selectors import ELearningSelector
from testimony_core.elearning.services import ELearningService
from testimony_core.iam.identity import request_identity
from testimony_core.iam.permissions import IsAdminMember


class ELearningViewSet(viewsets.ViewSet):
    """
    Reads are public; writes require admin membership.
    """

    parser_classes = [MultiPartParser, FormParser, JSONParser]

    def get_permissions(self):
        if self.action in {"list", "retrieve"}:
            return [AllowAny()]
        return [IsAdminMember()]

    @extend_schema(
        parameters=[OpenApiParameter("search", str, required=False), OpenApiParameter("type", str, required=False)],
        responses={200: ELearningPostSerializer(many=True)},
        tags=["E-learning"],
    )
    def list(self, request):
        qs = ELearningSelector.list(
            search=request.query_params.get("search", ""),
            post_type=request.query_params.get("type", ""),
        )
        return paginate(request, qs, ELearningPostSerializer)

    @extend_schema(responses={200: ELearningPostSerializer}, tags=["E-learning"])
    def retrieve(self, request, pk=None):
        try:
            post = ELearningSelector.get(post_id=pk)
        except ELearningSelector.NotFound:
            raise NotFound("E-learning post not found.")
        return Response(ELearningPostSerializer(post).data)

    @extend_schema(request=ELearningWriteSerializer, responses={201: ELearningPostSerializer}, tags=["E-learning"])
    def create(self, request):
        s = ELearningWriteSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            post = ELearningService.create(
                actor=request_identity(request),
                title=data.get("title", ""),
                description=data.get("description", ""),
                post_type=data.get("type", "text"),
                media=data.get("file"),
            )
        except DjangoValidationError as e:
            raise to_drf_validation_error(e)

        return Response(ELearningPostSerializer(post).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=ELearningWriteSerializer, responses={200: ELearningPostSerializer}, tags=["E-learning"])
    def partial_update(self, request, pk=None):
        s = ELearningWriteSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            post = ELearningService.update(
                actor=request_identity(request),
                post_id=pk,
                title=data.get("title"),
                description=data.get("description"),
                post_type=data.get("type"),
                media=data.get("file"),
            )
        except ELearningService.NotFound:
            raise NotFound("E-learning post not found.")
        except DjangoValidationError as e:
            raise to_drf_validation_error(e)

        return Response(ELearningPostSerializer(post).data, status=status.HTTP_200_OK)

    @extend_schema(responses={204: None}, tags=["E-learning"])
    def destroy(self, request, pk=None):
        try:
            ELearningService.delete(actor=request_identity(request), post_id=pk)
        except ELearningService.NotFound:
            raise NotFound("E-learning post not found.")

        return Response(status=status.HTTP_204_NO_CONTENT)
