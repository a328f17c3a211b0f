# testimony_core/moderation/api/views.py
from __future__ import annotations

from django.core.exceptions import ValidationError as DjangoValidationError
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from testimony_core.common.api.exceptions import ConflictError, generic_not_found, to_drf_validation_error
from testimony_core.common.api.pagination import paginate
from testimony_core.iam.identity import request_identity
from testimony_core.iam.permissions import IsAdminMember
from testimony_core.moderation.api.serializers import ModerationSummarySerializer, RejectSerializer
from testimony_core.moderation.selectors import land_mappings, moderation_summary, review_queue
from testimony_core.moderation.services import ModerationService
from testimony_core.posts.api.serializers import PostSerializer
from testimony_core.posts.domain import TransitionNotAllowed
from testimony_core.posts.selectors import PostSelector

_LIST_PARAMS = [
    OpenApiParameter("status", str, required=False, enum=["all", "pending", "approved", "rejected"]),
    OpenApiParameter("search", str, required=False),
]


class ModerationPostViewSet(viewsets.ViewSet):
    """
    Admin review console for posts (narrative listing; decisions apply to any post type).
    """

    permission_classes = [IsAdminMember]

    def _run(self, fn, **kwargs):
        try:
            return fn(actor=request_identity(self.request), **kwargs)
        except ModerationService.NotFound:
            raise generic_not_found()
        except TransitionNotAllowed as e:
            raise ConflictError(" ".join(e.messages))
        except DjangoValidationError as e:
            raise to_drf_validation_error(e)

    @extend_schema(parameters=_LIST_PARAMS, responses={200: PostSerializer(many=True)}, tags=["Moderation"])
    def list(self, request):
        try:
            qs = review_queue(
                status=request.query_params.get("status", "pending"),
                search=request.query_params.get("search", ""),
            )
        except DjangoValidationError as e:
            raise to_drf_validation_error(e)
        return paginate(request, qs, PostSerializer)

    @extend_schema(responses={200: PostSerializer}, tags=["Moderation"])
    def retrieve(self, request, pk=None):
        try:
            post = PostSelector.get_post(post_id=pk)
        except PostSelector.NotFound:
            raise generic_not_found()
        return Response(PostSerializer(post).data)

    @extend_schema(request=None, responses={200: PostSerializer}, tags=["Moderation"])
    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):
        post = self._run(ModerationService.approve_post, post_id=pk)
        return Response(PostSerializer(post).data, status=status.HTTP_200_OK)

    @extend_schema(request=RejectSerializer, responses={200: PostSerializer}, tags=["Moderation"])
    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):
        s = RejectSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        post = self._run(ModerationService.reject_post, post_id=pk, reason=s.validated_data["reason"])
        return Response(PostSerializer(post).data, status=status.HTTP_200_OK)

    @extend_schema(responses={204: None}, tags=["Moderation"])
    def destroy(self, request, pk=None):
        self._run(ModerationService.delete_post, post_id=pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


class LandMappingViewSet(viewsets.ViewSet):
    permission_classes = [IsAdminMember]

    @extend_schema(parameters=_LIST_PARAMS, responses={200: PostSerializer(many=True)}, tags=["Moderation"])
    def list(self, request):
        try:
            qs = land_mappings(
                status=request.query_params.get("status", "all"),
                search=request.query_params.get("search", ""),
            )
        except DjangoValidationError as e:
            raise to_drf_validation_error(e)
        return paginate(request, qs, PostSerializer)

    @extend_schema(responses={204: None}, tags=["Moderation"])
    def destroy(self, request, pk=None):
        try:
            ModerationService.delete_land_mapping(actor=request_identity(request), post_id=pk)
        except ModerationService.NotFound:
            raise generic_not_found()
        return Response(status=status.HTTP_204_NO_CONTENT)


class ModerationSummaryView(APIView):
    permission_classes = [IsAdminMember]

    @extend_schema(responses={200: ModerationSummarySerializer}, tags=["Moderation"])
    def get(self, request):
        return Response(moderation_summary(), status=status.HTTP_200_OK)
