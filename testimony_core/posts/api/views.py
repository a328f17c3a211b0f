# testimony_core/posts/api/views.py
from __future__ import annotations

from django.core.exceptions import ValidationError as DjangoValidationError
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from testimony_core.common.api.exceptions import ConflictError, generic_not_found, to_drf_validation_error
from testimony_core.common.api.pagination import paginate
from testimony_core.iam.identity import request_identity
from testimony_core.posts.api.serializers import (
    CoordinateSubmitSerializer,
    NarrativeSubmitSerializer,
    PostEditSerializer,
    PostSerializer,
)
from testimony_core.posts.builders import build_coordinate_draft, build_narrative_draft
from testimony_core.posts.domain import TransitionNotAllowed
from testimony_core.posts.selectors import PostSelector
from testimony_core.posts.services import PostService
from testimony_core.posts.visibility import ClaimedIdentity, Viewer, can_view


def _validation(e: DjangoValidationError):
    if isinstance(e, TransitionNotAllowed):
        return ConflictError(" ".join(e.messages))
    return to_drf_validation_error(e)


class TestimonySubmitView(APIView):
    """
    Multipart narrative submission: fields + `file` (+ `audio_file` for image posts).
    """

    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser, JSONParser]

    @extend_schema(request=NarrativeSubmitSerializer, responses={201: PostSerializer}, tags=["Posts"])
    def post(self, request):
        s = NarrativeSubmitSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            draft = build_narrative_draft(
                post_type=data["type"],
                title=data.get("title", ""),
                description=data.get("description", ""),
                media=data.get("file"),
                audio=data.get("audio_file"),
                latitude=data.get("latitude"),
                longitude=data.get("longitude"),
            )
        except DjangoValidationError as e:
            raise _validation(e)

        post = PostService.submit_narrative(owner=request_identity(request), draft=draft)
        return Response(PostSerializer(post).data, status=status.HTTP_201_CREATED)


class CoordinateSubmitView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=CoordinateSubmitSerializer, responses={201: PostSerializer}, tags=["Posts"])
    def post(self, request):
        s = CoordinateSubmitSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            draft = build_coordinate_draft(
                coordinates=data["coordinates"],
                four_corners=data["four_corners"],
                title=data.get("title", ""),
                description=data.get("description", ""),
            )
        except DjangoValidationError as e:
            raise _validation(e)

        post = PostService.submit_coordinates(owner=request_identity(request), draft=draft)
        return Response(PostSerializer(post).data, status=status.HTTP_201_CREATED)


class PostViewSet(viewsets.ViewSet):
    """
    Single-post surface.
    - retrieve: anyone, gated by the viewer check (hidden == missing)
    - partial_update / destroy: owner only, pending only
    - mine: the caller's own posts with per-status counts
    """

    def get_permissions(self):
        if self.action == "retrieve":
            return [AllowAny()]
        return [IsAuthenticated()]

    def _viewer(self, request) -> Viewer:
        claimed = ClaimedIdentity(
            user_id=request.query_params.get("userId") or None,
            phone=request.query_params.get("userPhone") or "",
        )
        return Viewer(identity=request_identity(request), claimed=claimed)

    @extend_schema(
        parameters=[
            OpenApiParameter("userId", str, required=False),
            OpenApiParameter("userPhone", str, required=False),
        ],
        responses={200: PostSerializer},
        tags=["Posts"],
    )
    def retrieve(self, request, pk=None):
        try:
            post = PostSelector.get_post(post_id=pk)
        except PostSelector.NotFound:
            raise generic_not_found()

        if not can_view(post, self._viewer(request)):
            raise generic_not_found()

        return Response(PostSerializer(post).data)

    @extend_schema(request=PostEditSerializer, responses={200: PostSerializer}, tags=["Posts"])
    def partial_update(self, request, pk=None):
        s = PostEditSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            post = PostService.edit_post(actor=request_identity(request), post_id=pk, **s.validated_data)
        except PostService.NotFound:
            raise generic_not_found()
        except DjangoValidationError as e:
            raise _validation(e)

        return Response(PostSerializer(post).data, status=status.HTTP_200_OK)

    @extend_schema(responses={204: None}, tags=["Posts"])
    def destroy(self, request, pk=None):
        try:
            PostService.delete_own_post(actor=request_identity(request), post_id=pk)
        except PostService.NotFound:
            raise generic_not_found()
        except DjangoValidationError as e:
            raise _validation(e)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        parameters=[
            OpenApiParameter("status", str, required=False, enum=["all", "pending", "approved", "rejected"]),
            OpenApiParameter("search", str, required=False),
        ],
        responses={200: PostSerializer(many=True)},
        tags=["Posts"],
    )
    @action(detail=False, methods=["get"])
    def mine(self, request):
        try:
            qs, counts = PostSelector.mine(
                identity=request_identity(request),
                status=request.query_params.get("status", "all"),
                search=request.query_params.get("search", ""),
            )
        except DjangoValidationError as e:
            raise to_drf_validation_error(e)

        return paginate(request, qs, PostSerializer, extra={"counts": counts})


class FeedView(APIView):
    """
    Public feed of approved narrative posts.
    """

    permission_classes = [AllowAny]

    @extend_schema(
        parameters=[
            OpenApiParameter("type", str, required=False, enum=["all", "text", "image", "audio", "video"]),
            OpenApiParameter("search", str, required=False),
        ],
        responses={200: PostSerializer(many=True)},
        tags=["Posts"],
    )
    def get(self, request):
        try:
            qs = PostSelector.feed(
                post_type=request.query_params.get("type"),
                search=request.query_params.get("search", ""),
            )
        except DjangoValidationError as e:
            raise to_drf_validation_error(e)

        return paginate(request, qs, PostSerializer)
