# testimony_core/moderation/selectors.py
from __future__ import annotations

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db.models import QuerySet

from testimony_core.posts.models import Post, PostStatus
from testimony_core.posts.selectors import search_filter, status_counts

STATUS_FILTERS = {"all", PostStatus.PENDING, PostStatus.APPROVED, PostStatus.REJECTED}


def _apply_status(qs: QuerySet[Post], status: str) -> QuerySet[Post]:
    if status not in STATUS_FILTERS:
        raise ValidationError({"status": "Use one of: all, pending, approved, rejected."})
    if status != "all":
        qs = qs.filter(status=status)
    return qs


def review_queue(*, status: str = PostStatus.PENDING, search: str = "") -> QuerySet[Post]:
    """
    Narrative posts for review; defaults to the pending queue.
    """
    qs = _apply_status(Post.objects.narrative(), status or PostStatus.PENDING)
    if search and search.strip():
        qs = qs.filter(search_filter(search))
    return qs.order_by("-created_at")


def land_mappings(*, status: str = "all", search: str = "") -> QuerySet[Post]:
    qs = _apply_status(Post.objects.coordinates(), status or "all")
    if search and search.strip():
        qs = qs.filter(search_filter(search))
    return qs.order_by("-created_at")


def moderation_summary() -> dict:
    counts = status_counts(Post.objects.all())
    return {
        "total_posts": counts["all"],
        "pending": counts[PostStatus.PENDING.value],
        "approved": counts[PostStatus.APPROVED.value],
        "rejected": counts[PostStatus.REJECTED.value],
        "coordinate_posts": Post.objects.coordinates().count(),
        "users": get_user_model().objects.count(),
    }
