# testimony_core/posts/selectors.py
from __future__ import annotations

import uuid
from typing import Dict, Optional

from django.core.exceptions import ValidationError
from django.db.models import Count, F, Q, QuerySet, Value
from django.db.models.functions import Replace

from testimony_core.common.phone import phone_digit_forms
from testimony_core.iam.identity import Identity
from testimony_core.posts.models import NARRATIVE_TYPES, Post, PostStatus
from testimony_core.posts.visibility import LEGACY_NAME_PREFIX

STATUS_TABS = {"all", PostStatus.PENDING, PostStatus.APPROVED, PostStatus.REJECTED}
PHONE_SEPARATORS = (" ", "-", "(", ")", ".", "+")


def _without_separators(field: str):
    expr = F(field)
    for ch in PHONE_SEPARATORS:
        expr = Replace(expr, Value(ch), Value(""))
    return expr


def search_filter(term: str) -> Q:
    """
    Free-text match over title, description, owner name/phone, place names and id.
    """
    term = (term or "").strip()
    q = (
        Q(title__icontains=term)
        | Q(description__icontains=term)
        | Q(owner_name__icontains=term)
        | Q(owner_phone__icontains=term)
        | Q(location__place_name__icontains=term)
        | Q(coordinates__place_name__icontains=term)
    )
    try:
        q |= Q(id=uuid.UUID(term))
    except ValueError:
        pass
    return q


def status_counts(qs: QuerySet[Post]) -> Dict[str, int]:
    rows = qs.order_by().values("status").annotate(n=Count("id"))
    counts = {s.value: 0 for s in PostStatus}
    for row in rows:
        counts[row["status"]] = row["n"]
    counts["all"] = sum(counts[s.value] for s in PostStatus)
    return counts


class PostSelector:
    class NotFound(Exception):
        pass

    @staticmethod
    def get_post(*, post_id) -> Post:
        try:
            return Post.objects.get(pk=post_id)
        except (Post.DoesNotExist, ValidationError, ValueError):
            raise PostSelector.NotFound()

    @staticmethod
    def feed(*, post_type: Optional[str] = None, search: str = "") -> QuerySet[Post]:
        """
        Public feed: approved narrative posts, newest first.
        """
        qs = Post.objects.approved().narrative()

        if post_type and post_type != "all":
            if post_type not in NARRATIVE_TYPES:
                raise ValidationError({"type": f"Unsupported post type '{post_type}'."})
            qs = qs.filter(type=post_type)

        if search and search.strip():
            qs = qs.filter(search_filter(search))

        return qs.order_by("-created_at")

    @staticmethod
    def owned_by(identity: Identity) -> QuerySet[Post]:
        """
        Same ownership rules as the viewer gate: user id, or any stored phone
        field (including the legacy "User <phone>" name) in any spelling.
        """
        q = Q(owner_user_id=identity.user_id)
        forms = phone_digit_forms(identity.phone)
        if not forms:
            return Post.objects.filter(q)

        legacy_names = {LEGACY_NAME_PREFIX.strip() + f for f in forms}
        qs = Post.objects.alias(
            owner_phone_digits=_without_separators("owner_phone"),
            contact_phone_digits=_without_separators("contact_phone"),
            owner_name_compact=_without_separators("owner_name"),
        )
        q |= (
            Q(owner_phone_digits__in=sorted(forms))
            | Q(contact_phone_digits__in=sorted(forms))
            | Q(owner_name_compact__in=sorted(legacy_names))
        )
        return qs.filter(q)

    @staticmethod
    def mine(*, identity: Identity, status: str = "all", search: str = "") -> tuple[QuerySet[Post], Dict[str, int]]:
        """
        Owner dashboard. Returns (page queryset, per-status counts over all own posts).
        """
        status = status or "all"
        if status not in STATUS_TABS:
            raise ValidationError({"status": "Use one of: all, pending, approved, rejected."})

        base = PostSelector.owned_by(identity)
        counts = status_counts(base)

        qs = base
        if status != "all":
            qs = qs.filter(status=status)
        if search and search.strip():
            qs = qs.filter(search_filter(search))

        return qs.order_by("-created_at"), counts
