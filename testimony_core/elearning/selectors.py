# testimony_core/elearning/selectors.py
from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db.models import Q, QuerySet

from testimony_core.elearning.models import ELearningPost


class ELearningSelector:
    class NotFound(Exception):
        pass

    @staticmethod
    def get(*, post_id) -> ELearningPost:
        try:
            return ELearningPost.objects.get(pk=post_id)
        except (ELearningPost.DoesNotExist, ValidationError, ValueError):
            raise ELearningSelector.NotFound()

    @staticmethod
    def list(*, search: str = "", post_type: str = "") -> QuerySet[ELearningPost]:
        qs = ELearningPost.objects.all()
        search = (search or "").strip()
        if search:
            qs = qs.filter(Q(title__icontains=search) | Q(description__icontains=search))
        if post_type and post_type != "all":
            qs = qs.filter(type=post_type)
        return qs.order_by("-created_at")
