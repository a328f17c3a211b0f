# testimony_core/elearning/services.py
from __future__ import annotations

import logging
from typing import Optional

from django.core.exceptions import ValidationError
from django.db import transaction

from testimony_core.audit.models import AuditAction, AuditTargetType
from testimony_core.audit.services import AuditService
from testimony_core.common.media import StoredBlob, build_blob_path, discard_blobs, upload_blob
from testimony_core.elearning.models import ELearningPost, ELearningType
from testimony_core.elearning.selectors import ELearningSelector
from testimony_core.iam.identity import Identity

logger = logging.getLogger(__name__)

BLOB_PREFIX = "elearning"


class ELearningService:
    """
    Admin-only authoring. Each create/update/delete emits one audit entry.
    """

    NotFound = ELearningSelector.NotFound

    @staticmethod
    def _require_text(title: Optional[str], description: Optional[str]) -> tuple[str, str]:
        title = (title or "").strip()
        description = (description or "").strip()
        errors = {}
        if not title:
            errors["title"] = "Title is required."
        if not description:
            errors["description"] = "Description is required."
        if errors:
            raise ValidationError(errors)
        return title, description

    @staticmethod
    def _validate_type(post_type: str) -> str:
        if post_type not in ELearningType.values:
            raise ValidationError({"type": f"Unsupported type '{post_type}'."})
        return post_type

    @staticmethod
    def create(
        *,
        actor: Identity,
        title: str,
        description: str,
        post_type: str = ELearningType.TEXT,
        media=None,
    ) -> ELearningPost:
        title, description = ELearningService._require_text(title, description)
        post_type = ELearningService._validate_type(post_type)

        blob: Optional[StoredBlob] = None
        try:
            if media is not None:
                blob = upload_blob(build_blob_path(BLOB_PREFIX, getattr(media, "name", "")), media)

            with transaction.atomic():
                post = ELearningPost.objects.create(
                    title=title,
                    description=description,
                    type=post_type,
                    media_url=blob.url if blob else "",
                    media_path=blob.path if blob else "",
                    file_name=getattr(media, "name", "") or "",
                    posted_by_id=actor.user_id,
                )
        except Exception:
            discard_blobs([blob] if blob else [])
            raise

        AuditService.record(
            actor=actor,
            action=AuditAction.CREATE_ELEARNING,
            target_type=AuditTargetType.ELEARNING,
            target_id=post.id,
            details={"title": title, "type": post_type},
        )
        return post

    @staticmethod
    def update(
        *,
        actor: Identity,
        post_id,
        title: Optional[str] = None,
        description: Optional[str] = None,
        post_type: Optional[str] = None,
        media=None,
    ) -> ELearningPost:
        post = ELearningSelector.get(post_id=post_id)

        title, description = ELearningService._require_text(
            post.title if title is None else title,
            post.description if description is None else description,
        )
        if post_type is not None:
            post_type = ELearningService._validate_type(post_type)

        blob: Optional[StoredBlob] = None
        old_path = post.media_path
        try:
            if media is not None:
                blob = upload_blob(build_blob_path(BLOB_PREFIX, getattr(media, "name", "")), media)

            with transaction.atomic():
                post.title = title
                post.description = description
                if post_type is not None:
                    post.type = post_type
                if blob is not None:
                    post.media_url = blob.url
                    post.media_path = blob.path
                    post.file_name = getattr(media, "name", "") or ""
                post.save()
        except Exception:
            discard_blobs([blob] if blob else [])
            raise

        if blob is not None and old_path:
            discard_blobs([StoredBlob(path=old_path, url="")])

        AuditService.record(
            actor=actor,
            action=AuditAction.UPDATE_ELEARNING,
            target_type=AuditTargetType.ELEARNING,
            target_id=post.id,
            details={"title": post.title, "type": post.type},
        )
        return post

    @staticmethod
    @transaction.atomic
    def delete(*, actor: Identity, post_id) -> None:
        post = ELearningSelector.get(post_id=post_id)
        target_id, title, media_path = post.id, post.title, post.media_path

        post.delete()
        if media_path:
            transaction.on_commit(lambda: discard_blobs([StoredBlob(path=media_path, url="")]))

        AuditService.record(
            actor=actor,
            action=AuditAction.DELETE_ELEARNING,
            target_type=AuditTargetType.ELEARNING,
            target_id=target_id,
            details={"title": title},
        )
