# testimony_core/moderation/services.py
from __future__ import annotations

import logging

from django.core.exceptions import PermissionDenied, ValidationError
from django.db import transaction
from django.utils.timezone import now

from testimony_core.audit.models import AuditAction, AuditTargetType
from testimony_core.audit.services import AuditService
from testimony_core.common.media import StoredBlob, discard_blobs
from testimony_core.iam.identity import Identity
from testimony_core.posts.domain import TransitionNotAllowed
from testimony_core.posts.models import CoordinatePost, Post, PostStatus
from testimony_core.posts.selectors import PostSelector

logger = logging.getLogger(__name__)

NO_REASON = "(no reason)"


class ModerationService:
    """
    Admin decisions on posts.

    Notes:
    - approve/reject are compare-and-set on status=pending. A decision on a
      post that is no longer pending raises TransitionNotAllowed; nothing is
      written and no audit entry is emitted.
    - Audit writes are best-effort (AuditService.record) and never undo the decision.
    - Coordinate geometry is never touched by any operation here.
    """

    NotFound = PostSelector.NotFound

    # -------------------------
    # Internal helpers
    # -------------------------
    @staticmethod
    def _require_admin(actor: Identity) -> None:
        if actor is None or not actor.is_admin:
            raise PermissionDenied("Admin privileges required.")

    @staticmethod
    def _post_details(post: Post) -> dict:
        return {
            "title": post.title,
            "type": post.type,
            "userPhone": post.owner_phone,
            "userName": post.owner_name,
        }

    @staticmethod
    def _decide(*, post_id, new_status: str, extra_fields: dict) -> Post:
        post = PostSelector.get_post(post_id=post_id)

        updated = Post.objects.filter(pk=post.pk, status=PostStatus.PENDING).update(
            status=new_status,
            updated_at=now(),
            **extra_fields,
        )
        if not updated:
            current = Post.objects.filter(pk=post.pk).values_list("status", flat=True).first()
            if current is None:
                raise PostSelector.NotFound()
            raise TransitionNotAllowed(f"Post has already been {current}.")

        post.refresh_from_db()
        return post

    @staticmethod
    def _discard_media_on_commit(post: Post) -> None:
        blobs = [StoredBlob(path=p, url="") for p in (post.media_path, post.audio_path) if p]
        if blobs:
            transaction.on_commit(lambda: discard_blobs(blobs))

    # -------------------------
    # Decisions
    # -------------------------
    @staticmethod
    @transaction.atomic
    def approve_post(*, actor: Identity, post_id) -> Post:
        ModerationService._require_admin(actor)

        post = ModerationService._decide(post_id=post_id, new_status=PostStatus.APPROVED, extra_fields={})
        logger.info("Post %s approved by admin %s", post.id, actor.user_id)

        AuditService.record(
            actor=actor,
            action=AuditAction.APPROVE_POST,
            target_type=AuditTargetType.POST,
            target_id=post.id,
            details=ModerationService._post_details(post),
        )
        return post

    @staticmethod
    @transaction.atomic
    def reject_post(*, actor: Identity, post_id, reason: str = "") -> Post:
        ModerationService._require_admin(actor)

        reason = (reason or "").strip()
        post = ModerationService._decide(
            post_id=post_id,
            new_status=PostStatus.REJECTED,
            extra_fields={"rejection_reason": reason},
        )
        logger.info("Post %s rejected by admin %s", post.id, actor.user_id)

        details = ModerationService._post_details(post)
        details["reason"] = reason or NO_REASON
        AuditService.record(
            actor=actor,
            action=AuditAction.REJECT_POST,
            target_type=AuditTargetType.POST,
            target_id=post.id,
            details=details,
        )
        return post

    # -------------------------
    # Deletion (any status)
    # -------------------------
    @staticmethod
    @transaction.atomic
    def delete_post(*, actor: Identity, post_id) -> None:
        ModerationService._require_admin(actor)

        post = PostSelector.get_post(post_id=post_id)
        details = ModerationService._post_details(post)
        details["status"] = post.status
        target_id = post.id

        # a concurrent delete wins once; the loser writes nothing
        deleted, _ = Post.objects.filter(pk=target_id).delete()
        if not deleted:
            raise PostSelector.NotFound()
        ModerationService._discard_media_on_commit(post)
        logger.info("Post %s deleted by admin %s", target_id, actor.user_id)

        AuditService.record(
            actor=actor,
            action=AuditAction.DELETE_POST,
            target_type=AuditTargetType.POST,
            target_id=target_id,
            details=details,
        )

    @staticmethod
    @transaction.atomic
    def delete_land_mapping(*, actor: Identity, post_id) -> None:
        ModerationService._require_admin(actor)

        try:
            post = CoordinatePost.objects.get(pk=post_id)
        except (CoordinatePost.DoesNotExist, ValidationError, ValueError):
            raise PostSelector.NotFound()

        details = {
            "title": post.title,
            "placeName": post.place_name,
            "userPhone": post.owner_phone,
            "userName": post.owner_name,
            "status": post.status,
        }
        target_id = post.id

        deleted, _ = CoordinatePost.objects.filter(pk=target_id).delete()
        if not deleted:
            raise PostSelector.NotFound()
        logger.info("Land mapping %s deleted by admin %s", target_id, actor.user_id)

        AuditService.record(
            actor=actor,
            action=AuditAction.DELETE_LANDMAPPING,
            target_type=AuditTargetType.LANDMAPPING,
            target_id=target_id,
            details=details,
        )
