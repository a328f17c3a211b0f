# testimony_core/posts/services.py
from __future__ import annotations

import logging
from typing import Optional

from django.db import transaction

from testimony_core.common.media import StoredBlob, build_blob_path, discard_blobs, upload_blob
from testimony_core.iam.identity import Identity
from testimony_core.iam.models import UserProfile
from testimony_core.posts.builders import corners_payload, enrich_coordinates, enrich_location
from testimony_core.posts.domain import CoordinateDraft, NarrativeDraft, TransitionNotAllowed
from testimony_core.posts.models import CoordinatePost, NarrativePost, Post, PostStatus, PostType
from testimony_core.posts.selectors import PostSelector
from testimony_core.posts.visibility import is_owner

logger = logging.getLogger(__name__)

BLOB_PREFIX = "testimonies"


class PostService:
    """
    Owner-side write operations: create, edit while pending, delete while pending.

    Notes:
    - Builders validate drafts before anything is uploaded or inserted.
    - Uploaded blobs are deleted again if the row insert fails.
    - Posts the actor does not own are reported as not found.
    """

    NotFound = PostSelector.NotFound

    # -------------------------
    # Internal helpers
    # -------------------------
    @staticmethod
    def _owner_name(owner: Identity) -> str:
        profile = UserProfile.objects.filter(user_id=owner.user_id).first()
        if profile and profile.full_name:
            return profile.full_name
        return f"User {owner.phone}" if owner.phone else ""

    @staticmethod
    def _owned_post(*, actor: Identity, post_id) -> Post:
        post = PostSelector.get_post(post_id=post_id)
        if not is_owner(post, actor):
            raise PostSelector.NotFound()
        return post

    @staticmethod
    def _upload(owner: Identity, file, *, suffix: str = "") -> StoredBlob:
        path = build_blob_path(BLOB_PREFIX, getattr(file, "name", ""), owner_id=owner.user_id, suffix=suffix)
        return upload_blob(path, file)

    # -------------------------
    # Create
    # -------------------------
    @staticmethod
    def submit_narrative(*, owner: Identity, draft: NarrativeDraft) -> NarrativePost:
        location = enrich_location(draft.location) if draft.location else None

        blobs: list[StoredBlob] = []
        media = audio = None
        try:
            if draft.media is not None:
                media = PostService._upload(owner, draft.media)
                blobs.append(media)
            if draft.audio is not None:
                audio = PostService._upload(owner, draft.audio, suffix="audio_")
                blobs.append(audio)

            with transaction.atomic():
                post = NarrativePost.objects.create(
                    type=draft.type,
                    status=PostStatus.PENDING,
                    title=draft.title,
                    description=draft.description,
                    owner_user_id=owner.user_id,
                    owner_phone=owner.phone,
                    owner_name=PostService._owner_name(owner),
                    media_url=media.url if media else "",
                    media_path=media.path if media else "",
                    audio_url=audio.url if audio else "",
                    audio_path=audio.path if audio else "",
                    file_name=getattr(draft.media, "name", "") or "",
                    location=location,
                )
        except Exception:
            discard_blobs(blobs)
            raise

        logger.info("Narrative post %s (%s) submitted by user %s", post.id, post.type, owner.user_id)
        return post

    @staticmethod
    @transaction.atomic
    def submit_coordinates(*, owner: Identity, draft: CoordinateDraft) -> CoordinatePost:
        post = CoordinatePost.objects.create(
            type=PostType.COORDINATES,
            status=PostStatus.PENDING,
            title=draft.title,
            description=draft.description,
            owner_user_id=owner.user_id,
            owner_phone=owner.phone,
            owner_name=PostService._owner_name(owner),
            coordinates=enrich_coordinates(draft.point),
            four_corners=corners_payload(draft.corners),
        )
        logger.info("Coordinate post %s submitted by user %s", post.id, owner.user_id)
        return post

    # -------------------------
    # Owner edit / delete
    # -------------------------
    @staticmethod
    @transaction.atomic
    def edit_post(
        *,
        actor: Identity,
        post_id,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> NarrativePost:
        post = PostService._owned_post(actor=actor, post_id=post_id)

        # checked independently of status
        if post.type == PostType.COORDINATES:
            raise TransitionNotAllowed("Coordinate posts cannot be edited.")

        narrative = NarrativePost.objects.select_for_update().get(pk=post.pk)
        if narrative.status != PostStatus.PENDING:
            raise TransitionNotAllowed(f"Only pending posts can be edited (post is {narrative.status}).")

        changed = narrative.apply_edit(
            title=title.strip() if title is not None else None,
            description=description.strip() if description is not None else None,
        )
        if changed:
            narrative.save(update_fields=changed + ["updated_at"])
        return narrative

    @staticmethod
    @transaction.atomic
    def delete_own_post(*, actor: Identity, post_id) -> None:
        post = PostService._owned_post(actor=actor, post_id=post_id)

        deleted, _ = Post.objects.filter(pk=post.pk, status=PostStatus.PENDING).delete()
        if not deleted:
            raise TransitionNotAllowed(f"Only pending posts can be deleted (post is {post.status}).")

        blobs = [StoredBlob(path=p, url="") for p in (post.media_path, post.audio_path) if p]
        if blobs:
            transaction.on_commit(lambda: discard_blobs(blobs))
        logger.info("Post %s deleted by owner %s", post.id, actor.user_id)
