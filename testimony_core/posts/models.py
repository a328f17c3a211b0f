# testimony_core/posts/models.py
from __future__ import annotations

import json
from typing import Tuple

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from testimony_core.common.models import UUIDModel
from testimony_core.posts.domain import GeoPoint

GEOMETRY_FIELDS = ("coordinates", "four_corners")
GEOMETRY_IMMUTABLE_MSG = "Coordinate post geometry cannot be changed after creation."


def _as_stored(value):
    # JSON round-trip so tuples and lists compare the way the column stores them
    return json.loads(json.dumps(value))


class PostType(models.TextChoices):
    TEXT = "text", "Text"
    IMAGE = "image", "Image"
    AUDIO = "audio", "Audio"
    VIDEO = "video", "Video"
    COORDINATES = "coordinates", "Coordinates"


NARRATIVE_TYPES = (PostType.TEXT, PostType.IMAGE, PostType.AUDIO, PostType.VIDEO)


class PostStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    APPROVED = "approved", "Approved"
    REJECTED = "rejected", "Rejected"


class PostQuerySet(models.QuerySet):
    def narrative(self):
        return self.exclude(type=PostType.COORDINATES)

    def coordinates(self):
        return self.filter(type=PostType.COORDINATES)

    def approved(self):
        return self.filter(status=PostStatus.APPROVED)

    def update(self, **kwargs):
        # bulk writes bypass save(); geometry is never a valid bulk update target
        if any(f in kwargs for f in GEOMETRY_FIELDS):
            raise ValidationError(GEOMETRY_IMMUTABLE_MSG)
        return super().update(**kwargs)


class Post(UUIDModel):
    """
    One row per submission (the `testimonies` collection).

    Narrative posts (text/image/audio/video) and coordinate posts share the
    table, discriminated by `type`. Use NarrativePost / CoordinatePost for
    variant-specific behaviour.
    """
    type = models.CharField(max_length=16, choices=PostType.choices, db_index=True)
    status = models.CharField(
        max_length=16,
        choices=PostStatus.choices,
        default=PostStatus.PENDING,
        db_index=True,
    )

    title = models.CharField(max_length=255, blank=True, default="")
    description = models.TextField(blank=True, default="")

    # owner ids survive user deletion
    owner_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name="posts",
        null=True,
        blank=True,
    )
    owner_phone = models.CharField(max_length=32, blank=True, default="", db_index=True)
    owner_name = models.CharField(max_length=255, blank=True, default="")
    # legacy records carried the phone here as well
    contact_phone = models.CharField(max_length=32, blank=True, default="")

    # narrative only
    media_url = models.CharField(max_length=500, blank=True, default="")
    media_path = models.CharField(max_length=500, blank=True, default="")
    audio_url = models.CharField(max_length=500, blank=True, default="")
    audio_path = models.CharField(max_length=500, blank=True, default="")
    file_name = models.CharField(max_length=255, blank=True, default="")
    location = models.JSONField(null=True, blank=True)

    # coordinate only
    coordinates = models.JSONField(null=True, blank=True)
    four_corners = models.JSONField(null=True, blank=True)

    rejection_reason = models.TextField(blank=True, default="")

    objects = PostQuerySet.as_manager()

    class Meta:
        db_table = "posts_testimony"
        indexes = [
            models.Index(fields=["status", "type", "created_at"], name="post_status_type_created_idx"),
            models.Index(fields=["owner_user", "created_at"], name="post_owner_created_idx"),
        ]

    @property
    def is_coordinate(self) -> bool:
        return self.type == PostType.COORDINATES

    @property
    def is_pending(self) -> bool:
        return self.status == PostStatus.PENDING

    @property
    def place_name(self) -> str:
        geo = (self.coordinates if self.is_coordinate else self.location) or {}
        return geo.get("place_name") or ""

    def _assert_geometry_unchanged(self, update_fields=None) -> None:
        """
        Compare against the stored row, not an in-memory snapshot: instances
        returned by create() or loaded with deferred fields carry no history.
        """
        fields = [
            f for f in GEOMETRY_FIELDS
            if f in self.__dict__ and (update_fields is None or f in update_fields)
        ]
        if not fields:
            return

        stored = Post.objects.filter(pk=self.pk).values("type", *fields).first()
        if stored is None or stored["type"] != PostType.COORDINATES:
            return

        for f in fields:
            if _as_stored(getattr(self, f)) != stored[f]:
                raise ValidationError(GEOMETRY_IMMUTABLE_MSG)

    def save(self, *args, **kwargs):
        if not self._state.adding:
            self._assert_geometry_unchanged(kwargs.get("update_fields"))
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.type}:{self.id} ({self.status})"


class NarrativePostManager(models.Manager.from_queryset(PostQuerySet)):
    def get_queryset(self):
        return super().get_queryset().narrative()


class CoordinatePostManager(models.Manager.from_queryset(PostQuerySet)):
    def get_queryset(self):
        return super().get_queryset().coordinates()


class NarrativePost(Post):
    """
    text / image / audio / video testimony. Owners may edit the text while pending.
    """
    objects = NarrativePostManager()

    class Meta:
        proxy = True

    def apply_edit(self, *, title: str | None = None, description: str | None = None) -> list[str]:
        changed: list[str] = []
        if title is not None and title != self.title:
            self.title = title
            changed.append("title")
        if description is not None and description != self.description:
            self.description = description
            changed.append("description")
        return changed


class CoordinatePost(Post):
    """
    Land-claim: one primary point and four boundary corners.
    Geometry is read-only once persisted; there is no edit path.
    """
    objects = CoordinatePostManager()

    class Meta:
        proxy = True

    @property
    def point(self) -> GeoPoint:
        return GeoPoint.from_dict(self.coordinates or {})

    @property
    def corners(self) -> Tuple[GeoPoint, ...]:
        return tuple(GeoPoint.from_dict(c) for c in (self.four_corners or []))
