# testimony_core/elearning/models.py
from django.conf import settings
from django.db import models

from testimony_core.common.models import UUIDModel


class ELearningType(models.TextChoices):
    TEXT = "text", "Text"
    IMAGE = "image", "Image"
    VIDEO = "video", "Video"
    AUDIO = "audio", "Audio"
    DOCUMENT = "document", "Document"


class ELearningPost(UUIDModel):
    """
    Admin-authored learning material, public once created.
    """
    title = models.CharField(max_length=255)
    description = models.TextField()
    type = models.CharField(max_length=16, choices=ELearningType.choices, default=ELearningType.TEXT)

    media_url = models.CharField(max_length=500, blank=True, default="")
    media_path = models.CharField(max_length=500, blank=True, default="")
    file_name = models.CharField(max_length=255, blank=True, default="")

    posted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="elearning_posts",
    )

    class Meta:
        db_table = "elearning_post"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.title
