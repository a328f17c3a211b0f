# testimony_core/posts/management/commands/reconcile_media.py
from __future__ import annotations

from datetime import timedelta

from django.conf import settings
from django.core.files.storage import default_storage
from django.core.management.base import BaseCommand
from django.utils.timezone import now

from testimony_core.common.media import iter_blob_paths
from testimony_core.elearning.models import ELearningPost
from testimony_core.elearning.services import BLOB_PREFIX as ELEARNING_PREFIX
from testimony_core.posts.models import Post
from testimony_core.posts.services import BLOB_PREFIX as POSTS_PREFIX


def referenced_blob_paths() -> set[str]:
    paths: set[str] = set()
    for media_path, audio_path in Post.objects.values_list("media_path", "audio_path"):
        paths.update(p for p in (media_path, audio_path) if p)
    paths.update(p for p in ELearningPost.objects.values_list("media_path", flat=True) if p)
    return paths


class Command(BaseCommand):
    help = (
        "Delete uploaded blobs that no post references (abandoned or failed submissions). "
        "Only blobs older than MEDIA_ORPHAN_GRACE_HOURS are touched, so in-flight uploads survive."
    )

    def add_arguments(self, parser):
        parser.add_argument("--dry-run", action="store_true", help="Print orphans only; do not delete.")
        parser.add_argument(
            "--grace-hours",
            type=int,
            default=None,
            help="Override MEDIA_ORPHAN_GRACE_HOURS.",
        )

    def handle(self, *args, **opts):
        dry = opts["dry_run"]
        grace = opts["grace_hours"]
        if grace is None:
            grace = getattr(settings, "MEDIA_ORPHAN_GRACE_HOURS", 24)
        cutoff = now() - timedelta(hours=grace)

        referenced = referenced_blob_paths()

        examined = 0
        orphans: list[str] = []
        for prefix in (POSTS_PREFIX, ELEARNING_PREFIX):
            for path in iter_blob_paths(prefix):
                examined += 1
                if path in referenced:
                    continue
                if default_storage.get_modified_time(path) > cutoff:
                    continue
                orphans.append(path)

        if not dry:
            for path in orphans:
                default_storage.delete(path)

        self.stdout.write(f"Blobs examined: {examined}")
        if dry:
            self.stdout.write(f"DRY RUN: orphaned blobs that would be deleted: {len(orphans)}")
        else:
            self.stdout.write(f"Orphaned blobs deleted: {len(orphans)}")
        for path in orphans:
            self.stdout.write(f"  {path}")
