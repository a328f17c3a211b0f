# testimony_core/posts/admin.py
from __future__ import annotations

from django.contrib import admin

from testimony_core.common.admin import ReadOnlyAdminMixin
from testimony_core.posts.models import Post


@admin.register(Post)
class PostAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    # edits, decisions and deletions go through the API (lifecycle checks + audit)
    list_display = ("id", "type", "status", "title", "owner_phone", "owner_name", "created_at", "updated_at")
    list_filter = ("status", "type")
    search_fields = ("id", "title", "owner_phone", "owner_name")
    ordering = ("-created_at",)

    fieldsets = (
        ("Post", {"fields": ("type", "status", "title", "description", "rejection_reason")}),
        ("Owner", {"fields": ("owner_user", "owner_phone", "owner_name", "contact_phone")}),
        ("Media", {"fields": ("media_url", "audio_url", "file_name")}),
        ("Geometry", {"fields": ("location", "coordinates", "four_corners")}),
    )
