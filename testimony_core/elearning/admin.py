# testimony_core/elearning/admin.py
from __future__ import annotations

from django.contrib import admin

from testimony_core.common.admin import ReadOnlyAdminMixin
from testimony_core.elearning.models import ELearningPost


@admin.register(ELearningPost)
class ELearningPostAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ("id", "title", "type", "posted_by", "created_at", "updated_at")
    list_filter = ("type",)
    search_fields = ("id", "title", "description")
    ordering = ("-created_at",)
