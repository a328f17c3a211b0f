# testimony_core/iam/admin.py
from __future__ import annotations

from django.contrib import admin

from testimony_core.common.admin import ReadOnlyAdminMixin
from testimony_core.iam.models import AdminMembership, UserProfile


@admin.register(UserProfile)
class UserProfileAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    # create / reset / delete through admin/users/ so each change is audited
    list_display = ("user_id", "first_name", "last_name", "phone", "email", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("phone", "first_name", "last_name", "email", "user__username")
    ordering = ("-created_at",)


@admin.register(AdminMembership)
class AdminMembershipAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    # promote / demote through the API or bootstrap_admin
    list_display = ("user", "added_by", "added_at")
    search_fields = ("user__username",)
