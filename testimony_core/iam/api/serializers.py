# testimony_core/iam/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from testimony_core.iam.models import UserProfile


class UserProfileSerializer(serializers.ModelSerializer):
    user_id = serializers.IntegerField(read_only=True)
    full_name = serializers.CharField(read_only=True)
    is_admin = serializers.SerializerMethodField()

    class Meta:
        model = UserProfile
        fields = [
            "user_id",
            "first_name",
            "last_name",
            "full_name",
            "email",
            "phone",
            "is_active",
            "is_admin",
            "created_by",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_is_admin(self, obj) -> bool:
        # annotated by iam.selectors.list_users; fall back to a lookup otherwise
        annotated = getattr(obj, "is_admin", None)
        if annotated is not None:
            return bool(annotated)
        return hasattr(obj.user, "admin_membership")


class CreateUserSerializer(serializers.Serializer):
    first_name = serializers.CharField(max_length=150)
    last_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")
    email = serializers.EmailField(required=False, allow_blank=True, default="")
    phone = serializers.CharField(max_length=32)
    password = serializers.CharField(write_only=True)
    is_admin = serializers.BooleanField(required=False, default=False)
    is_active = serializers.BooleanField(required=False, default=True)


class ResetPasswordSerializer(serializers.Serializer):
    new_password = serializers.CharField(write_only=True)
