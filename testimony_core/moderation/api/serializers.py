# testimony_core/moderation/api/serializers.py
from __future__ import annotations

from rest_framework import serializers


class RejectSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="")


class ModerationSummarySerializer(serializers.Serializer):
    total_posts = serializers.IntegerField()
    pending = serializers.IntegerField()
    approved = serializers.IntegerField()
    rejected = serializers.IntegerField()
    coordinate_posts = serializers.IntegerField()
    users = serializers.IntegerField()
