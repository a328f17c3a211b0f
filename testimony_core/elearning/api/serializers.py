# testimony_core/elearning/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from testimony_core.elearning.models import ELearningPost, ELearningType


class ELearningPostSerializer(serializers.ModelSerializer):
    posted_by_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = ELearningPost
        fields = [
            "id",
            "title",
            "description",
            "type",
            "media_url",
            "file_name",
            "posted_by_id",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ELearningWriteSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    type = serializers.ChoiceField(choices=ELearningType.choices, required=False)
    file = serializers.FileField(required=False, allow_null=True)
