# testimony_core/posts/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from testimony_core.posts.models import NARRATIVE_TYPES, Post


class PostSerializer(serializers.ModelSerializer):
    owner_user_id = serializers.IntegerField(read_only=True, allow_null=True)
    is_coordinate = serializers.BooleanField(read_only=True)
    place_name = serializers.CharField(read_only=True)

    class Meta:
        model = Post
        fields = [
            "id",
            "type",
            "status",
            "title",
            "description",
            "owner_user_id",
            "owner_phone",
            "owner_name",
            "media_url",
            "audio_url",
            "file_name",
            "location",
            "coordinates",
            "four_corners",
            "place_name",
            "is_coordinate",
            "rejection_reason",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class NarrativeSubmitSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=[t.value for t in NARRATIVE_TYPES])
    title = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    description = serializers.CharField(required=False, allow_blank=True, default="")
    file = serializers.FileField(required=False, allow_null=True)
    audio_file = serializers.FileField(required=False, allow_null=True)
    # range checks live in the submission builder
    latitude = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    longitude = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class CoordinateSubmitSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    description = serializers.CharField(required=False, allow_blank=True, default="")
    coordinates = serializers.DictField()
    four_corners = serializers.ListField(child=serializers.DictField())


class PostEditSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Provide title and/or description.")
        return attrs
