# testimony_core/audit/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from testimony_core.audit.models import AuditLogEntry


class AuditLogEntrySerializer(serializers.ModelSerializer):
    actor = serializers.SerializerMethodField()

    class Meta:
        model = AuditLogEntry
        fields = [
            "id",
            "timestamp",
            "actor",
            "action",
            "target_type",
            "target_id",
            "details",
        ]
        read_only_fields = fields

    def get_actor(self, obj) -> dict:
        return {
            "id": obj.actor_user_id,
            "email": obj.actor_email or None,
            "phone": obj.actor_phone or None,
        }
