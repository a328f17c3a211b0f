# testimony_core/audit/models.py
import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

IMMUTABLE_MSG = "Audit log entries are append-only."


class AuditAction(models.TextChoices):
    CREATE_USER = "create_user", "Create user"
    RESET_PASSWORD = "reset_password", "Reset password"
    PROMOTE_ADMIN = "promote_admin", "Promote to admin"
    DEMOTE_ADMIN = "demote_admin", "Demote admin"
    DELETE_USER = "delete_user", "Delete user"
    APPROVE_POST = "approve_post", "Approve post"
    REJECT_POST = "reject_post", "Reject post"
    DELETE_POST = "delete_post", "Delete post"
    CREATE_ELEARNING = "create_elearning", "Create e-learning"
    UPDATE_ELEARNING = "update_elearning", "Update e-learning"
    DELETE_ELEARNING = "delete_elearning", "Delete e-learning"
    DELETE_LANDMAPPING = "delete_landmapping", "Delete land mapping"


class AuditTargetType(models.TextChoices):
    USER = "user", "User"
    ADMIN = "admin", "Admin"
    POST = "post", "Post"
    ELEARNING = "elearning", "E-learning"
    LANDMAPPING = "landmapping", "Land mapping"


class AuditLogQuerySet(models.QuerySet):
    def update(self, **kwargs):
        raise ValidationError(IMMUTABLE_MSG)

    def delete(self):
        raise ValidationError(IMMUTABLE_MSG)


class AuditLogEntry(models.Model):
    """
    Immutable record of a privileged administrative action.
    The acting admin is snapshotted (id + email/phone) so entries survive user deletion.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    timestamp = models.DateTimeField(auto_now_add=True, db_index=True)

    actor_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name="audit_log_entries",
        null=True,
        blank=True,
    )
    actor_email = models.CharField(max_length=254, blank=True, default="")
    actor_phone = models.CharField(max_length=32, blank=True, default="")

    action = models.CharField(max_length=64, choices=AuditAction.choices, db_index=True)
    target_type = models.CharField(max_length=32, choices=AuditTargetType.choices, db_index=True)
    target_id = models.CharField(max_length=64, db_index=True)

    details = models.JSONField(default=dict, blank=True)

    objects = AuditLogQuerySet.as_manager()

    class Meta:
        db_table = "audit_log_entry"
        indexes = [
            models.Index(fields=["target_type", "target_id"], name="audit_target_idx"),
            models.Index(fields=["action", "timestamp"], name="audit_action_ts_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError(IMMUTABLE_MSG)
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError(IMMUTABLE_MSG)

    def __str__(self) -> str:
        return f"{self.action} {self.target_type}:{self.target_id}"
