# testimony_core/audit/migrations/0001_initial.py
import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="AuditLogEntry",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("timestamp", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("actor_email", models.CharField(blank=True, default="", max_length=254)),
                ("actor_phone", models.CharField(blank=True, default="", max_length=32)),
                (
                    "action",
                    models.CharField(
                        choices=[
                            ("create_user", "Create user"),
                            ("reset_password", "Reset password"),
                            ("promote_admin", "Promote to admin"),
                            ("demote_admin", "Demote admin"),
                            ("delete_user", "Delete user"),
                            ("approve_post", "Approve post"),
                            ("reject_post", "Reject post"),
                            ("delete_post", "Delete post"),
                            ("create_elearning", "Create e-learning"),
                            ("update_elearning", "Update e-learning"),
                            ("delete_elearning", "Delete e-learning"),
                            ("delete_landmapping", "Delete land mapping"),
                        ],
                        db_index=True,
                        max_length=64,
                    ),
                ),
                (
                    "target_type",
                    models.CharField(
                        choices=[
                            ("user", "User"),
                            ("admin", "Admin"),
                            ("post", "Post"),
                            ("elearning", "E-learning"),
                            ("landmapping", "Land mapping"),
                        ],
                        db_index=True,
                        max_length=32,
                    ),
                ),
                ("target_id", models.CharField(db_index=True, max_length=64)),
                ("details", models.JSONField(blank=True, default=dict)),
                (
                    "actor_user",
                    models.ForeignKey(
                        blank=True,
                        db_constraint=False,
                        null=True,
                        on_delete=django.db.models.deletion.DO_NOTHING,
                        related_name="audit_log_entries",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "audit_log_entry",
                "indexes": [
                    models.Index(fields=["target_type", "target_id"], name="audit_target_idx"),
                    models.Index(fields=["action", "timestamp"], name="audit_action_ts_idx"),
                ],
            },
        ),
    ]
