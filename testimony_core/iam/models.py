# testimony_core/iam/models.py
from django.conf import settings
from django.db import models

from testimony_core.common.models import TimeStampedModel


class UserProfile(TimeStampedModel):
    """
    Community member record (the `users` collection).
    Anchored to Django's AUTH_USER_MODEL, whose username is the normalized phone.
    """
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="profile")

    first_name = models.CharField(max_length=150)
    last_name = models.CharField(max_length=150, blank=True)
    email = models.EmailField(blank=True)

    # normalized (+<country><number>)
    phone = models.CharField(max_length=32, unique=True)

    is_active = models.BooleanField(default=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_profiles",
    )

    class Meta:
        db_table = "iam_user_profile"
        indexes = [
            models.Index(fields=["is_active"], name="iam_profile_active_idx"),
            models.Index(fields=["email"], name="iam_profile_email_idx"),
        ]

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __str__(self) -> str:
        return f"{self.full_name} ({self.phone})"


class AdminMembership(models.Model):
    """
    Admin privilege as a separate membership record (the `admins` collection),
    keyed by the same user id. A user is an admin iff this row exists.
    """
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name="admin_membership",
    )

    added_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    added_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "iam_admin_membership"

    def __str__(self) -> str:
        return f"admin:{self.user_id}"
