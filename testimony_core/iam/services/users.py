# testimony_core/iam/services/users.py
from __future__ import annotations

import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import IntegrityError, transaction

from testimony_core.audit.models import AuditAction, AuditTargetType
from testimony_core.audit.services import AuditService
from testimony_core.common.phone import normalize_phone
from testimony_core.iam.identity import Identity
from testimony_core.iam.models import UserProfile
from testimony_core.iam.services.membership import grant_admin, is_admin_member, revoke_admin

logger = logging.getLogger(__name__)


class UserService:
    """
    Privileged user administration (admin actor only; views enforce membership).

    Every mutation is atomic: the auth identity, profile and admin membership
    are written together or not at all. Each successful mutation emits one
    audit entry.
    """

    class NotFound(Exception):
        pass

    class Conflict(Exception):
        pass

    # -------------------------
    # Internal helpers
    # -------------------------
    @staticmethod
    def _validate_password(password: str | None, field: str = "password") -> None:
        min_len = getattr(settings, "MIN_PASSWORD_LENGTH", 6)
        if not password:
            raise ValidationError({field: f"{field.replace('_', ' ').capitalize()} is required."})
        if len(password) < min_len:
            raise ValidationError({field: f"Password must be at least {min_len} characters."})

    @staticmethod
    def _get_user(user_id):
        User = get_user_model()
        try:
            return User.objects.get(pk=user_id)
        except (User.DoesNotExist, ValueError, TypeError):
            raise UserService.NotFound()

    @staticmethod
    def _profile_details(user) -> dict:
        profile = UserProfile.objects.filter(user_id=user.id).first()
        if profile is None:
            return {"userName": user.get_full_name() or user.get_username(), "phone": "", "email": user.email or None}
        return {"userName": profile.full_name, "phone": profile.phone, "email": profile.email or None}

    # -------------------------
    # Create
    # -------------------------
    @staticmethod
    def create_user(
        *,
        actor: Identity,
        first_name: str,
        phone: str,
        password: str,
        last_name: str = "",
        email: str = "",
        is_admin: bool = False,
        is_active: bool = True,
    ) -> UserProfile:
        first_name = (first_name or "").strip()
        last_name = (last_name or "").strip()
        email = (email or "").strip()
        normalized = normalize_phone(phone)

        errors = {}
        if not first_name:
            errors["first_name"] = "First name is required."
        if not normalized:
            errors["phone"] = "Phone number is required."
        if errors:
            raise ValidationError(errors)

        UserService._validate_password(password)

        if email:
            try:
                validate_email(email)
            except ValidationError:
                raise ValidationError({"email": "Enter a valid email address."})

        User = get_user_model()
        if UserProfile.objects.filter(phone=normalized).exists() or User.objects.filter(username=normalized).exists():
            raise UserService.Conflict("Phone number already registered.")
        if email and UserProfile.objects.filter(email__iexact=email).exists():
            raise UserService.Conflict("Email already in use.")

        # Identities without an email get a synthetic one derived from the phone digits
        auth_email = email or f"{normalized.lstrip('+')}@phone.user"

        try:
            with transaction.atomic():
                user = User.objects.create_user(
                    username=normalized,
                    email=auth_email,
                    password=password,
                    first_name=first_name,
                    last_name=last_name,
                    is_active=is_active,
                )
                profile = UserProfile.objects.create(
                    user=user,
                    first_name=first_name,
                    last_name=last_name,
                    email=email,
                    phone=normalized,
                    is_active=is_active,
                    created_by_id=actor.user_id,
                )
                if is_admin:
                    grant_admin(user_id=user.id, added_by_id=actor.user_id)
        except IntegrityError:
            raise UserService.Conflict("Phone number already registered.")

        logger.info("User %s created by admin %s", user.id, actor.user_id)

        AuditService.record(
            actor=actor,
            action=AuditAction.CREATE_USER,
            target_type=AuditTargetType.USER,
            target_id=user.id,
            details={
                "firstName": first_name,
                "lastName": last_name,
                "phone": normalized,
                "email": email or None,
                "isAdmin": bool(is_admin),
            },
        )
        return profile

    # -------------------------
    # Password reset
    # -------------------------
    @staticmethod
    @transaction.atomic
    def reset_password(*, actor: Identity, user_id, new_password: str) -> None:
        UserService._validate_password(new_password, field="new_password")
        user = UserService._get_user(user_id)

        user.set_password(new_password)
        user.save(update_fields=["password"])

        details = UserService._profile_details(user)
        AuditService.record(
            actor=actor,
            action=AuditAction.RESET_PASSWORD,
            target_type=AuditTargetType.USER,
            target_id=user.id,
            details={"userName": details["userName"], "userPhone": details["phone"], "note": "Password reset by admin"},
        )

    # -------------------------
    # Admin membership
    # -------------------------
    @staticmethod
    @transaction.atomic
    def promote_admin(*, actor: Identity, user_id) -> None:
        user = UserService._get_user(user_id)

        if not grant_admin(user_id=user.id, added_by_id=actor.user_id):
            raise UserService.Conflict("User is already an admin.")

        details = UserService._profile_details(user)
        AuditService.record(
            actor=actor,
            action=AuditAction.PROMOTE_ADMIN,
            target_type=AuditTargetType.USER,
            target_id=user.id,
            details={"userName": details["userName"], "phone": details["phone"], "newStatus": "admin"},
        )

    @staticmethod
    @transaction.atomic
    def demote_admin(*, actor: Identity, user_id) -> None:
        user = UserService._get_user(user_id)

        if user.id == actor.user_id:
            raise UserService.Conflict("You cannot remove your own admin access.")

        if not revoke_admin(user_id=user.id):
            raise UserService.Conflict("User is not an admin.")

        details = UserService._profile_details(user)
        AuditService.record(
            actor=actor,
            action=AuditAction.DEMOTE_ADMIN,
            target_type=AuditTargetType.USER,
            target_id=user.id,
            details={"userName": details["userName"], "phone": details["phone"], "newStatus": "user"},
        )

    # -------------------------
    # Delete
    # -------------------------
    @staticmethod
    @transaction.atomic
    def delete_user(*, actor: Identity, user_id) -> None:
        """
        Removes the identity, its profile and any admin membership.
        Posts keep their owner id/phone.
        """
        user = UserService._get_user(user_id)

        if user.id == actor.user_id:
            raise UserService.Conflict("You cannot delete your own account.")

        details = UserService._profile_details(user)
        details["wasAdmin"] = is_admin_member(user.id)
        target_id = user.id

        user.delete()
        logger.info("User %s deleted by admin %s", target_id, actor.user_id)

        AuditService.record(
            actor=actor,
            action=AuditAction.DELETE_USER,
            target_type=AuditTargetType.USER,
            target_id=target_id,
            details=details,
        )
