# testimony_core/iam/management/commands/bootstrap_admin.py
from __future__ import annotations

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from testimony_core.common.phone import normalize_phone
from testimony_core.iam.models import UserProfile
from testimony_core.iam.services.membership import grant_admin


class Command(BaseCommand):
    help = "Create the first administrator (or promote an existing user by phone). Safe to re-run."

    def add_arguments(self, parser):
        parser.add_argument("--phone", required=True, help="Phone number, any format (e.g. '076 123 456').")
        parser.add_argument("--password", default=None, help="Required when the account does not exist yet.")
        parser.add_argument("--first-name", default="Admin")
        parser.add_argument("--last-name", default="")
        parser.add_argument("--email", default="")

    @transaction.atomic
    def handle(self, *args, **opts):
        phone = normalize_phone(opts["phone"])
        if not phone:
            raise CommandError("A valid --phone is required.")

        profile = UserProfile.objects.select_related("user").filter(phone=phone).first()

        if profile is None:
            password = opts["password"]
            min_len = getattr(settings, "MIN_PASSWORD_LENGTH", 6)
            if not password or len(password) < min_len:
                raise CommandError(f"--password of at least {min_len} characters is required for a new account.")

            User = get_user_model()
            if User.objects.filter(username=phone).exists():
                raise CommandError(f"An auth user named {phone} exists without a profile.")

            email = (opts["email"] or "").strip()
            user = User.objects.create_user(
                username=phone,
                email=email or f"{phone.lstrip('+')}@phone.user",
                password=password,
                first_name=opts["first_name"],
                last_name=opts["last_name"],
            )
            profile = UserProfile.objects.create(
                user=user,
                first_name=opts["first_name"],
                last_name=opts["last_name"],
                email=email,
                phone=phone,
            )
            self.stdout.write(f"Created user {user.id} ({phone})")

        if grant_admin(user_id=profile.user_id, added_by_id=None):
            self.stdout.write(self.style.SUCCESS(f"User {profile.user_id} ({phone}) is now an admin."))
        else:
            self.stdout.write(f"User {profile.user_id} ({phone}) is already an admin.")
