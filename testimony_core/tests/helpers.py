# testimony_core/tests/helpers.py
from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from testimony_core.common.phone import normalize_phone
from testimony_core.iam.models import UserProfile
from testimony_core.iam.services.membership import grant_admin
from testimony_core.posts.models import Post

SAMPLE_POINT = {"latitude": 8.488147, "longitude": -13.235127}
SAMPLE_CORNERS = [
    {"latitude": 8.4881, "longitude": -13.2351},
    {"latitude": 8.4882, "longitude": -13.2351},
    {"latitude": 8.4882, "longitude": -13.2352},
    {"latitude": 8.4881, "longitude": -13.2352},
]


def make_user(phone: str, *, first_name: str = "Test", last_name: str = "User", password: str = "pass1234", admin=False):
    """
    auth_user (username = normalized phone) -> UserProfile [-> AdminMembership]
    """
    normalized = normalize_phone(phone)
    User = get_user_model()
    user = User.objects.create_user(username=normalized, password=password, first_name=first_name, last_name=last_name)
    UserProfile.objects.create(user=user, first_name=first_name, last_name=last_name, phone=normalized)
    if admin:
        grant_admin(user_id=user.id, added_by_id=None)
    return user


def client_for(user) -> APIClient:
    c = APIClient()
    c.force_authenticate(user=user)
    return c


def make_post(user, *, type: str = "text", status: str = "pending", **fields) -> Post:
    """
    Insert a post row directly (bypasses builders); defaults to a pending text post.
    """
    profile = UserProfile.objects.filter(user_id=user.id).first() if user is not None else None
    defaults = {
        "title": "My testimony",
        "description": "What happened on our land",
        "owner_user_id": user.id if user is not None else None,
        "owner_phone": profile.phone if profile else "",
        "owner_name": profile.full_name if profile else "",
    }
    defaults.update(fields)
    return Post.objects.create(type=type, status=status, **defaults)
