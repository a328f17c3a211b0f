# testimony_core/posts/visibility.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from testimony_core.common.phone import normalize_phone
from testimony_core.iam.identity import Identity
from testimony_core.posts.models import Post, PostStatus

LEGACY_NAME_PREFIX = "User "


@dataclass(frozen=True)
class ClaimedIdentity:
    """
    Unverified {user_id, phone} pair supplied out of band (userId / userPhone params).
    """
    user_id: Optional[str] = None
    phone: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.user_id and not self.phone


@dataclass(frozen=True)
class Viewer:
    identity: Optional[Identity] = None
    claimed: Optional[ClaimedIdentity] = None

    @classmethod
    def anonymous(cls) -> "Viewer":
        return cls()

    @property
    def is_admin(self) -> bool:
        return bool(self.identity and self.identity.is_admin)


def post_phones(post: Post) -> set[str]:
    """
    Every normalized phone carried by the post, including legacy fields.
    """
    candidates = [post.owner_phone, post.contact_phone]
    name = post.owner_name or ""
    if name.startswith(LEGACY_NAME_PREFIX):
        candidates.append(name[len(LEGACY_NAME_PREFIX):])
    return {p for p in (normalize_phone(c) for c in candidates) if p}


def _matches(post: Post, *, user_id, phone: str) -> bool:
    if user_id is not None and post.owner_user_id is not None and str(user_id) == str(post.owner_user_id):
        return True
    normalized = normalize_phone(phone)
    return bool(normalized) and normalized in post_phones(post)


def is_owner(post: Post, identity: Optional[Identity]) -> bool:
    """
    Ownership by verified session only (used for edit/delete).
    """
    if identity is None:
        return False
    return _matches(post, user_id=identity.user_id, phone=identity.phone)


def can_view(post: Post, viewer: Viewer) -> bool:
    """
    Pure visibility predicate. Callers turn False into a generic not-found.
    """
    if post.status == PostStatus.APPROVED:
        return True

    if is_owner(post, viewer.identity):
        return True

    claimed = viewer.claimed
    if claimed is not None and not claimed.is_empty:
        if _matches(post, user_id=claimed.user_id or None, phone=claimed.phone):
            return True

    return viewer.is_admin
