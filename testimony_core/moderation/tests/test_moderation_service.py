import logging

import pytest
from django.core.exceptions import PermissionDenied

from testimony_core.audit.models import AuditAction, AuditLogEntry
from testimony_core.audit.services import AuditService
from testimony_core.moderation.services import ModerationService
from testimony_core.posts.domain import TransitionNotAllowed
from testimony_core.posts.models import Post, PostStatus
from testimony_core.posts.selectors import PostSelector
from testimony_core.tests.helpers import make_post

pytestmark = pytest.mark.django_db


def test_approve_pending_post_emits_one_audit_entry(owner, admin_identity):
    post = make_post(owner, title="Land dispute")

    ModerationService.approve_post(actor=admin_identity, post_id=post.id)

    post.refresh_from_db()
    assert post.status == PostStatus.APPROVED

    entries = list(AuditLogEntry.objects.filter(action=AuditAction.APPROVE_POST))
    assert len(entries) == 1
    entry = entries[0]
    assert entry.target_type == "post"
    assert entry.target_id == str(post.id)
    assert entry.actor_user_id == admin_identity.user_id
    assert entry.actor_phone == "+23230999000"
    assert entry.details == {
        "title": "Land dispute",
        "type": "text",
        "userPhone": "+232201234567",
        "userName": "Aminata Kamara",
    }


def test_approve_then_delete_leaves_matching_delete_entry(owner, admin_identity):
    post = make_post(owner)

    ModerationService.approve_post(actor=admin_identity, post_id=post.id)
    ModerationService.delete_post(actor=admin_identity, post_id=post.id)

    assert not Post.objects.filter(pk=post.pk).exists()
    actions = list(
        AuditLogEntry.objects.filter(target_id=str(post.id)).order_by("timestamp").values_list("action", flat=True)
    )
    assert actions == [AuditAction.APPROVE_POST, AuditAction.DELETE_POST]


@pytest.mark.parametrize(
    "first,second",
    [("approve", "approve"), ("reject", "reject"), ("approve", "reject"), ("reject", "approve")],
)
def test_repeat_decisions_conflict_without_side_effects(owner, admin_identity, first, second):
    post = make_post(owner)
    ops = {
        "approve": lambda: ModerationService.approve_post(actor=admin_identity, post_id=post.id),
        "reject": lambda: ModerationService.reject_post(actor=admin_identity, post_id=post.id, reason="r"),
    }

    ops[first]()
    post.refresh_from_db()
    before = (post.status, post.updated_at, post.rejection_reason)

    with pytest.raises(TransitionNotAllowed):
        ops[second]()

    post.refresh_from_db()
    assert (post.status, post.updated_at, post.rejection_reason) == before
    assert AuditLogEntry.objects.filter(target_id=str(post.id)).count() == 1


def test_reject_records_reason_or_placeholder(owner, admin_identity):
    with_reason = make_post(owner)
    without = make_post(owner)

    ModerationService.reject_post(actor=admin_identity, post_id=with_reason.id, reason="  Not a testimony ")
    ModerationService.reject_post(actor=admin_identity, post_id=without.id)

    with_reason.refresh_from_db()
    without.refresh_from_db()
    assert with_reason.rejection_reason == "Not a testimony"
    assert without.rejection_reason == ""

    reasons = {
        e.target_id: e.details["reason"] for e in AuditLogEntry.objects.filter(action=AuditAction.REJECT_POST)
    }
    assert reasons == {str(with_reason.id): "Not a testimony", str(without.id): "(no reason)"}


def test_audit_failure_never_blocks_the_decision(owner, admin_identity, monkeypatch, caplog):
    post = make_post(owner)

    def broken(**kwargs):
        raise RuntimeError("audit store down")

    monkeypatch.setattr(AuditService, "log", staticmethod(broken))

    with caplog.at_level(logging.ERROR):
        ModerationService.approve_post(actor=admin_identity, post_id=post.id)

    post.refresh_from_db()
    assert post.status == PostStatus.APPROVED
    assert AuditLogEntry.objects.count() == 0
    assert any(r.levelno == logging.ERROR and "Failed to write audit log" in r.getMessage() for r in caplog.records)


def test_admin_delete_works_in_any_status(owner, admin_identity):
    for status in PostStatus:
        post = make_post(owner, status=status)
        ModerationService.delete_post(actor=admin_identity, post_id=post.id)
        assert not Post.objects.filter(pk=post.pk).exists()

    assert AuditLogEntry.objects.filter(action=AuditAction.DELETE_POST).count() == 3


def test_concurrent_admin_delete_is_audited_once(owner, admin_identity, monkeypatch):
    post = make_post(owner, status=PostStatus.APPROVED)
    read_post = PostSelector.get_post

    def read_then_lose_the_race(*, post_id):
        found = read_post(post_id=post_id)
        # the other moderator deletes between our read and our delete
        Post.objects.filter(pk=found.pk).delete()
        return found

    monkeypatch.setattr(PostSelector, "get_post", staticmethod(read_then_lose_the_race))

    with pytest.raises(ModerationService.NotFound):
        ModerationService.delete_post(actor=admin_identity, post_id=post.id)

    assert AuditLogEntry.objects.filter(action=AuditAction.DELETE_POST).count() == 0


def test_land_mapping_delete_targets_coordinate_posts_only(owner, admin_identity, coordinate_post):
    narrative = make_post(owner)

    with pytest.raises(ModerationService.NotFound):
        ModerationService.delete_land_mapping(actor=admin_identity, post_id=narrative.id)

    ModerationService.delete_land_mapping(actor=admin_identity, post_id=coordinate_post.id)

    entry = AuditLogEntry.objects.get(action=AuditAction.DELETE_LANDMAPPING)
    assert entry.target_type == "landmapping"
    assert entry.details["placeName"] == "8.4881, -13.2351"
    assert Post.objects.filter(pk=narrative.pk).exists()


def test_missing_post_is_not_found(admin_identity):
    with pytest.raises(ModerationService.NotFound):
        ModerationService.approve_post(actor=admin_identity, post_id="5d6f0a7e-0000-4000-8000-000000000000")
    with pytest.raises(ModerationService.NotFound):
        ModerationService.delete_post(actor=admin_identity, post_id="not-a-uuid")


def test_non_admin_identity_is_refused(owner, owner_identity):
    post = make_post(owner)
    with pytest.raises(PermissionDenied):
        ModerationService.approve_post(actor=owner_identity, post_id=post.id)
