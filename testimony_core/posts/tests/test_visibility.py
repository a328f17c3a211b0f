import pytest

from testimony_core.iam.identity import Identity
from testimony_core.posts.models import Post, PostStatus, PostType
from testimony_core.posts.visibility import ClaimedIdentity, Viewer, can_view, is_owner, post_phones

OWNER = Identity(user_id=10, phone="+232201234567")
STRANGER = Identity(user_id=11, phone="+23276555111")
ADMIN = Identity(user_id=12, phone="+23230999000", is_admin=True)


def _post(status=PostStatus.PENDING, **fields) -> Post:
    defaults = {"owner_user_id": 10, "owner_phone": "+232201234567"}
    defaults.update(fields)
    return Post(type=PostType.TEXT, status=status, **defaults)


@pytest.mark.parametrize("status", [PostStatus.PENDING, PostStatus.REJECTED])
def test_hidden_posts_are_not_visible_to_anonymous_or_strangers(status):
    post = _post(status)
    assert not can_view(post, Viewer.anonymous())
    assert not can_view(post, Viewer(identity=STRANGER))


@pytest.mark.parametrize("viewer", [Viewer.anonymous(), Viewer(identity=STRANGER), Viewer(identity=OWNER)])
def test_approved_posts_are_visible_to_everyone(viewer):
    assert can_view(_post(PostStatus.APPROVED), viewer)


@pytest.mark.parametrize("status", [PostStatus.PENDING, PostStatus.REJECTED])
def test_owner_and_admin_see_hidden_posts(status):
    post = _post(status)
    assert can_view(post, Viewer(identity=OWNER))
    assert can_view(post, Viewer(identity=ADMIN))


def test_owner_matched_by_phone_when_user_id_differs():
    # record written under an older account with the same phone in local format
    post = _post(owner_user_id=99, owner_phone="020 123 4567")
    assert can_view(post, Viewer(identity=OWNER))
    assert is_owner(post, OWNER)


def test_legacy_phone_fields_are_checked():
    by_contact = _post(owner_user_id=None, owner_phone="", contact_phone="0201234567")
    by_name = _post(owner_user_id=None, owner_phone="", owner_name="User 020 123 4567")
    plain_name = _post(owner_user_id=None, owner_phone="", owner_name="Aminata 2")

    assert can_view(by_contact, Viewer(identity=OWNER))
    assert can_view(by_name, Viewer(identity=OWNER))
    assert not can_view(plain_name, Viewer(identity=Identity(user_id=5, phone="+2")))
    assert post_phones(by_name) == {"+232201234567"}


def test_claimed_identity_from_request_params():
    post = _post()
    assert can_view(post, Viewer(claimed=ClaimedIdentity(phone="+232 20 123 4567")))
    assert can_view(post, Viewer(claimed=ClaimedIdentity(user_id="10")))
    assert not can_view(post, Viewer(claimed=ClaimedIdentity(user_id="11", phone="076555111")))
    assert not can_view(post, Viewer(claimed=ClaimedIdentity()))


def test_viewer_without_phone_never_matches_phoneless_post():
    post = _post(owner_user_id=None, owner_phone="")
    assert not can_view(post, Viewer(identity=Identity(user_id=3, phone="")))


def test_claims_do_not_grant_ownership_for_writes():
    post = _post()
    assert not is_owner(post, None)
    assert not is_owner(post, STRANGER)
