import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from testimony_core.posts.models import Post, PostStatus
from testimony_core.tests.helpers import SAMPLE_CORNERS, SAMPLE_POINT, make_post

pytestmark = pytest.mark.django_db


def _url(post):
    return f"/api/v1/posts/{post.id}/"


# ----------------------------
# Submissions
# ----------------------------
def test_submit_image_testimony_multipart(owner_client):
    res = owner_client.post(
        "/api/v1/testimonies/",
        {
            "type": "image",
            "title": "Our school",
            "file": SimpleUploadedFile("school.jpg", b"jpeg"),
            "audio_file": SimpleUploadedFile("story.mp3", b"mp3"),
        },
        format="multipart",
    )

    assert res.status_code == 201, res.content
    body = res.json()
    assert body["status"] == "pending"
    assert body["type"] == "image"
    assert body["media_url"]
    assert body["audio_url"]


def test_submit_requires_authentication(anon_client):
    res = anon_client.post("/api/v1/testimonies/", {"type": "text", "title": "x"}, format="json")
    assert res.status_code == 401


@pytest.mark.parametrize(
    "payload",
    [
        {"type": "video", "title": "no file"},
        {"type": "video", "file": "__file__", "audio_file": "__audio__"},
        {"type": "coordinates"},
    ],
)
def test_invalid_testimony_is_rejected_before_writing(owner_client, payload, media_root):
    data = dict(payload)
    if data.get("file") == "__file__":
        data["file"] = SimpleUploadedFile("clip.mp4", b"video")
    if data.get("audio_file") == "__audio__":
        data["audio_file"] = SimpleUploadedFile("voice.mp3", b"mp3")

    res = owner_client.post("/api/v1/testimonies/", data, format="multipart")

    assert res.status_code == 400
    assert Post.objects.count() == 0
    assert not media_root.exists() or not any(p.is_file() for p in media_root.rglob("*"))


def test_submit_coordinates(owner_client):
    res = owner_client.post(
        "/api/v1/coordinates/",
        {"title": "Farm", "coordinates": SAMPLE_POINT, "four_corners": SAMPLE_CORNERS},
        format="json",
    )

    assert res.status_code == 201, res.content
    body = res.json()
    assert body["type"] == "coordinates"
    assert body["is_coordinate"] is True
    assert body["coordinates"]["place_name"] == "8.4881, -13.2351"
    assert len(body["four_corners"]) == 4


@pytest.mark.parametrize(
    "point,corner_lat",
    [({"latitude": 90.000001, "longitude": 0}, 8.4881), (SAMPLE_POINT, -90.000001)],
)
def test_out_of_range_coordinates_write_nothing(owner_client, point, corner_lat):
    corners = [dict(c) for c in SAMPLE_CORNERS]
    corners[2]["latitude"] = corner_lat

    res = owner_client.post(
        "/api/v1/coordinates/",
        {"coordinates": point, "four_corners": corners},
        format="json",
    )

    assert res.status_code == 400
    assert Post.objects.count() == 0


# ----------------------------
# Single post view
# ----------------------------
def test_hidden_post_looks_exactly_like_missing_post(anon_client, other_client, owner):
    post = make_post(owner)

    hidden = anon_client.get(_url(post))
    hidden_auth = other_client.get(_url(post))
    missing = anon_client.get("/api/v1/posts/6f1c1d2e-0000-4000-8000-000000000000/")

    assert hidden.status_code == hidden_auth.status_code == missing.status_code == 404
    assert hidden.json()["error"]["message"] == missing.json()["error"]["message"] == "Not found."


def test_owner_admin_and_public_access(owner, owner_client, admin_client, anon_client):
    pending = make_post(owner)
    approved = make_post(owner, status=PostStatus.APPROVED)

    assert owner_client.get(_url(pending)).status_code == 200
    assert admin_client.get(_url(pending)).status_code == 200
    assert anon_client.get(_url(approved)).status_code == 200


def test_claimed_phone_param_grants_view(owner, anon_client):
    post = make_post(owner)

    assert anon_client.get(_url(post), {"userPhone": "020 123 4567"}).status_code == 200
    assert anon_client.get(_url(post), {"userId": str(owner.id)}).status_code == 200
    assert anon_client.get(_url(post), {"userPhone": "076 555 111"}).status_code == 404


# ----------------------------
# Owner edit / delete
# ----------------------------
def test_owner_patch_then_conflict_after_decision(owner, owner_client):
    post = make_post(owner)

    ok = owner_client.patch(_url(post), {"title": "Updated"}, format="json")
    assert ok.status_code == 200
    assert ok.json()["title"] == "Updated"

    Post.objects.filter(pk=post.pk).update(status=PostStatus.APPROVED)
    conflict = owner_client.patch(_url(post), {"title": "Again"}, format="json")
    assert conflict.status_code == 409
    assert conflict.json()["error"]["code"] == "conflict"


def test_patch_coordinate_post_conflicts(owner_client, coordinate_post):
    res = owner_client.patch(_url(coordinate_post), {"description": "moved"}, format="json")
    assert res.status_code == 409


def test_patch_requires_a_field(owner, owner_client):
    res = owner_client.patch(_url(make_post(owner)), {}, format="json")
    assert res.status_code == 400


def test_delete_rules(owner, owner_client, other_client):
    pending = make_post(owner)
    rejected = make_post(owner, status=PostStatus.REJECTED)

    assert other_client.delete(_url(pending)).status_code == 404
    assert owner_client.delete(_url(rejected)).status_code == 409
    assert owner_client.delete(_url(pending)).status_code == 204
    assert not Post.objects.filter(pk=pending.pk).exists()


# ----------------------------
# Lists
# ----------------------------
def test_mine_lists_own_posts_with_counts(owner, other_user, owner_client):
    make_post(owner)
    make_post(owner, status=PostStatus.APPROVED, title="Approved one")
    make_post(owner, status=PostStatus.REJECTED)
    # legacy row: no user id, matched by phone only
    make_post(None, owner_phone="+232201234567", title="Legacy")
    make_post(other_user)

    res = owner_client.get("/api/v1/posts/mine/")
    assert res.status_code == 200
    body = res.json()
    assert body["count"] == 4
    assert body["counts"] == {"pending": 2, "approved": 1, "rejected": 1, "all": 4}

    approved = owner_client.get("/api/v1/posts/mine/", {"status": "approved"}).json()
    assert [p["title"] for p in approved["results"]] == ["Approved one"]

    assert owner_client.get("/api/v1/posts/mine/", {"status": "bogus"}).status_code == 400


def test_mine_matches_every_phone_spelling_the_post_page_accepts(owner, owner_client):
    spaced = make_post(None, owner_phone="020 123 4567", title="Spaced local")
    contact = make_post(None, contact_phone="+232-20-123-4567", title="Contact field")
    legacy_name = make_post(None, owner_name="User 0201234567", title="Legacy name")
    make_post(None, owner_phone="076 555 111", title="Someone else")

    body = owner_client.get("/api/v1/posts/mine/", {"status": "pending"}).json()

    assert body["counts"]["all"] == 3
    assert {p["id"] for p in body["results"]} == {str(spaced.id), str(contact.id), str(legacy_name.id)}
    for post in (spaced, contact, legacy_name):
        assert owner_client.get(_url(post)).status_code == 200


def test_feed_shows_only_approved_narratives_newest_first(owner, anon_client, coordinate_post):
    make_post(owner, status=PostStatus.APPROVED, title="first")
    make_post(owner, status=PostStatus.APPROVED, type="image", title="second")
    make_post(owner, status=PostStatus.PENDING, title="hidden")
    Post.objects.filter(pk=coordinate_post.pk).update(status=PostStatus.APPROVED)

    res = anon_client.get("/api/v1/feed/")
    assert res.status_code == 200
    titles = [p["title"] for p in res.json()["results"]]
    assert titles == ["second", "first"]

    images = anon_client.get("/api/v1/feed/", {"type": "image"}).json()
    assert [p["title"] for p in images["results"]] == ["second"]

    searched = anon_client.get("/api/v1/feed/", {"search": "fir"}).json()
    assert [p["title"] for p in searched["results"]] == ["first"]
