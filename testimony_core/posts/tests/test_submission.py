import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from testimony_core.posts.builders import build_coordinate_draft, build_narrative_draft
from testimony_core.posts.models import CoordinatePost, Post, PostStatus
from testimony_core.posts.services import PostService
from testimony_core.tests.helpers import SAMPLE_CORNERS, SAMPLE_POINT

pytestmark = pytest.mark.django_db


def _stored_files(root):
    return [p for p in root.rglob("*") if p.is_file()] if root.exists() else []


def test_image_post_with_audio_is_stored_pending(owner_identity, media_root):
    draft = build_narrative_draft(
        post_type="image",
        title="Our well",
        media=SimpleUploadedFile("well.jpg", b"jpeg-bytes"),
        audio=SimpleUploadedFile("story.mp3", b"mp3-bytes"),
        latitude="8.4",
        longitude="-13.2",
    )

    post = PostService.submit_narrative(owner=owner_identity, draft=draft)

    assert post.status == PostStatus.PENDING
    assert post.owner_user_id == owner_identity.user_id
    assert post.owner_phone == "+232201234567"
    assert post.owner_name == "Aminata Kamara"
    assert post.media_path.startswith(f"testimonies/{owner_identity.user_id}/")
    assert "audio_" in post.audio_path
    assert post.media_url and post.audio_url
    assert post.location["place_name"] == "8.4000, -13.2000"
    assert len(_stored_files(media_root)) == 2


def test_text_post_needs_no_upload(owner_identity, media_root):
    post = PostService.submit_narrative(owner=owner_identity, draft=build_narrative_draft(post_type="text", title="Hi"))

    assert post.media_url == ""
    assert post.location is None
    assert _stored_files(media_root) == []


def test_failed_insert_removes_uploaded_blobs(owner_identity, media_root, monkeypatch):
    def boom(owner):
        raise RuntimeError("store unavailable")

    monkeypatch.setattr(PostService, "_owner_name", staticmethod(boom))
    draft = build_narrative_draft(post_type="video", media=SimpleUploadedFile("clip.mp4", b"video"))

    with pytest.raises(RuntimeError):
        PostService.submit_narrative(owner=owner_identity, draft=draft)

    assert Post.objects.count() == 0
    assert _stored_files(media_root) == []


def test_coordinate_round_trip_within_tolerance(coordinate_post):
    reread = CoordinatePost.objects.get(pk=coordinate_post.pk)

    assert reread.point.latitude == pytest.approx(8.488147, abs=1e-6)
    assert reread.point.longitude == pytest.approx(-13.235127, abs=1e-6)
    assert len(reread.corners) == 4
    for stored, sent in zip(reread.corners, SAMPLE_CORNERS):
        assert stored.latitude == pytest.approx(sent["latitude"], abs=1e-6)
        assert stored.longitude == pytest.approx(sent["longitude"], abs=1e-6)

    assert reread.coordinates["place_name"] == "8.4881, -13.2351"
    assert reread.status == PostStatus.PENDING


def test_boundary_values_are_accepted_for_coordinates(owner_identity):
    draft = build_coordinate_draft(
        coordinates={"latitude": 90, "longitude": -180},
        four_corners=SAMPLE_CORNERS,
    )
    post = PostService.submit_coordinates(owner=owner_identity, draft=draft)
    assert post.coordinates["latitude"] == 90.0
    assert post.coordinates["longitude"] == -180.0


def test_variant_managers_split_the_collection(owner_identity, coordinate_post):
    PostService.submit_narrative(owner=owner_identity, draft=build_narrative_draft(post_type="text"))

    assert CoordinatePost.objects.count() == 1
    assert Post.objects.narrative().count() == 1
    assert Post.objects.count() == 2


def test_owner_without_profile_name_gets_legacy_label(owner, owner_identity):
    owner.profile.first_name = ""
    owner.profile.last_name = ""
    owner.profile.save()

    post = PostService.submit_coordinates(
        owner=owner_identity,
        draft=build_coordinate_draft(coordinates=SAMPLE_POINT, four_corners=SAMPLE_CORNERS),
    )
    assert post.owner_name == "User +232201234567"
