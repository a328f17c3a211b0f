import pytest
from django.core.files.storage import default_storage
from django.core.files.uploadedfile import SimpleUploadedFile

from testimony_core.audit.models import AuditAction, AuditLogEntry
from testimony_core.elearning.models import ELearningPost
from testimony_core.elearning.services import ELearningService

pytestmark = pytest.mark.django_db

URL = "/api/v1/elearning/"


def _guide():
    return SimpleUploadedFile("land-rights.pdf", b"%PDF-1.4 guide", content_type="application/pdf")


def test_elearning_is_publicly_readable(anon_client, admin_identity):
    post = ELearningService.create(actor=admin_identity, title="Your land rights", description="Basics")

    listing = anon_client.get(URL)
    assert listing.status_code == 200
    assert [p["id"] for p in listing.json()["results"]] == [str(post.id)]

    detail = anon_client.get(f"{URL}{post.id}/")
    assert detail.status_code == 200
    assert detail.json()["posted_by_id"] == admin_identity.user_id


def test_admin_creates_post_with_file(admin_client):
    res = admin_client.post(
        URL,
        {"title": "Survey guide", "description": "How surveys work", "type": "document", "file": _guide()},
        format="multipart",
    )

    assert res.status_code == 201, res.content
    body = res.json()
    assert body["type"] == "document"
    assert body["file_name"] == "land-rights.pdf"

    post = ELearningPost.objects.get(pk=body["id"])
    assert post.media_path.startswith("elearning/")
    assert default_storage.exists(post.media_path)

    entry = AuditLogEntry.objects.get(action=AuditAction.CREATE_ELEARNING)
    assert entry.target_id == body["id"]
    assert entry.details == {"title": "Survey guide", "type": "document"}


def test_create_requires_title_and_description(admin_client):
    res = admin_client.post(URL, {"title": "No body"}, format="json")

    assert res.status_code == 400
    assert "description" in res.json()["error"]["details"]
    assert not ELearningPost.objects.exists()
    assert not AuditLogEntry.objects.exists()


def test_non_admin_cannot_author(anon_client, owner_client):
    payload = {"title": "t", "description": "d"}
    assert anon_client.post(URL, payload, format="json").status_code == 401
    assert owner_client.post(URL, payload, format="json").status_code == 403
    assert not ELearningPost.objects.exists()


def test_update_and_delete_are_audited(admin_client, admin_identity, django_capture_on_commit_callbacks):
    post = ELearningService.create(actor=admin_identity, title="Draft", description="Body", media=_guide())
    old_path = post.media_path

    res = admin_client.patch(f"{URL}{post.id}/", {"title": "Final", "file": _guide()}, format="multipart")
    assert res.status_code == 200
    assert res.json()["title"] == "Final"
    assert not default_storage.exists(old_path)

    post.refresh_from_db()
    with django_capture_on_commit_callbacks(execute=True):
        assert admin_client.delete(f"{URL}{post.id}/").status_code == 204

    assert not default_storage.exists(post.media_path)
    assert admin_client.get(f"{URL}{post.id}/").status_code == 404

    actions = list(AuditLogEntry.objects.order_by("timestamp").values_list("action", flat=True))
    assert actions == [AuditAction.CREATE_ELEARNING, AuditAction.UPDATE_ELEARNING, AuditAction.DELETE_ELEARNING]
    assert AuditLogEntry.objects.get(action=AuditAction.DELETE_ELEARNING).details == {"title": "Final"}


def test_unknown_post_is_404(admin_client):
    assert admin_client.patch(f"{URL}not-a-uuid/", {"title": "x"}, format="json").status_code == 404
    assert admin_client.delete("/api/v1/elearning/6f1c0c7e-2b7b-4d3f-9a55-2f4a4c7c1d11/").status_code == 404
