import pytest
from django.contrib.auth import get_user_model
from django.test import Client

from testimony_core.audit.models import AuditLogEntry
from testimony_core.elearning.services import ELearningService
from testimony_core.iam.models import AdminMembership
from testimony_core.posts.models import Post
from testimony_core.tests.helpers import make_post

pytestmark = pytest.mark.django_db


@pytest.fixture
def staff_client():
    superuser = get_user_model().objects.create_superuser(username="root", email="root@example.org", password="rootpass1")
    c = Client()
    c.force_login(superuser)
    return c


def test_decided_post_cannot_be_rewritten_from_django_admin(staff_client, owner):
    post = make_post(owner, status="approved", title="Original")
    url = f"/admin/posts/post/{post.pk}/change/"

    assert staff_client.get(url).status_code == 200
    res = staff_client.post(url, {"title": "rewritten after approval", "contact_phone": "+23276555111"})

    assert res.status_code == 403
    post = Post.objects.get(pk=post.pk)
    assert post.title == "Original"
    assert post.contact_phone == ""
    assert staff_client.post(f"/admin/posts/post/{post.pk}/delete/", {"post": "yes"}).status_code == 403


def test_admin_membership_cannot_be_revoked_from_django_admin(staff_client, admin_user):
    res = staff_client.post(f"/admin/iam/adminmembership/{admin_user.pk}/delete/", {"post": "yes"})

    assert res.status_code == 403
    assert AdminMembership.objects.filter(user_id=admin_user.pk).exists()
    assert AuditLogEntry.objects.count() == 0


@pytest.mark.parametrize(
    "url",
    [
        "/admin/posts/post/add/",
        "/admin/iam/userprofile/add/",
        "/admin/iam/adminmembership/add/",
        "/admin/elearning/elearningpost/add/",
        "/admin/audit/auditlogentry/add/",
    ],
)
def test_django_admin_offers_no_add_forms(staff_client, url):
    assert staff_client.get(url).status_code == 403


def test_profiles_and_elearning_are_view_only(staff_client, owner, admin_identity):
    course = ELearningService.create(actor=admin_identity, title="Rights", description="Basics")

    profile_res = staff_client.post(f"/admin/iam/userprofile/{owner.profile.pk}/change/", {"first_name": "Changed"})
    course_res = staff_client.post(f"/admin/elearning/elearningpost/{course.pk}/delete/", {"post": "yes"})

    assert profile_res.status_code == 403
    assert course_res.status_code == 403
    owner.profile.refresh_from_db()
    assert owner.profile.first_name == "Aminata"
    assert AuditLogEntry.objects.count() == 1
