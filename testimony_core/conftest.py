# testimony_core/conftest.py
import pytest
from rest_framework.test import APIClient

from testimony_core.iam.identity import identity_for_user
from testimony_core.tests.helpers import SAMPLE_CORNERS, SAMPLE_POINT, client_for, make_user


@pytest.fixture(autouse=True)
def media_root(settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path / "media")
    return tmp_path / "media"


@pytest.fixture
def owner(db):
    return make_user("020 123 4567", first_name="Aminata", last_name="Kamara")


@pytest.fixture
def other_user(db):
    return make_user("076 555 111", first_name="Ibrahim", last_name="Sesay")


@pytest.fixture
def admin_user(db):
    return make_user("030 999 000", first_name="Fatmata", last_name="Conteh", admin=True)


@pytest.fixture
def owner_identity(owner):
    return identity_for_user(owner)


@pytest.fixture
def other_identity(other_user):
    return identity_for_user(other_user)


@pytest.fixture
def admin_identity(admin_user):
    return identity_for_user(admin_user)


@pytest.fixture
def anon_client():
    return APIClient()


@pytest.fixture
def owner_client(owner):
    return client_for(owner)


@pytest.fixture
def other_client(other_user):
    return client_for(other_user)


@pytest.fixture
def admin_client(admin_user):
    return client_for(admin_user)


@pytest.fixture
def coordinate_post(owner_identity):
    from testimony_core.posts.builders import build_coordinate_draft
    from testimony_core.posts.services import PostService

    draft = build_coordinate_draft(
        coordinates=SAMPLE_POINT,
        four_corners=SAMPLE_CORNERS,
        title="Family farm",
        description="Boundary of the family farm",
    )
    return PostService.submit_coordinates(owner=owner_identity, draft=draft)
