from io import StringIO

import pytest
from django.core.management import CommandError, call_command

from testimony_core.audit.models import AuditLogEntry
from testimony_core.iam.models import AdminMembership, UserProfile

pytestmark = pytest.mark.django_db


def test_bootstrap_creates_first_admin():
    out = StringIO()
    call_command("bootstrap_admin", "--phone", "076 123 456", "--password", "secret1", "--first-name", "Root", stdout=out)

    profile = UserProfile.objects.get(phone="+23276123456")
    assert profile.user.check_password("secret1")
    assert AdminMembership.objects.filter(user_id=profile.user_id).exists()
    assert "is now an admin" in out.getvalue()
    # no session actor, so nothing is audited
    assert AuditLogEntry.objects.count() == 0


def test_bootstrap_promotes_existing_user_and_is_rerunnable(owner):
    call_command("bootstrap_admin", "--phone", "+232201234567", stdout=StringIO())
    out = StringIO()
    call_command("bootstrap_admin", "--phone", "020 123 4567", stdout=out)

    assert AdminMembership.objects.filter(user_id=owner.id).count() == 1
    assert "already an admin" in out.getvalue()


def test_bootstrap_requires_password_for_new_account():
    with pytest.raises(CommandError):
        call_command("bootstrap_admin", "--phone", "076 123 456", stdout=StringIO())

    assert not UserProfile.objects.exists()
