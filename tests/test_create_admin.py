"""Bootstrap administrator command."""

from easyhealth.core.access import Role
from easyhealth.core.security import verify_password
from easyhealth.features.auth.models import Profile
from easyhealth.features.auth.service import AuthService
from easyhealth.scripts.create_admin import parse_args


async def test_ensure_admin_creates_once():
    profile, created = await AuthService.ensure_admin("Root@Example.com", "admin123", "Root")
    again, created_again = await AuthService.ensure_admin("root@example.com", "other", "Root")

    assert created is True
    assert created_again is False
    assert again.id == profile.id
    assert profile.role == Role.ADMIN
    assert profile.email == "root@example.com"
    assert verify_password("admin123", profile.password_hash)
    assert await Profile.find_all().count() == 1


async def test_ensure_admin_leaves_existing_profile_untouched(make_account):
    existing = await make_account(Role.PATIENT, email="taken@example.com")

    profile, created = await AuthService.ensure_admin("taken@example.com", "admin123", "Root")

    assert created is False
    assert profile.id == existing.profile.id
    assert profile.role == Role.PATIENT


async def test_bootstrapped_admin_can_log_in(client):
    await AuthService.ensure_admin("root@example.com", "admin123", "Root")

    response = await client.post(
        "/api/auth/login",
        json={"email": "root@example.com", "password": "admin123"},
    )

    assert response.status_code == 200
    assert response.json()["user"]["role"] == "admin"


def test_parse_args_overrides_settings():
    args = parse_args(["--email", "ops@example.com", "--full-name", "Ops"])

    assert args.email == "ops@example.com"
    assert args.full_name == "Ops"
    assert args.password
