from types import SimpleNamespace

import pytest
from fastapi import HTTPException

from ims.core.access import UserRole
from ims.core.errors import http_error_from_supabase
from ims.modules.users.schemas import UserCreate, UserUpdate
from ims.modules.users.service import UserService

from conftest import FakeAPIError, make_profile


@pytest.fixture
def service(fake_supabase):
    return UserService(fake_supabase)


def test_create_user_seeds_role_permissions(service, fake_supabase):
    fake_supabase.auth.admin.create_user.return_value = SimpleNamespace(
        user=SimpleNamespace(id="u-1", email="sm@serranotex.com")
    )
    fake_supabase.tables["users"] = [{"created_at": "2026-02-01T10:00:00+00:00"}]

    user = service.create_user(UserCreate(
        full_name="Sales Manager",
        email="SM@SerranoTex.com",
        password="secret123",
        role=UserRole.SALES_MANAGER,
    ))

    inserted = fake_supabase.queries[-1].payload
    assert inserted["email"] == "sm@serranotex.com"
    assert inserted["role"] == "sales_manager"
    assert inserted["permissions"]["products"] == {"view": True, "add": False, "edit": False, "delete": False}
    assert user.id == "u-1"
    assert user.role is UserRole.SALES_MANAGER


def test_create_existing_user_conflicts(service, fake_supabase):
    fake_supabase.auth.admin.create_user.side_effect = Exception("User already registered")

    with pytest.raises(HTTPException) as exc:
        service.create_user(UserCreate(
            full_name="Dup", email="dup@x.com", password="secret123", role=UserRole.ADMIN
        ))
    assert exc.value.status_code == 409


def test_get_user_by_id_not_found(service):
    with pytest.raises(HTTPException) as exc:
        service.get_user_by_id("missing")
    assert exc.value.status_code == 404


def test_get_user_by_email_lowercases(service, fake_supabase):
    fake_supabase.tables["users"] = [make_profile()]

    profile = service.get_user_by_email("Admin@SerranoTex.com")

    assert profile["role"] == "admin"
    assert ("eq", ("email", "admin@serranotex.com"), {}) in fake_supabase.queries[-1].calls
    assert ("eq", ("is_active", True), {}) in fake_supabase.queries[-1].calls


def test_get_user_by_email_missing(service):
    assert service.get_user_by_email("nobody@x.com") is None


def test_update_permissions_merges_modules(service, fake_supabase):
    fake_supabase.tables["users"] = [make_profile()]

    user = service.update_user_permissions(
        make_profile()["id"],
        {"products": {"view": True, "add": True, "edit": True, "delete": True}}
    )

    assert user.permissions["products"]["delete"] is True
    assert user.permissions["sales"] == make_profile()["permissions"]["sales"]


def test_update_user_normalises_email(service, fake_supabase):
    fake_supabase.tables["users"] = [make_profile()]

    user = service.update_user(make_profile()["id"], UserUpdate(email="New@SerranoTex.com"))

    assert user.email == "new@serranotex.com"
    assert "updated_at" in fake_supabase.queries[-1].payload


def test_set_status_unknown_user(service):
    with pytest.raises(HTTPException) as exc:
        service.set_user_status("missing", False)
    assert exc.value.status_code == 404


@pytest.mark.parametrize("error,status", [
    (FakeAPIError("no rows", code="PGRST116"), 404),
    (FakeAPIError("duplicate key value", code="23505"), 409),
    (FakeAPIError("permission denied", code="42501"), 403),
    (FakeAPIError("new row violates row-level security policy"), 403),
    (FakeAPIError("JWT expired"), 401),
    (FakeAPIError("something else"), 500),
])
def test_supabase_error_mapping(error, status):
    assert http_error_from_supabase(error).status_code == status


def test_http_exceptions_pass_through():
    original = HTTPException(status_code=404, detail="User not found")
    assert http_error_from_supabase(original) is original
