"""
Tests for session model and access-control resolution.
"""
import pytest
from pydantic import ValidationError

from ims.core.access import (
    ActionGate, FlagGate, Session, UserRole, has_permission, is_role, module_gate
)


@pytest.fixture
def products_session():
    return Session(
        email="admin@serranotex.com",
        name="Store Admin",
        role="admin",
        permissions={"products": {"view": True, "edit": False}, "dashboard": True},
    )


class TestHasPermission:
    def test_products_scenario(self, products_session):
        assert has_permission(products_session, "products", "view") is True
        assert has_permission(products_session, "products", "edit") is False
        assert has_permission(products_session, "products", "delete") is False
        assert has_permission(products_session, "sales", "view") is False

    def test_default_action_is_view(self, products_session):
        assert has_permission(products_session, "products") is True

    @pytest.mark.parametrize("action", ["view", "add", "delete", "anything"])
    def test_flag_module_ignores_action(self, products_session, action):
        assert has_permission(products_session, "dashboard", action) is True

    def test_false_flag_denies_every_action(self):
        session = Session(email="i@x.com", name="I", role="investor", permissions={"dashboard": False})
        assert has_permission(session, "dashboard") is False
        assert has_permission(session, "dashboard", "edit") is False

    @pytest.mark.parametrize("module", ["sales", "users", "", "Products"])
    def test_missing_module_denied(self, products_session, module):
        assert has_permission(products_session, module, "view") is False

    def test_no_session_denied(self):
        assert has_permission(None, "dashboard") is False
        assert has_permission(None, "products", "view") is False

    def test_malformed_entries_fail_closed(self):
        session = Session(
            email="a@x.com",
            name="A",
            role="admin",
            permissions={
                "reports": "yes",
                "sales": {"view": 1, "add": None, "edit": True},
                "samples": ["view"],
            },
        )
        assert has_permission(session, "reports") is False
        assert has_permission(session, "sales", "view") is False
        assert has_permission(session, "sales", "add") is False
        assert has_permission(session, "sales", "edit") is True
        assert has_permission(session, "samples", "view") is False

    def test_repeated_checks_are_stable(self, products_session):
        first = [has_permission(products_session, "products", a) for a in ("view", "edit", "delete")]
        second = [has_permission(products_session, "products", a) for a in ("view", "edit", "delete")]
        assert first == second


class TestIsRole:
    def test_matches_string_and_enum(self, products_session):
        assert is_role(products_session, "admin") is True
        assert is_role(products_session, UserRole.ADMIN) is True
        assert is_role(products_session, "super_admin") is False

    def test_no_session(self):
        assert is_role(None, "admin") is False
        assert is_role(None, UserRole.SUPER_ADMIN) is False


class TestModuleGate:
    def test_resolves_flag_and_action_gates(self, products_session):
        assert module_gate(products_session, "dashboard") == FlagGate(True)
        gate = module_gate(products_session, "products")
        assert isinstance(gate, ActionGate)
        assert gate.allows("view") is True
        assert gate.allows("delete") is False

    def test_unusable_entries_have_no_gate(self, products_session):
        assert module_gate(products_session, "sales") is None
        assert module_gate(None, "products") is None


class TestSession:
    def test_unknown_role_rejected(self):
        with pytest.raises(ValidationError):
            Session(email="a@x.com", name="A", role="cashier", permissions={})

    def test_session_is_frozen(self, products_session):
        with pytest.raises(ValidationError):
            products_session.role = UserRole.SUPER_ADMIN

    def test_permissions_cannot_be_mutated(self, products_session):
        with pytest.raises(TypeError):
            products_session.permissions["sales"] = True
        with pytest.raises(TypeError):
            products_session.permissions["products"]["edit"] = True
        assert has_permission(products_session, "products", "edit") is False

    def test_source_payload_changes_do_not_leak(self):
        payload = {"products": {"view": False}}
        session = Session(email="a@x.com", name="A", role="admin", permissions=payload)
        payload["products"]["view"] = True
        assert has_permission(session, "products", "view") is False

    def test_payload_uses_stored_keys(self, products_session):
        payload = products_session.to_payload()
        assert set(payload) == {"email", "name", "role", "permissions", "loginTime"}
        assert payload["role"] == "admin"
        assert payload["permissions"] == {"products": {"view": True, "edit": False}, "dashboard": True}
        assert isinstance(payload["loginTime"], str)

    def test_validates_stored_payload(self, products_session):
        restored = Session.model_validate(products_session.to_payload())
        assert restored.email == products_session.email
        assert restored.role is UserRole.ADMIN
        assert restored.login_time == products_session.login_time
        assert has_permission(restored, "products", "view") is True
