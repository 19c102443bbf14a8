import pytest

from ims.config.permissions_config import (
    MODULES, ROLE_GRANTS, get_default_permissions, get_permission_matrix
)
from ims.core.access import Session, UserRole, has_permission


def _session(role):
    return Session(email=f"{role}@x.com", name=role, role=role, permissions=get_default_permissions(role))


@pytest.mark.parametrize("role", [r.value for r in UserRole])
def test_every_module_present_with_every_action(role):
    permissions = get_default_permissions(role)
    assert set(permissions) == set(MODULES)
    for module_name, config in MODULES.items():
        if config["actions"] is None:
            assert isinstance(permissions[module_name], bool)
        else:
            assert set(permissions[module_name]) == set(config["actions"])


def test_super_admin_has_everything():
    session = _session("super_admin")
    for module_name, config in MODULES.items():
        for action in config["actions"] or ["view"]:
            assert has_permission(session, module_name, action) is True


def test_admin_cannot_delete_or_manage_users():
    session = _session("admin")
    assert has_permission(session, "products", "edit") is True
    assert has_permission(session, "products", "delete") is False
    assert has_permission(session, "sales", "invoice") is True
    assert has_permission(session, "settings", "userManagement") is False
    assert has_permission(session, "reports", "export") is True


def test_sales_manager_reads_products_only():
    session = _session("sales_manager")
    assert has_permission(session, "products", "view") is True
    assert has_permission(session, "products", "add") is False
    assert has_permission(session, "inventory", "transfer") is True
    assert has_permission(session, "settings", "view") is False


def test_investor_is_read_only():
    session = _session("investor")
    assert has_permission(session, "dashboard") is True
    assert has_permission(session, "reports", "view") is True
    assert has_permission(session, "reports", "export") is False
    assert has_permission(session, "customers", "view") is False


def test_unknown_role_gets_dashboard_only():
    permissions = get_default_permissions("cashier")
    assert permissions["dashboard"] is True
    assert permissions["products"] == {"view": False, "add": False, "edit": False, "delete": False}


def test_matrix_covers_all_roles():
    matrix = get_permission_matrix()
    assert set(matrix) == set(ROLE_GRANTS) == {r.value for r in UserRole}
    assert matrix["admin"] == get_default_permissions("admin")
