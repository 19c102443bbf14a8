"""
Permissions and Roles Configuration
This config defines the permission matrix for all modules and the default
grants of each user role. The expanded matrix is written into a user's
profile when the user is created and becomes the session permission payload
at login.
"""

from typing import Dict, List, Union

# Define modules and their actions. A module without actions is a flag module:
# its permission is a single boolean (e.g. the dashboard).
MODULES = {
    "dashboard": {
        "actions": None,
        "description": "Dashboard overview"
    },
    "products": {
        "actions": ["view", "add", "edit", "delete"],
        "description": "Product catalogue management"
    },
    "inventory": {
        "actions": ["view", "add", "edit", "delete", "transfer"],
        "description": "Stock and lot management"
    },
    "sales": {
        "actions": ["view", "add", "edit", "delete", "invoice"],
        "description": "Sales and invoicing"
    },
    "customers": {
        "actions": ["view", "add", "edit", "delete"],
        "description": "Customer management"
    },
    "suppliers": {
        "actions": ["view", "add", "edit", "delete"],
        "description": "Supplier management"
    },
    "samples": {
        "actions": ["view", "add", "edit", "delete"],
        "description": "Sample tracking"
    },
    "reports": {
        "actions": ["view", "export"],
        "description": "Reports"
    },
    "notifications": {
        "actions": ["view", "manage"],
        "description": "Notifications"
    },
    "activityLogs": {
        "actions": ["view"],
        "description": "Activity logs"
    },
    "settings": {
        "actions": ["view", "userManagement", "systemSettings"],
        "description": "Application settings and user management"
    },
    "help": {
        "actions": ["view"],
        "description": "Help center"
    }
}

_ALL = "*"

# Granted actions per role. "*" grants every action of the module; modules
# left out are denied entirely.
ROLE_GRANTS = {
    "super_admin": {module: _ALL for module in MODULES},
    "admin": {
        "dashboard": _ALL,
        "products": ["view", "add", "edit"],
        "inventory": ["view", "add", "edit", "transfer"],
        "sales": ["view", "add", "edit", "invoice"],
        "customers": ["view", "add", "edit"],
        "suppliers": ["view", "add", "edit"],
        "samples": ["view", "add", "edit"],
        "reports": _ALL,
        "notifications": ["view"],
        "activityLogs": _ALL,
        "settings": ["view"],
        "help": _ALL,
    },
    "sales_manager": {
        "dashboard": _ALL,
        "products": ["view"],
        "inventory": ["view", "transfer"],
        "sales": ["view", "add", "edit", "invoice"],
        "customers": ["view", "add", "edit"],
        "suppliers": ["view"],
        "samples": ["view", "add", "edit"],
        "reports": ["view"],
        "notifications": ["view"],
        "help": _ALL,
    },
    "investor": {
        "dashboard": _ALL,
        "reports": ["view"],
        "notifications": ["view"],
        "help": _ALL,
    },
}


PermissionPayload = Dict[str, Union[bool, Dict[str, bool]]]


def get_default_permissions(role: str) -> PermissionPayload:
    """
    Expand the grants of a role into a full permission payload.
    Every module is present; non-granted actions are explicitly False.
    An unknown role gets the dashboard only.
    Format: {
        "dashboard": True,
        "products": {"view": True, "add": False, ...},
        ...
    }
    """
    grants = ROLE_GRANTS.get(role, {"dashboard": _ALL})
    permissions: PermissionPayload = {}

    for module_name, module_config in MODULES.items():
        granted = grants.get(module_name, [])
        actions: List[str] = module_config["actions"]

        if actions is None:
            permissions[module_name] = bool(granted)
            continue

        permissions[module_name] = {
            action: granted == _ALL or action in granted
            for action in actions
        }

    return permissions


def get_permission_matrix() -> Dict[str, PermissionPayload]:
    """Returns the default permission payload of every role, keyed by role name"""
    return {role: get_default_permissions(role) for role in ROLE_GRANTS}
