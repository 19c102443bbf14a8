"""
Session model and access-control resolution.

A session carries the permission payload issued for the user at login. The
payload comes from the user's profile row, so its shape is checked at
resolution time: every module maps either to a boolean (whole-module gate)
or to a mapping of action name -> boolean. Anything missing or of an
unexpected shape resolves to "denied".
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class UserRole(str, Enum):
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    SALES_MANAGER = "sales_manager"
    INVESTOR = "investor"


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _thaw(item) for key, item in value.items()}
    return value


class Session(BaseModel):
    """The authenticated user of this process, from login to logout."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    email: str
    name: str
    role: UserRole
    permissions: Dict[str, Any] = Field(default_factory=dict, validate_default=True)
    login_time: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        alias="loginTime",
    )

    @field_validator("permissions", mode="after")
    @classmethod
    def freeze_permissions(cls, value: Dict[str, Any]) -> Mapping[str, Any]:
        return _freeze(value)

    @field_serializer("permissions")
    def serialize_permissions(self, value: Mapping[str, Any]) -> Dict[str, Any]:
        return _thaw(value)

    def to_payload(self) -> Dict[str, Any]:
        """JSON-compatible payload as persisted in session storage"""
        return self.model_dump(mode="json", by_alias=True)


@dataclass(frozen=True)
class FlagGate:
    """Whole-module permission; the requested action is irrelevant."""
    allowed: bool


@dataclass(frozen=True)
class ActionGate:
    """Per-action permissions of a module."""
    actions: Mapping[str, Any]

    def allows(self, action: str) -> bool:
        allowed = self.actions.get(action, False)
        return allowed if isinstance(allowed, bool) else False


ModuleGate = Union[FlagGate, ActionGate]


def module_gate(session: Optional[Session], module: str) -> Optional[ModuleGate]:
    """Resolve the permission entry of a module, or None when it cannot be used."""
    if session is None:
        return None
    value = session.permissions.get(module)
    if isinstance(value, bool):
        return FlagGate(value)
    if isinstance(value, Mapping):
        return ActionGate(value)
    return None


def has_permission(session: Optional[Session], module: str, action: str = "view") -> bool:
    gate = module_gate(session, module)
    if isinstance(gate, FlagGate):
        return gate.allowed
    if isinstance(gate, ActionGate):
        return gate.allows(action)
    return False


def is_role(session: Optional[Session], role: Union[UserRole, str]) -> bool:
    if session is None:
        return False
    return session.role == role
