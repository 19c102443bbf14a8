from pydantic import BaseModel, EmailStr
from typing import Any, Dict
from datetime import datetime
from ims.core.access import Session, UserRole


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class SessionResponse(BaseModel):
    email: str
    name: str
    role: UserRole
    permissions: Dict[str, Any]
    login_time: datetime

    @classmethod
    def from_session(cls, session: Session) -> "SessionResponse":
        return cls(
            email=session.email,
            name=session.name,
            role=session.role,
            permissions=session.to_payload()["permissions"],
            login_time=session.login_time
        )


class PermissionCheckResponse(BaseModel):
    module: str
    action: str
    allowed: bool


class RoleCheckResponse(BaseModel):
    role: str
    matches: bool


class LoginResponse(SessionResponse):
    access_token: str
    token_type: str = "bearer"
