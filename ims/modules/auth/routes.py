from fastapi import APIRouter, Depends
from ims.database.supabase_client import get_supabase
from ims.modules.auth.schemas import (
    LoginRequest, LoginResponse, SessionResponse, PermissionCheckResponse, RoleCheckResponse
)
from ims.modules.auth.service import AuthService
from ims.core.access import Session, has_permission, is_role
from ims.core.dependencies import get_session_manager, get_current_session, require_session
from ims.core.session_manager import SessionManager
from supabase import Client
from typing import Optional

router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


@router.post("/login", response_model=LoginResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service),
    manager: SessionManager = Depends(get_session_manager)
):
    """Login, persist the session and return the bearer token that unlocks it"""
    authenticated = service.authenticate(login_data)
    await manager.login(authenticated.session, authenticated.access_token)
    service.record_login(authenticated.user_id)
    return LoginResponse(
        **SessionResponse.from_session(authenticated.session).model_dump(),
        access_token=authenticated.access_token
    )


@router.post("/logout", status_code=200)
async def logout(
    session: Session = Depends(require_session),
    service: AuthService = Depends(get_auth_service),
    manager: SessionManager = Depends(get_session_manager)
):
    """Clear the persisted session and sign out"""
    try:
        await manager.logout()
    finally:
        service.sign_out()
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=SessionResponse)
async def get_current_user(session: Session = Depends(require_session)):
    """Current session with its permissions (for frontend UI)"""
    return SessionResponse.from_session(session)


@router.get("/permissions/{module}", response_model=PermissionCheckResponse)
async def check_permission(
    module: str,
    action: str = "view",
    session: Optional[Session] = Depends(get_current_session)
):
    """Whether the current session may perform module:action; false when logged out"""
    return PermissionCheckResponse(
        module=module,
        action=action,
        allowed=has_permission(session, module, action)
    )


@router.get("/roles/{role}", response_model=RoleCheckResponse)
async def check_role(
    role: str,
    session: Optional[Session] = Depends(get_current_session)
):
    return RoleCheckResponse(role=role, matches=is_role(session, role))
