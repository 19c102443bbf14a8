from fastapi import APIRouter, Depends
from ims.database.supabase_client import get_supabase, get_service_supabase
from ims.config.permissions_config import get_permission_matrix
from ims.core.access import Session, UserRole
from ims.core.dependencies import require_permission, require_role
from ims.modules.users.schemas import (
    UserCreate, UserUpdate, UserResponse, UserPermissionsUpdate, UserStatusUpdate
)
from ims.modules.users.service import UserService
from supabase import Client
from typing import Any, Dict, List

router = APIRouter(prefix="/users", tags=["users"])


def get_user_service(
    supabase: Client = Depends(get_supabase),
    admin_supabase: Client = Depends(get_service_supabase)
) -> UserService:
    return UserService(supabase, admin_supabase)


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(
    user_data: UserCreate,
    session: Session = Depends(require_role(UserRole.SUPER_ADMIN)),
    service: UserService = Depends(get_user_service)
):
    """Create a user with the default permissions of its role (super_admin only)"""
    return service.create_user(user_data)


@router.get("", response_model=List[UserResponse])
async def list_users(
    limit: int = 10,
    offset: int = 0,
    session: Session = Depends(require_permission("settings", "userManagement")),
    service: UserService = Depends(get_user_service)
):
    return service.list_users(limit=limit, offset=offset)


@router.get("/roles", response_model=Dict[str, Dict[str, Any]])
async def get_role_permissions(
    session: Session = Depends(require_permission("settings", "userManagement"))
):
    """Default permission payload of every role"""
    return get_permission_matrix()


@router.get("/by-role/{role}", response_model=List[UserResponse])
async def list_users_by_role(
    role: UserRole,
    session: Session = Depends(require_permission("settings", "userManagement")),
    service: UserService = Depends(get_user_service)
):
    return service.get_users_by_role(role)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    session: Session = Depends(require_permission("settings", "userManagement")),
    service: UserService = Depends(get_user_service)
):
    return service.get_user_by_id(user_id)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    user_data: UserUpdate,
    session: Session = Depends(require_permission("settings", "userManagement")),
    service: UserService = Depends(get_user_service)
):
    return service.update_user(user_id, user_data)


@router.put("/{user_id}/permissions", response_model=UserResponse)
async def update_user_permissions(
    user_id: str,
    permissions_data: UserPermissionsUpdate,
    session: Session = Depends(require_role(UserRole.SUPER_ADMIN)),
    service: UserService = Depends(get_user_service)
):
    """Merge module permissions into a user's profile (super_admin only).
    Takes effect at the user's next login."""
    return service.update_user_permissions(user_id, permissions_data.permissions)


@router.put("/{user_id}/status", response_model=UserResponse)
async def set_user_status(
    user_id: str,
    status_data: UserStatusUpdate,
    session: Session = Depends(require_role(UserRole.SUPER_ADMIN)),
    service: UserService = Depends(get_user_service)
):
    return service.set_user_status(user_id, status_data.is_active)
