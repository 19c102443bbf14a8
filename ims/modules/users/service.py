from supabase import Client
from ims.config.permissions_config import get_default_permissions
from ims.core.access import UserRole
from ims.core.errors import http_error_from_supabase
from ims.modules.users.schemas import UserCreate, UserUpdate, UserResponse
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, supabase: Client, admin_supabase: Optional[Client] = None):
        self.supabase = supabase
        # Service-role client for auth admin calls; falls back to the regular client
        self.admin_supabase = admin_supabase or supabase

    def create_user(self, user_data: UserCreate) -> UserResponse:
        """Create an auth user and its profile with the role's default permissions"""
        try:
            auth_response = self.admin_supabase.auth.admin.create_user({
                "email": user_data.email,
                "password": user_data.password,
                "email_confirm": True
            })

            if not auth_response.user:
                raise HTTPException(status_code=400, detail="Failed to create auth user")

            result = self.supabase.table("users").insert({
                "id": auth_response.user.id,
                "full_name": user_data.full_name,
                "email": user_data.email.lower(),
                "phone": user_data.phone,
                "role": user_data.role.value,
                "permissions": get_default_permissions(user_data.role.value),
                "assigned_locations": user_data.assigned_locations,
                "is_active": True
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create user")

            logger.info(f"Created user {user_data.email.lower()} with role {user_data.role.value}")
            return UserResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if "already registered" in error_message.lower() or "already exists" in error_message.lower():
                raise HTTPException(status_code=409, detail="User already exists")
            raise http_error_from_supabase(e)

    def get_user_by_id(self, user_id: str) -> UserResponse:
        """Get user profile by ID"""
        try:
            result = self.supabase.table("users")\
                .select("*")\
                .eq("id", user_id)\
                .single()\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="User not found")

            return UserResponse(**result.data)
        except Exception as e:
            raise http_error_from_supabase(e)

    def get_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        """Get the active profile row for an email, or None"""
        try:
            result = self.supabase.table("users")\
                .select("*")\
                .eq("email", email.lower())\
                .eq("is_active", True)\
                .limit(1)\
                .execute()

            if not result.data:
                return None

            return result.data[0]
        except Exception as e:
            raise http_error_from_supabase(e)

    def _update(self, user_id: str, update_data: Dict[str, Any]) -> UserResponse:
        update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
        result = self.supabase.table("users")\
            .update(update_data)\
            .eq("id", user_id)\
            .execute()

        if not result.data:
            raise HTTPException(status_code=404, detail="User not found")

        return UserResponse(**result.data[0])

    def update_user(self, user_id: str, user_data: UserUpdate) -> UserResponse:
        """Update user profile"""
        try:
            update_data = user_data.model_dump(exclude_none=True, mode="json")
            if "email" in update_data:
                update_data["email"] = update_data["email"].lower()
            return self._update(user_id, update_data)
        except Exception as e:
            raise http_error_from_supabase(e)

    def update_user_permissions(self, user_id: str, permissions: Dict[str, Any]) -> UserResponse:
        """Merge module permissions into the user's stored permissions"""
        try:
            user = self.get_user_by_id(user_id)
            updated_permissions = {**user.permissions, **permissions}
            logger.info(f"Updating permissions of user {user_id}: {sorted(permissions)}")
            return self._update(user_id, {"permissions": updated_permissions})
        except Exception as e:
            raise http_error_from_supabase(e)

    def set_user_status(self, user_id: str, is_active: bool) -> UserResponse:
        """Activate/deactivate user"""
        try:
            return self._update(user_id, {"is_active": is_active})
        except Exception as e:
            raise http_error_from_supabase(e)

    def record_login(self, user_id: str):
        """Stamp last_login; failures are logged only"""
        try:
            self.supabase.table("users")\
                .update({"last_login": datetime.now(timezone.utc).isoformat()})\
                .eq("id", user_id)\
                .execute()
        except Exception as e:
            logger.warning(f"Failed to record login for user {user_id}: {e}")

    def get_users_by_role(self, role: UserRole) -> List[UserResponse]:
        """Get active users by role"""
        try:
            result = self.supabase.table("users")\
                .select("*")\
                .eq("role", role.value)\
                .eq("is_active", True)\
                .order("full_name")\
                .execute()
            return [UserResponse(**user) for user in result.data]
        except Exception as e:
            raise http_error_from_supabase(e)

    def list_users(self, limit: int = 10, offset: int = 0) -> List[UserResponse]:
        try:
            result = self.supabase.table("users")\
                .select("*")\
                .order("created_at", desc=True)\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [UserResponse(**user) for user in result.data]
        except Exception as e:
            raise http_error_from_supabase(e)
