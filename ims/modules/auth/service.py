import logging
from dataclasses import dataclass
from supabase import Client
from pydantic import ValidationError
from ims.core.access import Session
from ims.modules.auth.schemas import LoginRequest
from ims.modules.users.service import UserService
from fastapi import HTTPException

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthenticatedUser:
    session: Session
    user_id: str
    access_token: str


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def authenticate(self, login_data: LoginRequest) -> AuthenticatedUser:
        """Verify credentials with Supabase Auth and build a session from the user's profile"""
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })

            if not auth_response.user or not auth_response.session:
                raise HTTPException(status_code=401, detail="Invalid credentials")
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if "invalid" in error_message.lower() or "credentials" in error_message.lower():
                raise HTTPException(status_code=401, detail="Invalid email or password")
            raise HTTPException(status_code=500, detail=f"Login failed: {error_message}")

        profile = UserService(self.supabase).get_user_by_email(login_data.email)
        if profile is None:
            logger.warning(f"Login without an active profile: {login_data.email}")
            raise HTTPException(status_code=403, detail="No active user profile for this account")

        try:
            session = Session(
                email=profile["email"],
                name=profile.get("full_name") or profile["email"],
                role=profile.get("role"),
                permissions=profile.get("permissions") or {}
            )
        except ValidationError as e:
            logger.error(f"Unusable profile for {login_data.email}: {e}")
            raise HTTPException(status_code=403, detail="User role not recognised")

        return AuthenticatedUser(
            session=session,
            user_id=profile["id"],
            access_token=auth_response.session.access_token
        )

    def record_login(self, user_id: str):
        UserService(self.supabase).record_login(user_id)

    def sign_out(self) -> bool:
        """Sign out of Supabase Auth; the local session is cleared separately"""
        try:
            self.supabase.auth.sign_out()
            return True
        except Exception as e:
            logger.warning(f"Supabase sign out failed: {e}")
            return False
