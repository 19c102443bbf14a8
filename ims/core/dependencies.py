"""
Core dependencies for route protection and permission checking
"""

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from ims.core.access import Session, UserRole, has_permission, is_role
from ims.core.session_manager import SessionManager
from ims.modules.setup.wizard import SetupWizard
from typing import Optional, Union
import logging

logger = logging.getLogger(__name__)

# auto_error off: a missing header is answered with 401 by require_session
security = HTTPBearer(auto_error=False)


def get_session_manager(request: Request) -> SessionManager:
    """Session manager owned by the running application (created at startup)"""
    return request.app.state.session_manager


def get_setup_wizard(request: Request) -> SetupWizard:
    return request.app.state.setup_wizard


def get_current_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    manager: SessionManager = Depends(get_session_manager)
) -> Optional[Session]:
    """Active session for the caller's bearer token, or None"""
    token = credentials.credentials if credentials else None
    return manager.session_for_token(token)


def require_session(
    session: Optional[Session] = Depends(get_current_session)
) -> Session:
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not logged in",
            headers={"WWW-Authenticate": "Bearer"}
        )
    return session


def require_permission(module: str, action: str = "view"):
    """Factory function to create permission check dependency"""
    def check_permission(session: Session = Depends(require_session)) -> Session:
        """Dependency to check if the session grants module:action"""
        if not has_permission(session, module, action):
            logger.info(f"Denied {module}:{action} for {session.email}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required: {module}:{action}"
            )
        return session
    return check_permission


def require_role(role: Union[UserRole, str]):
    """Factory function to create role check dependency"""
    role_name = role.value if isinstance(role, UserRole) else role

    def check_role(session: Session = Depends(require_session)) -> Session:
        if not is_role(session, role):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires role: {role_name}"
            )
        return session
    return check_role
