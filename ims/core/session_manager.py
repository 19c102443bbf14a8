import asyncio
import json
import logging
import secrets
from typing import Optional, Union

from pydantic import ValidationError

from ims.config.settings import settings
from ims.core.access import Session, UserRole, has_permission, is_role
from ims.core.errors import SessionStorageError
from ims.core.session_store import JsonFileStore

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Owns the single active session of the process.

    The session is unknown until restore_on_start() has completed; until then
    `current` is None and every permission check is denied.

    The access token issued at login is stored next to the session payload
    (under "<storage_key>.accessToken"). HTTP callers must present it to act
    as the session; see session_for_token().
    """

    def __init__(self, store: JsonFileStore, storage_key: Optional[str] = None):
        self.store = store
        self.storage_key = storage_key or settings.session_storage_key
        self.token_key = f"{self.storage_key}.accessToken"
        self._session: Optional[Session] = None
        self._access_token: Optional[str] = None
        self._restored = False
        self._lock = asyncio.Lock()

    @property
    def current(self) -> Optional[Session]:
        return self._session

    @property
    def is_restored(self) -> bool:
        return self._restored

    def session_for_token(self, token: Optional[str]) -> Optional[Session]:
        """The active session if token is the one it was issued with, else None"""
        if self._session is None or not self._access_token or not token:
            return None
        if not secrets.compare_digest(token.encode(), self._access_token.encode()):
            return None
        return self._session

    async def restore_on_start(self) -> Optional[Session]:
        """Load the persisted session, if any. Never raises."""
        async with self._lock:
            try:
                raw = await self.store.get_item(self.storage_key)
                if raw is not None:
                    self._session = Session.model_validate(json.loads(raw))
                    self._access_token = await self.store.get_item(self.token_key)
                    logger.info(f"Restored session for {self._session.email}")
            except (SessionStorageError, ValidationError, ValueError, RecursionError) as e:
                logger.warning(f"Failed to load user session: {e}")
                self._session = None
                self._access_token = None
            finally:
                self._restored = True
            return self._session

    async def login(self, session: Session, access_token: Optional[str] = None) -> Session:
        """Persist the session and make it active. Storage failures propagate."""
        async with self._lock:
            try:
                await self.store.set_items({
                    self.storage_key: json.dumps(session.to_payload()),
                    self.token_key: access_token or "",
                })
            except SessionStorageError as e:
                logger.error(f"Failed to save user session: {e}")
                raise
            self._session = session
            self._access_token = access_token
            self._restored = True
            logger.info(f"Session established for {session.email} ({session.role.value})")
            return session

    async def logout(self):
        """Clear the active and persisted session. Storage failures propagate."""
        async with self._lock:
            previous = self._session
            self._session = None
            self._access_token = None
            try:
                await self.store.remove_items([self.storage_key, self.token_key])
            except SessionStorageError as e:
                logger.error(f"Failed to clear user session: {e}")
                raise
            if previous is not None:
                logger.info(f"Session cleared for {previous.email}")

    def has_permission(self, module: str, action: str = "view") -> bool:
        return has_permission(self._session, module, action)

    def is_role(self, role: Union[UserRole, str]) -> bool:
        return is_role(self._session, role)
