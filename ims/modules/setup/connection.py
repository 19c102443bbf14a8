import logging
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool
from supabase import Client

logger = logging.getLogger(__name__)


class ConnectionTestResult(BaseModel):
    success: bool
    message: str
    details: Optional[Any] = None
    timestamp: datetime


class ConnectionReport(BaseModel):
    overall: bool
    connection: ConnectionTestResult
    auth: ConnectionTestResult
    permissions: ConnectionTestResult


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ConnectionTester:
    """Diagnostics for the Supabase backend. Tests report failures, never raise."""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    async def test_connection(self) -> ConnectionTestResult:
        try:
            await run_in_threadpool(
                lambda: self.supabase.table("users").select("id").limit(1).execute()
            )
            return ConnectionTestResult(
                success=True,
                message="Successfully connected to Supabase",
                timestamp=_now()
            )
        except Exception as e:
            return ConnectionTestResult(
                success=False,
                message="Failed to connect to Supabase",
                details=str(e),
                timestamp=_now()
            )

    async def test_auth(self) -> ConnectionTestResult:
        try:
            session = await run_in_threadpool(self.supabase.auth.get_session)
            return ConnectionTestResult(
                success=True,
                message="User is authenticated" if session else "No active session (expected for initial setup)",
                details={"has_session": bool(session)},
                timestamp=_now()
            )
        except Exception as e:
            return ConnectionTestResult(
                success=False,
                message="Auth test error",
                details=str(e),
                timestamp=_now()
            )

    async def test_permissions(self) -> ConnectionTestResult:
        try:
            result = await run_in_threadpool(
                lambda: self.supabase.rpc("list_enums").execute()
            )
            return ConnectionTestResult(
                success=True,
                message="Database permissions are working",
                details={"enums_found": len(result.data or [])},
                timestamp=_now()
            )
        except Exception as e:
            return ConnectionTestResult(
                success=False,
                message="Permission test failed",
                details=str(e),
                timestamp=_now()
            )

    async def test_table_access(self, table_name: str) -> ConnectionTestResult:
        try:
            result = await run_in_threadpool(
                lambda: self.supabase.table(table_name).select("*").limit(1).execute()
            )
            return ConnectionTestResult(
                success=True,
                message=f"Successfully accessed table '{table_name}'",
                details={"record_count": len(result.data or [])},
                timestamp=_now()
            )
        except Exception as e:
            if getattr(e, "code", None) == "PGRST116":
                return ConnectionTestResult(
                    success=True,
                    message=f"Table '{table_name}' exists but is empty (expected for new tables)",
                    timestamp=_now()
                )
            return ConnectionTestResult(
                success=False,
                message=f"Failed to access table '{table_name}'",
                details=str(e),
                timestamp=_now()
            )

    async def run_all_tests(self) -> ConnectionReport:
        logger.info("Running Supabase connection tests...")

        connection = await self.test_connection()
        logger.info(f"Connection: {'ok' if connection.success else 'FAILED'} {connection.message}")

        auth = await self.test_auth()
        logger.info(f"Auth: {'ok' if auth.success else 'FAILED'} {auth.message}")

        permissions = await self.test_permissions()
        logger.info(f"Permissions: {'ok' if permissions.success else 'FAILED'} {permissions.message}")

        overall = connection.success and auth.success and permissions.success
        logger.info(f"Overall status: {'all tests passed' if overall else 'some tests failed'}")

        return ConnectionReport(
            overall=overall,
            connection=connection,
            auth=auth,
            permissions=permissions
        )
