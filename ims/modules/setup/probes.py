"""
Database probes for the setup wizard and the default step list.

Probes are async callables with no arguments returning whether a setup
precondition currently holds. The Supabase client is synchronous, so calls
are pushed to the threadpool.
"""

import logging
from typing import Callable, List, Optional

from starlette.concurrency import run_in_threadpool
from supabase import Client

from ims.config.settings import settings
from ims.database.supabase_client import get_supabase
from ims.modules.setup.wizard import Probe, SetupStep, SetupWizard

logger = logging.getLogger(__name__)

LIST_ENUMS_SQL = """
CREATE OR REPLACE FUNCTION list_enums()
RETURNS TABLE(enum_name text, enum_values text[]) AS $$
BEGIN
    RETURN QUERY
    SELECT
        t.typname::text as enum_name,
        array_agg(e.enumlabel ORDER BY e.enumsortorder) as enum_values
    FROM pg_type t
    JOIN pg_enum e ON t.oid = e.enumtypid
    JOIN pg_catalog.pg_namespace n ON n.oid = t.typnamespace
    WHERE n.nspname = 'public'
    GROUP BY t.typname
    ORDER BY t.typname;
END;
$$ LANGUAGE plpgsql;
"""

ENUM_SETUP_INSTRUCTIONS = """
ENUM Setup Instructions:

1. Open your Supabase Dashboard and navigate to the SQL Editor
2. Create a new query and paste the ENUM migration together with the list_enums() function
3. Click "Run" to execute the SQL
4. Verify the ENUMs were created by running: SELECT * FROM list_enums();
5. Come back and re-run the setup check

The ENUMs are required before any table can be created, as they define the
allowed values for various fields.
"""


def make_enums_probe(
    get_client: Callable[[], Client] = get_supabase,
    minimum: Optional[int] = None
) -> Probe:
    """Probe passing when list_enums() reports at least `minimum` ENUM types"""
    threshold = settings.enum_probe_minimum if minimum is None else minimum

    async def probe() -> bool:
        supabase = get_client()
        result = await run_in_threadpool(lambda: supabase.rpc("list_enums").execute())
        enums = result.data or []
        logger.info(f"Found {len(enums)} ENUM types in database")
        for enum_type in enums:
            logger.debug(f"  - {enum_type.get('enum_name')}: {enum_type.get('enum_values')}")
        return len(enums) >= threshold

    return probe


def build_default_steps(get_client: Callable[[], Client] = get_supabase) -> List[SetupStep]:
    return [
        SetupStep(
            id="enums",
            title="Create Database ENUMs",
            description="Create all required ENUM types for data validation",
            probe=make_enums_probe(get_client),
            manual_instructions=ENUM_SETUP_INSTRUCTIONS,
            sql=LIST_ENUMS_SQL,
        ),
        SetupStep(
            id="tables",
            title="Create Database Tables",
            description="Create all core tables for the application",
        ),
        SetupStep(
            id="rls",
            title="Setup Row Level Security",
            description="Configure security policies for role-based access",
        ),
        SetupStep(
            id="functions",
            title="Create Database Functions",
            description="Create helper functions and stored procedures",
        ),
        SetupStep(
            id="seed",
            title="Seed Initial Data",
            description="Insert default categories, locations, and system data",
        ),
    ]


def create_setup_wizard(get_client: Callable[[], Client] = get_supabase) -> SetupWizard:
    return SetupWizard(build_default_steps(get_client))
