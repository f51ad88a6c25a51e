"""
Supabase client factory.

The data layer talks to Supabase with the anon key, so every query runs under
Row Level Security for whichever user is signed in on the client. The client
is created once by the process entry point and injected into DatabaseService;
nothing else in the package creates clients.
"""

import logging
from typing import Optional

from supabase import AsyncClient, create_async_client

from prepchef.config import Settings

logger = logging.getLogger(__name__)


async def create_supabase_client(settings: Settings) -> Optional[AsyncClient]:
    """
    Create the async Supabase client for this process.

    Args:
        settings: Loaded application settings

    Returns:
        An AsyncClient using the anon key (RLS enforced), or None when the
        URL or key is missing. Missing configuration is reported by
        diagnostics instead of failing startup.
    """
    missing = settings.missing()
    if missing:
        logger.warning(
            f"Supabase client not created, missing configuration: {', '.join(missing)}"
        )
        return None

    client: AsyncClient = await create_async_client(
        settings.SUPABASE_URL,
        settings.SUPABASE_ANON_KEY,
    )

    logger.debug("Created Supabase client with anon key (RLS enforced)")

    return client
