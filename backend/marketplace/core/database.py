"""
Conexión a Supabase (Postgres + Auth + Storage)

All table access in the marketplace goes through the Supabase client: there is
no direct Postgres connection. The service-role client is used server-side
(checkout, admin, notification fan-out); row-level security stays on the
hosted platform.

Author: Mapu Team
Updated: 2025-11-20
"""
import logging
from typing import Optional

from supabase import create_client, Client
from .config import settings

logger = logging.getLogger(__name__)


_supabase: Optional[Client] = None


def get_supabase() -> Client:
    """
    FastAPI dependency para obtener cliente de Supabase

    The client is created on first use so importing the app does not require
    credentials (tests override this dependency).

    Usage:
        @router.get("/data")
        def get_data(sb: Client = Depends(get_supabase)):
            ...
    """
    global _supabase

    if _supabase is None:
        if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_ROLE_KEY:
            raise Exception("SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY not configured")

        _supabase = create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
        logger.info("Supabase client initialized")

    return _supabase


def reset_supabase():
    """Drop the cached client (used after credentials change)"""
    global _supabase
    _supabase = None
