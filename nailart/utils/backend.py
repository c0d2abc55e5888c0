"""Connection utilities for the Supabase backend."""

import logging
import time
from typing import Optional

import httpx

from ..config import Config
from .exceptions import BackendError, ConfigurationError

# Global variable to hold the HTTP client shared by every Supabase client
http_client: Optional[httpx.AsyncClient] = None


def get_http_client() -> httpx.AsyncClient:
    """Returns the shared HTTP client, creating it on first use."""
    global http_client
    if http_client is None:
        http_client = httpx.AsyncClient(timeout=Config.REQUEST_TIMEOUT)
    return http_client


async def get_backend_client():
    """
    Returns a Supabase client for one request.

    Each request gets its own client, since the SDK client carries the
    session it signs in or out. They share one HTTP connection pool.

    Raises:
        ConfigurationError: If the Supabase URL or key is not configured
    """
    if not Config.SUPABASE_URL:
        logging.error("[BACKEND_CONN] SUPABASE_URL is not configured in environment variables.")
        raise ConfigurationError("SUPABASE_URL", "Supabase URL not configured")

    if not Config.SUPABASE_ANON_KEY:
        logging.error("[BACKEND_CONN] SUPABASE_ANON_KEY is not configured in environment variables.")
        raise ConfigurationError("SUPABASE_ANON_KEY", "Supabase anon key not configured")

    # Imported here so the client module can use backend_operation
    from ..services.supabase_client import SupabaseClient

    client = await SupabaseClient.create(Config.SUPABASE_URL, Config.SUPABASE_ANON_KEY, http_client=get_http_client())
    logging.debug(f"[BACKEND_CONN] Supabase client created for {Config.SUPABASE_URL[:30]}... (truncated)")
    return client


async def close_backend_client() -> None:
    """Closes the shared HTTP client, if one was created."""
    global http_client
    if http_client is not None:
        await http_client.aclose()
        http_client = None
        logging.info("[BACKEND_CONN] Supabase HTTP client closed.")


async def backend_operation(operation_name: str, operation_func, *args, **kwargs):
    """
    Wrapper for backend calls to handle errors consistently.
    Includes detailed timing logs.

    Args:
        operation_name: Name of the operation for logging
        operation_func: Async function to execute
        *args, **kwargs: Arguments to pass to the operation function

    Returns:
        Result of the operation

    Raises:
        BackendError: If the operation fails
    """
    start_time = time.time()
    logging.info(f"[BACKEND_OP] Starting operation '{operation_name}'.")

    try:
        result = await operation_func(*args, **kwargs)
        total_time = time.time() - start_time
        logging.info(f"[BACKEND_OP] Operation '{operation_name}' successful. Total time: {total_time:.4f}s")
        return result

    except BackendError as e:
        total_time = time.time() - start_time
        logging.error(f"[BACKEND_OP] Operation '{operation_name}' failed: {e.message} (code={e.code}). Total time: {total_time:.4f}s")
        raise

    except Exception as e:
        total_time = time.time() - start_time
        logging.error(f"[BACKEND_OP] Operation '{operation_name}' failed: {str(e)}. Total time: {total_time:.4f}s")
        raise BackendError(operation_name, original_error=e)
