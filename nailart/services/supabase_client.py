"""
Supabase access for one browser session, on top of the supabase SDK
(GoTrue auth + PostgREST tables).
"""

import logging
from typing import Dict, Any, Optional, List, Tuple, Union

import httpx
from supabase import (
    AsyncClient,
    AsyncClientOptions,
    AsyncSupabaseException,
    AuthError,
    PostgrestAPIError,
    acreate_client,
)
from supabase_auth.constants import STORAGE_KEY

from ..utils.backend import backend_operation
from ..utils.exceptions import BackendError, ConfigurationError

# PostgREST error code for "single row requested, none (or many) returned"
NO_ROWS_CODE = "PGRST116"

CODE_VERIFIER_KEY = f"{STORAGE_KEY}-code-verifier"


class SupabaseClient:
    """Wraps the handful of Supabase calls the studio needs."""

    def __init__(self, sdk: AsyncClient):
        self.sdk = sdk
        self.key = sdk.supabase_key

    @classmethod
    async def create(cls, url: str, key: str, http_client: Optional[httpx.AsyncClient] = None) -> "SupabaseClient":
        """
        Builds a client with no session of its own.

        The session lives in the signed cookie, so the SDK neither persists
        nor auto-refreshes it.

        Raises:
            ConfigurationError: If the SDK rejects the URL or key
        """
        options = AsyncClientOptions(
            auto_refresh_token=False,
            persist_session=False,
            flow_type="pkce",
            httpx_client=http_client,
        )
        try:
            sdk = await acreate_client(url, key, options=options)
        except AsyncSupabaseException as e:
            logging.error(f"[SUPABASE] Client rejected configuration: {e.message}")
            raise ConfigurationError("SUPABASE_URL", f"Invalid Supabase configuration: {e.message}")
        return cls(sdk)

    async def _call(self, operation: str, func, *args, **kwargs) -> Any:
        try:
            return await func(*args, **kwargs)
        except AuthError as e:
            status = getattr(e, "status", None)
            logging.warning(f"[SUPABASE] {operation} returned {status}: {e.message}")
            raise BackendError(operation, message=e.message, code=e.code, status_code=status)
        except PostgrestAPIError as e:
            logging.warning(f"[SUPABASE] {operation} failed ({e.code}): {e.message}")
            raise BackendError(operation, message=e.message or str(e), code=e.code)

    async def _request(self, operation: str, func, *args, **kwargs) -> Any:
        return await backend_operation(operation, self._call, operation, func, *args, **kwargs)

    def _table(self, table: str, access_token: Optional[str]):
        # Without a user token, requests run as the anon role
        return self.sdk.postgrest.auth(access_token or self.key).from_(table)

    # --- Auth (GoTrue) ---

    async def sign_in_with_oauth(self, provider: str, redirect_to: str) -> Tuple[str, str]:
        """
        Starts a federated sign-in (PKCE flow).

        Returns:
            The provider URL for the browser, and the code verifier the
            callback needs
        """
        response = await self._request(
            "sign_in_with_oauth", self.sdk.auth.sign_in_with_oauth,
            {"provider": provider, "options": {"redirect_to": redirect_to}},
        )
        verifier = await self.sdk.options.storage.get_item(CODE_VERIFIER_KEY)
        return response.url, verifier

    async def exchange_code_for_session(self, auth_code: str, code_verifier: str) -> Dict[str, Any]:
        response = await self._request(
            "exchange_code_for_session", self.sdk.auth.exchange_code_for_session,
            {"auth_code": auth_code, "code_verifier": code_verifier},
        )
        return _session_payload("exchange_code_for_session", response)

    async def refresh_session(self, refresh_token: str) -> Dict[str, Any]:
        response = await self._request("refresh_session", self.sdk.auth.refresh_session, refresh_token)
        return _session_payload("refresh_session", response)

    async def sign_out(self, access_token: str) -> None:
        await self._request("sign_out", self.sdk.auth.admin.sign_out, access_token)

    # --- Tables (PostgREST) ---

    async def select(self, table: str, columns: str = "*", filters: Optional[Dict[str, Any]] = None,
                     order: Optional[str] = None, descending: bool = False, single: bool = False,
                     access_token: Optional[str] = None) -> Union[List[Dict[str, Any]], Dict[str, Any]]:
        """
        Selects rows matching equality filters.

        With single=True the result is one object, and an empty result raises
        BackendError with code NO_ROWS_CODE.
        """
        query = self._table(table, access_token).select(columns)
        for column, value in (filters or {}).items():
            query = query.eq(column, value)
        if order:
            query = query.order(order, desc=descending)
        if single:
            query = query.single()
        response = await self._request(f"select:{table}", query.execute)
        return response.data

    async def insert(self, table: str, rows: List[Dict[str, Any]], single: bool = False,
                     access_token: Optional[str] = None) -> Union[List[Dict[str, Any]], Dict[str, Any]]:
        """Inserts rows and returns them as stored."""
        query = self._table(table, access_token).insert(rows)
        response = await self._request(f"insert:{table}", query.execute)
        if single:
            if not response.data:
                raise BackendError(f"insert:{table}", message="Insert returned no rows", code=NO_ROWS_CODE)
            return response.data[0]
        return response.data

    async def update(self, table: str, values: Dict[str, Any], filters: Dict[str, Any],
                     access_token: Optional[str] = None) -> None:
        query = self._table(table, access_token).update(values)
        for column, value in filters.items():
            query = query.eq(column, value)
        await self._request(f"update:{table}", query.execute)


def _session_payload(operation: str, response) -> Dict[str, Any]:
    if response.session is None:
        raise BackendError(operation, message="No session in auth response")
    return response.session.model_dump(mode="json")
