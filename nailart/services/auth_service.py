"""
Authentication service: the per-request view of a user's Supabase session.
"""

import logging
from typing import Awaitable, Callable, List, NamedTuple, Optional

from ..models.user import Session
from ..utils.exceptions import AuthenticationError, BackendError

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"
TOKEN_REFRESHED = "TOKEN_REFRESHED"

AuthListener = Callable[[str, Optional[Session]], Awaitable[None]]


class OAuthRedirect(NamedTuple):
    url: str
    code_verifier: str


class Subscription:
    """Handle returned by on_auth_state_change."""

    def __init__(self, auth: "AuthSession", listener: AuthListener):
        self._auth = auth
        self._listener = listener
        self.active = True

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self._auth._listeners.remove(self._listener)
        self.active = False


class AuthSession:
    """
    Holds the current session for one browser and notifies listeners of
    sign-in, sign-out and token refresh.

    Args:
        client: SupabaseClient (or compatible) used for auth calls
        stored: Session restored from the session cookie, if any
    """

    def __init__(self, client, stored: Optional[Session] = None):
        self._client = client
        self._session = stored
        self._listeners: List[AuthListener] = []
        # Set whenever the session cookie needs rewriting
        self.changed = False

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def access_token(self) -> Optional[str]:
        return self._session.access_token if self._session else None

    def on_auth_state_change(self, listener: AuthListener) -> Subscription:
        self._listeners.append(listener)
        return Subscription(self, listener)

    async def _set_session(self, session: Optional[Session], event: str) -> None:
        self._session = session
        self.changed = True
        logging.info(f"[AUTH] {event} (user={session.user.id if session else None})")
        for listener in list(self._listeners):
            await listener(event, session)

    async def get_session(self) -> Optional[Session]:
        """
        Returns the current session, refreshing it first if it has expired.
        A session that cannot be refreshed is dropped.
        """
        if self._session is None or not self._session.is_expired():
            return self._session

        if not self._session.refresh_token:
            await self._set_session(None, SIGNED_OUT)
            return None

        try:
            data = await self._client.refresh_session(self._session.refresh_token)
            await self._set_session(Session.from_payload(data), TOKEN_REFRESHED)
        except BackendError as e:
            logging.warning(f"[AUTH] Session refresh failed, signing out: {e}")
            await self._set_session(None, SIGNED_OUT)
        return self._session

    async def sign_in_with_oauth(self, provider: str, redirect_to: str) -> OAuthRedirect:
        """
        Starts a federated sign-in.

        Returns:
            Provider URL to redirect the browser to, and the PKCE verifier to
            keep until the callback
        """
        url, verifier = await self._client.sign_in_with_oauth(provider, redirect_to)
        logging.info(f"[AUTH] Starting {provider} sign-in, redirect_to={redirect_to}")
        return OAuthRedirect(url=url, code_verifier=verifier)

    async def exchange_code_for_session(self, auth_code: str, code_verifier: Optional[str]) -> Session:
        """
        Completes a federated sign-in.

        Raises:
            AuthenticationError: If the verifier is missing or the exchange fails
        """
        if not auth_code or not code_verifier:
            raise AuthenticationError("Sign-in expired, please try again")
        try:
            data = await self._client.exchange_code_for_session(auth_code, code_verifier)
        except BackendError as e:
            raise AuthenticationError(f"Sign-in failed: {e.message}")
        session = Session.from_payload(data)
        await self._set_session(session, SIGNED_IN)
        return session

    async def sign_out(self) -> None:
        if self._session is not None:
            try:
                await self._client.sign_out(self._session.access_token)
            except BackendError as e:
                # Local sign-out still happens
                logging.warning(f"[AUTH] Remote sign-out failed: {e}")
        await self._set_session(None, SIGNED_OUT)
