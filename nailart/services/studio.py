"""
The thumbnail studio: session bootstrap, user data, generation and view state
for one browser session.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, List, Optional, Set

from ..config import Config
from ..models import View
from ..models.user import Session, Thumbnail, User
from ..utils.exceptions import AuthenticationError, BackendError, GenerationError
from . import credits_service, history_service
from .auth_service import AuthSession, OAuthRedirect, Subscription


class ThumbnailStudio:
    """
    State holder behind every page of the app.

    Args:
        client_factory: Async callable returning the Supabase client
        image_client_factory: Async callable returning the Imagen client
        stored_session: Session restored from the cookie, if any
    """

    def __init__(self, client_factory: Callable[[], Awaitable],
                 image_client_factory: Callable[[], Awaitable],
                 stored_session: Optional[Session] = None):
        self._client_factory = client_factory
        self._image_client_factory = image_client_factory
        self._stored_session = stored_session

        self.client = None
        self.auth: Optional[AuthSession] = None
        self._subscription: Optional[Subscription] = None
        self._tasks: Set[asyncio.Task] = set()

        self.view = View.LANDING
        self.user: Optional[User] = None
        self.credits = 0
        self.history: List[Thumbnail] = []
        self.prompt = ""
        self.current_image: Optional[str] = None
        self.current_prompt: Optional[str] = None
        self.is_generating = False
        self.error: Optional[str] = None
        self.show_pricing = False
        self.loading = True

    # --- Session bootstrap ---

    async def initialize(self) -> None:
        """
        Creates the client, restores the session and subscribes to auth
        changes. Errors end up in self.error; loading is always cleared.
        """
        try:
            self.client = await self._client_factory()
            self.auth = AuthSession(self.client, self._stored_session)

            session = await self.auth.get_session()
            if session:
                await self._populate(session)

            self._subscription = self.auth.on_auth_state_change(self._on_auth_state_change)
        except Exception as e:
            logging.error(f"[STUDIO] Initialization failed: {e}")
            self.error = f"Initialization failed: {e}"
        finally:
            self.loading = False

    async def _populate(self, session: Optional[Session]) -> None:
        if session:
            self.user = session.user
            await self.fetch_user_data(session.user.id)
            self.view = View.DASHBOARD
        else:
            self.user = None
            self.credits = 0
            self.history = []
            self.current_image = None
            self.current_prompt = None
            self.view = View.LANDING

    async def _on_auth_state_change(self, event: str, session: Optional[Session]) -> None:
        await self._run(self._populate(session))

    async def close(self) -> None:
        """Cancels in-flight work and releases the auth subscription."""
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    async def _run(self, coro):
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        try:
            return await task
        finally:
            self._tasks.discard(task)

    # --- Data ---

    @property
    def access_token(self) -> Optional[str]:
        return self.auth.access_token if self.auth else None

    async def fetch_user_data(self, user_id: str) -> None:
        """
        Loads the credit balance (creating the profile on first visit) and the
        history. On failure the previous state is kept.
        """
        if self.client is None:
            return

        try:
            credits = await credits_service.get_credit_balance(self.client, user_id, self.access_token)
            history = await history_service.get_history(self.client, user_id, self.access_token)
        except Exception as e:
            logging.error(f"[STUDIO] Error loading data for user {user_id}: {e}")
            return

        self.credits = credits
        self.history = history

    # --- Generation ---

    async def generate_thumbnail(self) -> Optional[Thumbnail]:
        """
        Generates a thumbnail for self.prompt, debits one credit and records
        it in the history.

        Returns:
            The stored thumbnail, or None if nothing was generated
        """
        if not self.prompt.strip() or not self.user or self.client is None:
            return None
        if not credits_service.has_sufficient_credits(self.credits):
            self.show_pricing = True
            return None

        self.is_generating = True
        self.error = None
        try:
            return await self._run(self._generate(self.user, self.prompt))
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logging.error(f"[GENERATE] Failed for user {self.user.id}: {e}")
            self.error = f"An error occurred: {e}"
            return None
        finally:
            self.is_generating = False

    async def _generate(self, user: User, prompt: str) -> Thumbnail:
        start = time.time()
        image_client = await self._image_client_factory()
        image_url = await image_client.generate(prompt)
        if not image_url:
            raise GenerationError("The image generation server returned an invalid response.")

        # Debit and record are separate calls; a failure between them is not rolled back
        await credits_service.deduct_credits(self.client, user.id, self.credits, access_token=self.access_token)
        thumbnail = await history_service.add_thumbnail(
            self.client, user.id, image_url, prompt, access_token=self.access_token
        )

        self.current_image = image_url
        self.current_prompt = prompt
        self.credits -= Config.GENERATION_COST
        self.history.insert(0, thumbnail)
        self.prompt = ""
        logging.info(f"[GENERATE] Thumbnail {thumbnail.id} for user {user.id} in {time.time() - start:.2f}s")
        return thumbnail

    # --- Auth actions ---

    async def login_with_google(self, redirect_to: str) -> Optional[OAuthRedirect]:
        if self.auth is None:
            return None
        try:
            return await self.auth.sign_in_with_oauth("google", redirect_to)
        except BackendError as e:
            logging.warning(f"[AUTH] Could not start sign-in: {e}")
            self.error = f"Sign-in failed: {e.message}"
            return None

    async def complete_login(self, auth_code: str, code_verifier: Optional[str]) -> bool:
        """Finishes the OAuth callback; the auth listener loads the dashboard."""
        if self.auth is None:
            return False
        try:
            await self.auth.exchange_code_for_session(auth_code, code_verifier)
            return True
        except AuthenticationError as e:
            logging.warning(f"[AUTH] Callback failed: {e}")
            self.error = str(e)
            self.view = View.AUTH
            return False

    async def logout(self) -> None:
        if self.auth is None:
            return
        await self.auth.sign_out()

    # --- View routing ---

    def navigate(self, view) -> None:
        try:
            target = View(view)
        except ValueError:
            logging.warning(f"[STUDIO] Ignoring unknown view {view!r}")
            return
        if target is View.DASHBOARD and self.user is None:
            return
        self.view = target

    def open_pricing(self) -> None:
        self.show_pricing = True

    def close_pricing(self) -> None:
        self.show_pricing = False
