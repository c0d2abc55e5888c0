"""
Shared fixtures: in-memory stand-ins for Supabase and Imagen
"""
import asyncio
import time
from datetime import datetime, timedelta, timezone

import pytest

from nailart.config import Config
from nailart.models.user import Session, User
from nailart.services.supabase_client import NO_ROWS_CODE
from nailart.utils.exceptions import BackendError

BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)
FAKE_IMAGE = "data:image/png;base64,iVBORw0KGgo="
FAKE_VERIFIER = "fake-code-verifier-0123456789abcdefghijklmnopqrstuvwxyz"


class FakeSupabase:
    """Mimics SupabaseClient on top of plain lists."""

    def __init__(self):
        self.tables = {Config.PROFILES_TABLE: [], Config.THUMBNAILS_TABLE: []}
        self.calls = []
        self.failures = {}
        self.codes = {}
        self.refresh_tokens = {}
        self.signed_out = []
        self._next_id = 1

    def _record(self, operation):
        self.calls.append(operation)
        if operation in self.failures:
            raise self.failures[operation]

    def count(self, operation):
        return self.calls.count(operation)

    def add_thumbnail_row(self, user_id, prompt, minutes):
        row = {
            "id": self._next_id,
            "user_id": user_id,
            "url": f"https://cdn.example/{self._next_id}.png",
            "prompt": prompt,
            "created_at": (BASE_TIME + timedelta(minutes=minutes)).isoformat(),
        }
        self._next_id += 1
        self.tables[Config.THUMBNAILS_TABLE].append(row)
        return row

    def profile(self, user_id):
        for row in self.tables[Config.PROFILES_TABLE]:
            if row["id"] == user_id:
                return row
        return None

    # --- auth ---

    async def sign_in_with_oauth(self, provider, redirect_to):
        self._record("sign_in_with_oauth")
        return (f"https://fake.supabase.co/auth/v1/authorize?provider={provider}"
                f"&redirect_to={redirect_to}&code_challenge=fake-challenge"), FAKE_VERIFIER

    async def exchange_code_for_session(self, auth_code, code_verifier):
        self._record("exchange_code_for_session")
        if auth_code not in self.codes:
            raise BackendError("exchange_code_for_session", message="invalid flow state",
                               code="flow_state_not_found", status_code=404)
        return self.codes[auth_code]

    async def refresh_session(self, refresh_token):
        self._record("refresh_session")
        if refresh_token not in self.refresh_tokens:
            raise BackendError("refresh_session", message="Invalid Refresh Token",
                               code="refresh_token_not_found", status_code=400)
        return self.refresh_tokens[refresh_token]

    async def sign_out(self, access_token):
        self._record("sign_out")
        self.signed_out.append(access_token)

    # --- tables ---

    async def select(self, table, columns="*", filters=None, order=None, descending=False,
                     single=False, access_token=None):
        self._record(f"select:{table}")
        rows = [dict(r) for r in self.tables[table]
                if all(r.get(k) == v for k, v in (filters or {}).items())]
        if order:
            rows.sort(key=lambda r: r[order], reverse=descending)
        if columns != "*":
            wanted = [c.strip() for c in columns.split(",")]
            rows = [{c: r.get(c) for c in wanted} for r in rows]
        if single:
            if len(rows) != 1:
                raise BackendError(f"select:{table}", message="JSON object requested, multiple (or no) rows returned",
                                   code=NO_ROWS_CODE, status_code=406)
            return rows[0]
        return rows

    async def insert(self, table, rows, single=False, access_token=None):
        self._record(f"insert:{table}")
        stored = []
        for row in rows:
            new_row = dict(row)
            if table == Config.THUMBNAILS_TABLE:
                new_row.setdefault("id", self._next_id)
                new_row.setdefault("created_at", (BASE_TIME + timedelta(days=1, seconds=self._next_id)).isoformat())
                self._next_id += 1
            self.tables[table].append(new_row)
            stored.append(dict(new_row))
        return stored[0] if single else stored

    async def update(self, table, values, filters, access_token=None):
        self._record(f"update:{table}")
        for row in self.tables[table]:
            if all(row.get(k) == v for k, v in filters.items()):
                row.update(values)


class FakeImagen:
    def __init__(self):
        self.prompts = []
        self.error = None
        self.block = None

    async def generate(self, prompt):
        self.prompts.append(prompt)
        if self.block is not None:
            await self.block.wait()
        if self.error is not None:
            raise self.error
        return FAKE_IMAGE


def session_payload(user_id="user-1", email="ada@gmail.com", expires_in=3600, refresh_token="refresh-1"):
    return {
        "access_token": f"access-{user_id}",
        "refresh_token": refresh_token,
        "expires_in": expires_in,
        "user": {
            "id": user_id,
            "email": email,
            "user_metadata": {"avatar_url": "https://lh3.googleusercontent.com/a/avatar", "full_name": "Ada"},
        },
    }


def make_session(user_id="user-1", expires_at=None, refresh_token="refresh-1"):
    return Session(
        access_token=f"access-{user_id}",
        refresh_token=refresh_token,
        expires_at=expires_at if expires_at is not None else int(time.time()) + 3600,
        user=User(id=user_id, email="ada@gmail.com",
                  user_metadata={"avatar_url": "https://lh3.googleusercontent.com/a/avatar"}),
    )


@pytest.fixture(autouse=True)
def session_secret(monkeypatch):
    monkeypatch.setattr(Config, "SESSION_SECRET_KEY", "test-secret-key")


@pytest.fixture
def backend():
    return FakeSupabase()


@pytest.fixture
def imagen():
    return FakeImagen()


@pytest.fixture
def factories(backend, imagen):
    async def client_factory():
        return backend

    async def image_client_factory():
        return imagen

    return client_factory, image_client_factory


def run(coro):
    return asyncio.run(coro)
