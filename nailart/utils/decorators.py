import logging
from typing import AsyncIterator

from fastapi import Depends, HTTPException, Request, Response, status

from ..config import Config
from ..services import token_service
from ..services.imagen_service import get_image_client
from ..services.studio import ThumbnailStudio
from .backend import get_backend_client


def get_client_factory():
    """Supabase client factory used by the studio (overridden in tests)."""
    return get_backend_client


def get_image_client_factory():
    """Imagen client factory used by the studio (overridden in tests)."""
    return get_image_client


async def get_studio(
    request: Request,
    client_factory=Depends(get_client_factory),
    image_client_factory=Depends(get_image_client_factory),
) -> AsyncIterator[ThumbnailStudio]:
    """
    FastAPI dependency that bootstraps a studio from the session cookie and
    tears it down once the request is done.
    """
    stored = token_service.read_session_token(request.cookies.get(Config.SESSION_COOKIE_NAME))
    studio = ThumbnailStudio(client_factory, image_client_factory, stored_session=stored)
    await studio.initialize()
    try:
        yield studio
    finally:
        await studio.close()


async def user_required(studio: ThumbnailStudio = Depends(get_studio)) -> ThumbnailStudio:
    """
    FastAPI dependency to ensure the request carries a signed-in session.
    Returns the studio for use in endpoints.
    """
    if studio.user is None:
        logging.warning("Rejected request without a session")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=studio.error or "Not signed in",
        )
    return studio


def apply_session_cookie(response: Response, studio: ThumbnailStudio) -> Response:
    """Writes or clears the session cookie if the session changed during the request."""
    if studio.auth is None or not studio.auth.changed:
        return response

    session = studio.auth.session
    if session is None:
        response.delete_cookie(Config.SESSION_COOKIE_NAME)
    else:
        response.set_cookie(
            Config.SESSION_COOKIE_NAME,
            token_service.create_session_token(session),
            max_age=Config.SESSION_MAX_AGE_DAYS * 24 * 60 * 60,
            httponly=True,
            secure=Config.SESSION_COOKIE_SECURE,
            samesite="lax",
        )
    return response
