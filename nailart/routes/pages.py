"""
Server-rendered pages: landing, auth, dashboard and the pricing modal
"""
import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from ..config import Config
from ..models import View
from ..services import token_service
from ..services.studio import ThumbnailStudio
from ..utils.decorators import apply_session_cookie, get_studio

router = APIRouter()
templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))


def render(request: Request, studio: ThumbnailStudio):
    response = templates.TemplateResponse(request, "index.html", {
        "studio": studio,
        "View": View,
        "generation_cost": Config.GENERATION_COST,
    })
    return apply_session_cookie(response, studio)


def redirect_home(studio: ThumbnailStudio, url: str = "/"):
    return apply_session_cookie(RedirectResponse(url, status_code=303), studio)


@router.get('/')
async def index(request: Request, view: Optional[str] = None, pricing: bool = False,
                studio: ThumbnailStudio = Depends(get_studio)):
    if view:
        studio.navigate(view)
    if pricing and studio.user is not None:
        studio.open_pricing()
    return render(request, studio)


@router.get('/login/google')
async def login_google(request: Request, studio: ThumbnailStudio = Depends(get_studio)):
    oauth = await studio.login_with_google(Config.get_redirect_url())
    if oauth is None:
        studio.navigate(View.AUTH)
        return render(request, studio)

    response = RedirectResponse(oauth.url, status_code=303)
    response.set_cookie(
        Config.PKCE_COOKIE_NAME,
        token_service.create_pkce_token(oauth.code_verifier),
        max_age=Config.PKCE_MAX_AGE_MINUTES * 60,
        httponly=True,
        secure=Config.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return response


@router.get('/auth/callback')
async def auth_callback(request: Request, code: Optional[str] = None, error_description: Optional[str] = None,
                        studio: ThumbnailStudio = Depends(get_studio)):
    if error_description or not code:
        logging.warning(f"[AUTH] Provider returned an error: {error_description}")
        studio.error = error_description or "Sign-in was cancelled"
        studio.navigate(View.AUTH)
        return render(request, studio)

    verifier = token_service.read_pkce_token(request.cookies.get(Config.PKCE_COOKIE_NAME))
    if not await studio.complete_login(code, verifier):
        return render(request, studio)

    response = redirect_home(studio)
    response.delete_cookie(Config.PKCE_COOKIE_NAME)
    return response


@router.post('/generate')
async def generate(request: Request, prompt: str = Form(""), studio: ThumbnailStudio = Depends(get_studio)):
    if studio.user is None:
        return redirect_home(studio, "/?view=auth")

    studio.navigate(View.DASHBOARD)
    studio.prompt = prompt
    await studio.generate_thumbnail()
    return render(request, studio)


@router.post('/logout')
async def logout(studio: ThumbnailStudio = Depends(get_studio)):
    await studio.logout()
    return redirect_home(studio)
