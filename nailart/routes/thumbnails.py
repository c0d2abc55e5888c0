import logging
from fastapi import APIRouter, Depends, Request
from ..config import Config
from ..models import GenerateRequest, GenerateResponse
from ..services.studio import ThumbnailStudio
from ..utils.decorators import apply_session_cookie, user_required
from ..utils.rate_limit import limiter
from ..utils.responses import success_response, error_response

router = APIRouter()


@router.get('')
async def list_thumbnails(studio: ThumbnailStudio = Depends(user_required)):
    """
    Retrieves the authenticated user's thumbnails, newest first.
    """
    response = success_response({
        "thumbnails": [t.model_dump(mode="json") for t in studio.history],
        "total": len(studio.history)
    })
    return apply_session_cookie(response, studio)


@router.post('')
@limiter.limit(Config.GENERATION_RATE_LIMIT)
async def create_thumbnail(request: Request, studio: ThumbnailStudio = Depends(user_required)):
    """
    Generates a thumbnail for the posted prompt, spending one credit.
    """
    try:
        data = await request.json()
    except ValueError:
        return error_response("Request body must be JSON", 400)

    body = GenerateRequest.from_json(data if isinstance(data, dict) else {})
    if not isinstance(body.prompt, str) or not body.prompt.strip():
        return error_response("Prompt is required", 422)

    studio.prompt = body.prompt
    thumbnail = await studio.generate_thumbnail()

    if studio.show_pricing:
        logging.info(f"Generation refused for user {studio.user.id}: no credits left")
        result = GenerateResponse(success=False, credits=studio.credits, pricing_required=True,
                                  error="Not enough credits")
        response = error_response("Not enough credits", 402, {"data": result.to_dict()})
    elif thumbnail is None:
        result = GenerateResponse(success=False, credits=studio.credits, error=studio.error)
        response = error_response(studio.error or "Generation failed", 502, {"data": result.to_dict()})
    else:
        result = GenerateResponse(success=True, credits=studio.credits, thumbnail=thumbnail)
        response = success_response(result.to_dict(), 201)
    return apply_session_cookie(response, studio)
