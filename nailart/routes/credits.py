from fastapi import APIRouter, Depends
from ..services.studio import ThumbnailStudio
from ..utils.decorators import apply_session_cookie, user_required
from ..utils.responses import success_response

router = APIRouter()


@router.get('/balance')
async def get_balance(studio: ThumbnailStudio = Depends(user_required)):
    """
    Retrieves the credit balance for the authenticated user.
    """
    return apply_session_cookie(success_response({"balance": studio.credits}), studio)
