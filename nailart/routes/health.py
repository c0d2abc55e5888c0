"""
Health check endpoints
"""
from fastapi import APIRouter

from ..config import Config
from ..utils.responses import success_response

router = APIRouter()


@router.get('/health')
async def health_check():
    """Simple health check"""
    return success_response({
        "status": "API is operational",
        "version": "1.0.0",
        "config": {
            "supabase_configured": bool(Config.SUPABASE_URL and Config.SUPABASE_ANON_KEY),
            "image_api_configured": bool(Config.GEMINI_API_KEY),
            "session_secret_configured": bool(Config.SESSION_SECRET_KEY),
            "image_model": Config.IMAGEN_MODEL,
        }
    })
