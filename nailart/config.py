import os

from dotenv import load_dotenv

load_dotenv()


class Config:
    """Centralized configuration management"""
    # Supabase project (auth + tables)
    SUPABASE_URL = os.environ.get("SUPABASE_URL")
    SUPABASE_ANON_KEY = os.environ.get("SUPABASE_ANON_KEY")  # Dashboard -> Settings -> API -> 'anon public'

    # Google Gen AI (Imagen)
    GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY")
    IMAGEN_MODEL = os.environ.get("IMAGEN_MODEL", "imagen-4.0-generate-001")
    THUMBNAIL_STYLE_PREFIX = "High quality YouTube thumbnail, eye-catching, vibrant, "

    # Signs the session and PKCE cookies
    SESSION_SECRET_KEY = os.environ.get("SESSION_SECRET_KEY")
    SESSION_COOKIE_NAME = "nailart_session"
    PKCE_COOKIE_NAME = "nailart_pkce"
    SESSION_COOKIE_SECURE = os.environ.get("SESSION_COOKIE_SECURE", "false").lower() == "true"
    SESSION_MAX_AGE_DAYS = 30
    PKCE_MAX_AGE_MINUTES = 10

    # Public URL of this site (OAuth redirect target)
    SITE_URL = os.environ.get("SITE_URL", "http://localhost:8000")

    # Tables
    PROFILES_TABLE = "profiles"
    THUMBNAILS_TABLE = "thumbnails"

    # Credits
    DEFAULT_CREDITS = 10
    GENERATION_COST = 1

    # Timeout settings
    REQUEST_TIMEOUT = 60  # seconds, image generation is slow

    # Rate limiting
    GENERATION_RATE_LIMIT = "10/minute"

    @classmethod
    def get_redirect_url(cls) -> str:
        """Where the auth provider sends the browser back to after sign-in"""
        return f"{cls.SITE_URL.rstrip('/')}/auth/callback"
