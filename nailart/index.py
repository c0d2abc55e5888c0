from contextlib import asynccontextmanager
from fastapi import FastAPI
from nailart.routes.pages import router as pages_router
from nailart.routes.health import router as health_router
from nailart.routes.credits import router as credits_router
from nailart.routes.thumbnails import router as thumbnails_router
from nailart.errors import register_exception_handlers
from nailart.config import Config
from nailart.services.imagen_service import close_image_client
from nailart.utils.backend import close_backend_client
from nailart.utils.rate_limit import limiter
import logging

logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s')


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.info(f"Configuration loaded: SUPABASE_URL={'✓' if Config.SUPABASE_URL else '✗'}, "
                 f"SUPABASE_ANON_KEY={'✓' if Config.SUPABASE_ANON_KEY else '✗'}, "
                 f"GEMINI_API_KEY={'✓' if Config.GEMINI_API_KEY else '✗'}, "
                 f"SESSION_SECRET_KEY={'✓' if Config.SESSION_SECRET_KEY else '✗'}")
    yield
    await close_backend_client()
    await close_image_client()


app = FastAPI(title="NailArt AI", lifespan=lifespan)
register_exception_handlers(app)

api_prefix = "/v1"

# Set up SlowAPI Limiter
app.state.limiter = limiter

app.include_router(pages_router)
app.include_router(health_router, prefix=api_prefix)
app.include_router(credits_router, prefix=f"{api_prefix}/credits")
app.include_router(thumbnails_router, prefix=f"{api_prefix}/thumbnails")
