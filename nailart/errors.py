import logging
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError, HTTPException
from pydantic import ValidationError as PydanticValidationError
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from nailart.utils.exceptions import AuthenticationError, BackendError, ConfigurationError, GenerationError
from nailart.utils.responses import error_response


def register_exception_handlers(app):
    @app.exception_handler(PydanticValidationError)
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc):
        logging.warning(f"Validation error: {exc}")
        return error_response("Validation failed", status.HTTP_422_UNPROCESSABLE_ENTITY, {"details": str(exc)})

    @app.exception_handler(AuthenticationError)
    async def authentication_exception_handler(request: Request, exc):
        logging.warning(f"Authentication error: {exc}")
        return error_response(str(exc), status.HTTP_401_UNAUTHORIZED)

    @app.exception_handler(BackendError)
    async def backend_exception_handler(request: Request, exc):
        logging.error(f"Backend error: {exc}")
        return error_response("Database operation error", status.HTTP_502_BAD_GATEWAY)

    @app.exception_handler(GenerationError)
    async def generation_exception_handler(request: Request, exc):
        logging.error(f"Generation error: {exc}")
        return error_response(str(exc), status.HTTP_502_BAD_GATEWAY)

    @app.exception_handler(ConfigurationError)
    async def configuration_exception_handler(request: Request, exc):
        logging.error(f"Configuration error: {exc}")
        return error_response(f"Server configuration error: {exc.config_key}", status.HTTP_500_INTERNAL_SERVER_ERROR)

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc):
        logging.warning(f"Rate limit exceeded: {exc.detail}")
        return error_response("Rate limit exceeded", status.HTTP_429_TOO_MANY_REQUESTS)

    @app.exception_handler(HTTPException)
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc):
        logging.warning(f"HTTP error: {exc.detail if hasattr(exc, 'detail') else exc}")
        return error_response(
            getattr(exc, 'detail', str(exc)),
            getattr(exc, 'status_code', status.HTTP_400_BAD_REQUEST)
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc):
        logging.exception(f"Unexpected error: {exc}")
        return error_response("Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR)
