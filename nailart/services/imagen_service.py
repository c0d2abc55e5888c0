"""
Imagen integration service (google-genai SDK)
"""
import asyncio
import base64
import logging
import time
from typing import Optional

import httpx
from google import genai
from google.genai import errors, types

from ..config import Config
from ..utils.exceptions import ConfigurationError, GenerationError

# Shared client, created on first use
image_client = None

INVALID_RESPONSE_MESSAGE = "The image generation server returned an invalid response."


def build_thumbnail_prompt(prompt: str) -> str:
    """
    Prefix the user's description with the fixed thumbnail style.

    Args:
        prompt: Text the user typed

    Returns:
        Prompt sent to the model
    """
    return f"{Config.THUMBNAIL_STYLE_PREFIX}{prompt}"


class ImagenClient:
    """Generates one image per call through the Imagen model."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None,
                 client: Optional[genai.Client] = None):
        self.model = model or Config.IMAGEN_MODEL
        self._client = client or genai.Client(
            api_key=api_key if api_key is not None else Config.GEMINI_API_KEY,
            http_options=types.HttpOptions(timeout=Config.REQUEST_TIMEOUT * 1000),
        )

    async def aclose(self) -> None:
        await self._client.aio.aclose()

    async def generate(self, prompt: str) -> str:
        """
        Generate one thumbnail image.

        Args:
            prompt: The user's description (style prefix is added here)

        Returns:
            The image as a data URI

        Raises:
            GenerationError: If the request fails or the response has no image
        """
        logging.info(f"[IMAGEN] Requesting 1 image from {self.model} (prompt: {prompt[:60]!r})")
        start = time.time()
        try:
            response = await self._client.aio.models.generate_images(
                model=self.model,
                prompt=build_thumbnail_prompt(prompt),
                config=types.GenerateImagesConfig(number_of_images=1),
            )
        except errors.APIError as e:
            logging.error(f"[IMAGEN] API error {e.code}: {e.message}")
            raise GenerationError(e.message or f"Image API error: {e.code}", e.code)
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            logging.error(f"[IMAGEN] Timed out waiting for {self.model}: {e}")
            raise GenerationError("Image generation timed out")
        except httpx.RequestError as e:
            logging.error(f"[IMAGEN] Error connecting to image API: {e}")
            raise GenerationError(f"Failed to connect to image API: {str(e)}")

        logging.info(f"[IMAGEN] Response in {time.time() - start:.2f}s")

        generated = response.generated_images or []
        image = generated[0].image if generated else None
        if image is None or not image.image_bytes:
            # Safety filters drop the image instead of returning an error
            reason = generated[0].rai_filtered_reason if generated else None
            logging.warning(f"[IMAGEN] Response contained no image (filtered: {reason})")
            raise GenerationError(INVALID_RESPONSE_MESSAGE)

        mime_type = image.mime_type or "image/png"
        return f"data:{mime_type};base64,{base64.b64encode(image.image_bytes).decode('ascii')}"


async def get_image_client() -> ImagenClient:
    """Returns the shared Imagen client, constructing it on first use."""
    global image_client
    if image_client is None:
        if not Config.GEMINI_API_KEY:
            logging.error("GEMINI_API_KEY not configured")
            raise ConfigurationError("GEMINI_API_KEY", "Image API key not configured")
        image_client = ImagenClient()
    return image_client


async def close_image_client() -> None:
    global image_client
    if image_client is not None:
        await image_client.aclose()
        image_client = None
