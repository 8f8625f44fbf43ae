"""Client for the external multimodal image-synthesis service.

The client issues exactly one ``generate_content`` request per call through
the ``google-genai`` SDK and turns the first inline image of the response
into a :class:`~archetype.core.models.GenerationResult`.

Request Layout
--------------
The request carries a single user turn whose parts are, in order:

1. Identity image (required)
2. Outfit image (when present)
3. Product image (when present)
4. Composed prompt text

The aspect ratio travels as ``ImageConfig.aspect_ratio``.

Failure Policy
--------------
One attempt, no retries, no timeout beyond the transport's own. Anything
the SDK or transport raises becomes a :class:`ServiceError` carrying the
original message, as does an image payload that Pillow cannot decode; a
response without any image part becomes an :class:`EmptyResultError`.
"""

from __future__ import annotations

import logging
from io import BytesIO
from typing import Any

from google import genai
from google.genai import types
from PIL import Image

from .config import ArchetypeConfig
from .errors import EmptyResultError, ServiceError
from .models import RESULT_MIME_TYPE, GenerationResult, ImageAsset

logger = logging.getLogger(__name__)

EMPTY_RESULT_MESSAGE = "Synthesis failed: the service returned no image."
UNREADABLE_RESULT_MESSAGE = "Synthesis failed: the service returned an unreadable image."


def build_parts(
    identity: ImageAsset,
    outfit: ImageAsset | None,
    product: ImageAsset | None,
    prompt: str,
) -> list[types.Part]:
    """Assemble the ordered multimodal payload."""
    parts = [types.Part.from_bytes(data=identity.data, mime_type=identity.mime_type)]
    for asset in (outfit, product):
        if asset is not None:
            parts.append(types.Part.from_bytes(data=asset.data, mime_type=asset.mime_type))
    parts.append(types.Part.from_text(text=prompt))
    return parts


def extract_first_image(response: Any) -> ImageAsset:
    """Return the first inline image payload of the first candidate.

    Raises:
        EmptyResultError: If no part carries image data
    """
    candidates = getattr(response, "candidates", None) or []
    if candidates:
        content = getattr(candidates[0], "content", None)
        for part in getattr(content, "parts", None) or []:
            inline = getattr(part, "inline_data", None)
            if inline is not None and inline.data:
                return ImageAsset(data=inline.data, mime_type=inline.mime_type or RESULT_MIME_TYPE)
    raise EmptyResultError(EMPTY_RESULT_MESSAGE)


def verify_image(image: ImageAsset) -> None:
    """Check that an image payload decodes.

    Raises:
        ServiceError: If Pillow cannot identify or verify the payload
    """
    try:
        with Image.open(BytesIO(image.data)) as decoded:
            decoded.verify()
    except (OSError, SyntaxError, ValueError) as e:
        logger.error(f"Unreadable image payload ({len(image.data)} bytes): {e}")
        raise ServiceError(UNREADABLE_RESULT_MESSAGE) from e


class GenerationClient:
    """Thin async wrapper around the synthesis service.

    Args:
        config: Application configuration (API key and model name)
        client: Pre-built ``genai.Client``; created lazily from ``config``
            when omitted
    """

    def __init__(self, config: ArchetypeConfig, client: Any | None = None):
        self.config = config
        self._client = client

    @property
    def model_name(self) -> str:
        return self.config.model_name

    def _get_client(self) -> Any:
        if self._client is None:
            logger.info(f"Creating synthesis client for model {self.model_name}")
            self._client = genai.Client(api_key=self.config.api_key)
        return self._client

    async def generate(
        self,
        identity: ImageAsset,
        outfit: ImageAsset | None,
        product: ImageAsset | None,
        aspect_ratio: str,
        prompt: str,
    ) -> GenerationResult:
        """Synthesize one photo.

        Args:
            identity: Face reference image
            outfit: Garment reference image
            product: Optional item reference image
            aspect_ratio: Ratio token, e.g. "1:1"
            prompt: Composed instruction string

        Returns:
            GenerationResult whose ``prompt`` is exactly ``prompt``

        Raises:
            ServiceError: If the call fails or the returned image does not decode
            EmptyResultError: If the response holds no image
        """
        parts = build_parts(identity, outfit, product, prompt)
        logger.info(
            f"Dispatching synthesis request: model={self.model_name}, "
            f"images={len(parts) - 1}, aspect_ratio={aspect_ratio}"
        )

        try:
            client = self._get_client()
            response = await client.aio.models.generate_content(
                model=self.model_name,
                contents=[types.Content(role="user", parts=parts)],
                config=types.GenerateContentConfig(
                    image_config=types.ImageConfig(aspect_ratio=aspect_ratio),
                ),
            )
        except Exception as e:
            logger.error(f"Synthesis request failed: {e}", exc_info=True)
            raise ServiceError(str(e) or e.__class__.__name__) from e

        image = extract_first_image(response)
        verify_image(image)
        result = GenerationResult.create(image=image, prompt=prompt)
        logger.info(f"Synthesis complete: result {result.id} ({len(image.data)} bytes)")
        return result
