"""Pydantic request and response models for the Archetype Studio API.

These models define the JSON schema for every API endpoint.  FastAPI uses
them for automatic request validation, serialisation, and OpenAPI
documentation generation.

Models
------
ComposeRequest
    Payload for ``POST /api/prompt/compile``: preset ids, directive text and
    an optional variation modifier.
GenerateRequest
    Payload for ``POST /api/generate``: everything in :class:`ComposeRequest`
    plus the base64-encoded reference images.
GenerateResponse
    Body returned by a successful ``POST /api/generate``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ComposeRequest(BaseModel):
    """Request body for the ``POST /api/prompt/compile`` endpoint.

    Every preset id is optional; an omitted id falls back to the first
    option of its catalog, exactly as a fresh studio session does.

    Attributes:
        lighting_id: Identifier of the lighting preset.
        skin_texture_id: Identifier of the skin-texture preset.
        aspect_ratio_id: Identifier of the aspect-ratio preset.
        pose_id: Identifier of the pose preset, or ``None`` for no pose.
        directive: Free-text creative directive.  May be empty.
        variation: Optional variation modifier appended to the directive.
    """

    lighting_id: str | None = Field(
        default=None,
        description="Lighting preset ID (e.g. 'studio'). Defaults to the first preset.",
    )
    skin_texture_id: str | None = Field(
        default=None,
        description="Skin texture preset ID (e.g. 'natural'). Defaults to the first preset.",
    )
    aspect_ratio_id: str | None = Field(
        default=None,
        description="Aspect ratio preset ID (e.g. '9:16'). Defaults to the first preset.",
    )
    pose_id: str | None = Field(
        default=None,
        description="Pose preset ID, or null for no pose.",
    )
    directive: str = Field(
        default="",
        description="Free-text creative directive.",
    )
    variation: str | None = Field(
        default=None,
        description="Optional variation modifier (e.g. 'Slightly different camera angle').",
    )


class GenerateRequest(ComposeRequest):
    """Request body for the ``POST /api/generate`` endpoint.

    Images are base64 strings; a ``data:image/...;base64,`` prefix is
    accepted and stripped.  ``identity`` and ``outfit`` are declared
    optional so that a missing image is reported with its asset-specific
    message (HTTP 400) rather than a generic schema error.

    Attributes:
        identity: Base64-encoded face reference image.
        outfit: Base64-encoded garment reference image.
        product: Optional base64-encoded item reference image.
    """

    identity: str | None = Field(default=None, description="Base64 identity (face) image.")
    outfit: str | None = Field(default=None, description="Base64 outfit (garment) image.")
    product: str | None = Field(default=None, description="Optional base64 product image.")


class GenerateResponse(BaseModel):
    """Response body for a successful ``POST /api/generate``.

    Attributes:
        id: Result identifier.
        prompt: The exact prompt sent to the service.
        created_at: Creation time as a Unix timestamp.
        mime_type: MIME type of ``image``.
        image: Base64-encoded result image.
        filename: Suggested download filename.
    """

    id: str
    prompt: str
    created_at: float
    mime_type: str
    image: str
    filename: str
