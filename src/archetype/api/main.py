"""Archetype Studio: FastAPI Application.

This module defines the FastAPI ``app`` instance, the REST API routes, and
the ``main()`` CLI function that mounts the Gradio studio and launches the
uvicorn server.

Architecture
------------
The API is stateless: every request carries its own preset ids, directive
and images, so nothing is kept between calls.

- **Preset catalogs** are loaded once at startup from ``presets.json`` and
  served to clients via ``GET /api/config``.
- **Image synthesis** is performed by
  :class:`~archetype.core.generation_client.GenerationClient`, which makes
  one request to the external service per generation.
- **The studio UI** is the Gradio app from :mod:`archetype.ui.app`, mounted
  at ``config.ui_path`` by :func:`main`.

Endpoints
---------
========  ============================  ====================================
Method    Path                          Purpose
========  ============================  ====================================
GET       ``/api/health``               Liveness check
GET       ``/api/config``               Version, catalogs, modifiers
POST      ``/api/prompt/compile``       Preview the composed prompt
POST      ``/api/generate``             Synthesize one photo
========  ============================  ====================================

Usage
-----
CLI (installed entry point)::

    archetype

Direct invocation::

    python -m archetype.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from archetype import __version__
from archetype.api.models import ComposeRequest, GenerateRequest, GenerateResponse
from archetype.core.catalog import StudioCatalogs, load_catalogs
from archetype.core.config import config
from archetype.core.errors import GenerationError, ReadError, UnknownPresetError
from archetype.core.generation_client import GenerationClient
from archetype.core.models import ImageAsset, Selection
from archetype.core.prompt_composer import compose_prompt
from archetype.ui.validation import (
    ValidationError,
    validate_directive,
    validate_required_inputs,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Application lifecycle: catalogs and generation client setup.
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application startup and shutdown lifecycle.

    On startup:
        Loads the preset catalogs and creates a :class:`GenerationClient`,
        storing both on ``app.state``.  The underlying SDK client is created
        lazily on the first ``POST /api/generate`` call, so the server starts
        even without an API key.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to the application for the duration of its lifetime.
    """
    app.state.catalogs = load_catalogs(config.presets_path)
    app.state.generation_client = GenerationClient(config)
    logger.info(f"GenerationClient initialised (model: {config.model_name}).")

    yield


# ---------------------------------------------------------------------------
# FastAPI application instance.
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Archetype Studio",
    description="Fashion photo synthesis API: identity, outfit and product composition.",
    version=__version__,
    lifespan=lifespan,
)

# Allow cross-origin requests so a separately served frontend can call the
# API during development.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Request resolution helpers.
# ---------------------------------------------------------------------------


def _decode_image(encoded: str | None, slot: str) -> ImageAsset | None:
    """Decode one optional base64 image field.

    Raises:
        HTTPException: 400 if the field is present but not valid base64.
    """
    if not encoded:
        return None
    try:
        return ImageAsset.from_base64(encoded)
    except ReadError as e:
        raise HTTPException(status_code=400, detail=f"Invalid {slot} image: {e}") from e


def _resolve_selection(
    req: ComposeRequest,
    catalogs: StudioCatalogs,
    images: dict[str, ImageAsset | None] | None = None,
) -> Selection:
    """Build a :class:`Selection` from request ids and decoded images.

    Raises:
        HTTPException: 400 for an unknown preset id or an over-long directive.
    """
    try:
        validate_directive(req.directive)
        return Selection.from_ids(
            catalogs,
            lighting_id=req.lighting_id,
            skin_texture_id=req.skin_texture_id,
            aspect_ratio_id=req.aspect_ratio_id,
            pose_id=req.pose_id,
            directive=req.directive,
            **(images or {}),
        )
    except (UnknownPresetError, ValidationError) as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@app.get("/api/health")
async def health() -> dict:
    """Liveness check.

    Returns:
        Dictionary with ``status`` and ``version``.
    """
    return {"status": "ok", "version": __version__}


@app.get("/api/config")
async def get_config() -> dict:
    """Return the preset catalogs for the frontend.

    The response includes:

    - ``version``: API version string.
    - ``model``: name of the synthesis model requests are sent to.
    - ``poses``, ``lighting``, ``skin_textures``, ``aspect_ratios``: preset
      catalogs in display order; the first entry of each is the default.
    - ``variation_modifiers``: the pool a variation is drawn from.

    Returns:
        Dictionary with the keys listed above.
    """
    catalogs: StudioCatalogs = app.state.catalogs
    return {
        "version": __version__,
        "model": config.model_name,
        **catalogs.to_dict(),
    }


@app.post("/api/prompt/compile")
async def compile_prompt(req: ComposeRequest) -> dict:
    """Preview the composed prompt without generating an image.

    Args:
        req: Preset ids, directive and optional variation.  Images are not
            needed to compose a prompt.

    Returns:
        Dictionary with ``prompt`` (the exact text a generation would send)
        and ``aspect_ratio`` (the resolved ratio token).

    Raises:
        HTTPException: 400 for an unknown preset id.
    """
    selection = _resolve_selection(req, app.state.catalogs)
    return {
        "prompt": compose_prompt(selection, variation=req.variation),
        "aspect_ratio": selection.aspect_ratio.value,
    }


@app.post("/api/generate", response_model=GenerateResponse)
async def generate_image(req: GenerateRequest) -> GenerateResponse:
    """Synthesize one photo from base64 reference images and preset ids.

    This endpoint:

    1. Checks that the identity and outfit images are present.
    2. Decodes the identity, outfit and optional product images.
    3. Resolves preset ids against the catalogs.
    4. Composes the prompt and makes exactly one service call.

    Args:
        req: Validated :class:`GenerateRequest` payload.

    Returns:
        :class:`GenerateResponse` with the result id, the exact prompt sent,
        its timestamp, and the base64 PNG.

    Raises:
        HTTPException: 400 for a missing or undecodable image, an unknown
            preset id, or an over-long directive; 502 if the service call
            fails or returns no image.
    """
    try:
        validate_required_inputs(req.identity, req.outfit)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    images = {
        "identity": _decode_image(req.identity, "identity"),
        "outfit": _decode_image(req.outfit, "outfit"),
        "product": _decode_image(req.product, "product"),
    }
    selection = _resolve_selection(req, app.state.catalogs, images)

    prompt = compose_prompt(selection, variation=req.variation)
    client: GenerationClient = app.state.generation_client

    try:
        result = await client.generate(
            identity=selection.identity,
            outfit=selection.outfit,
            product=selection.product,
            aspect_ratio=selection.aspect_ratio.value,
            prompt=prompt,
        )
    except GenerationError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e

    return GenerateResponse(
        id=result.id,
        prompt=result.prompt,
        created_at=result.created_at,
        mime_type=result.image.mime_type,
        image=result.image.to_base64(),
        filename=result.export_filename,
    )


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Mount the Gradio studio and launch the uvicorn ASGI server.

    Reads host, port and the UI mount path from
    :data:`~archetype.core.config.config` (``ARCHETYPE_SERVER_HOST``,
    ``ARCHETYPE_SERVER_PORT``, ``ARCHETYPE_UI_PATH``).  Defaults to
    ``0.0.0.0:7860`` with the studio at ``/``.

    This function is registered as the ``archetype`` console script in
    ``pyproject.toml``.
    """
    import gradio as gr
    import uvicorn

    from archetype.ui.app import create_ui

    logger.info(f"Mounting studio UI at {config.ui_path}")
    server_app = gr.mount_gradio_app(app, create_ui(), path=config.ui_path)

    uvicorn.run(
        server_app,
        host=config.server_host,
        port=config.server_port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
