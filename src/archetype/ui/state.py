"""State management utilities for Archetype UI.

This module holds every transition of the session state: asset uploads,
preset selection, directive edits, generation and variation requests, and
result removal. Handlers in :mod:`archetype.ui.handlers` translate Gradio
events into these calls and render the resulting state.

Only one generation may be in flight per session. A second submit while
the first is pending raises :class:`GenerationInProgressError` before any
state is touched.
"""

import logging
import random
from functools import lru_cache
from pathlib import Path

from archetype.core.catalog import StudioCatalogs, load_catalogs
from archetype.core.config import config
from archetype.core.errors import GenerationError
from archetype.core.generation_client import GenerationClient
from archetype.core.models import GenerationResult, ImageAsset, Selection
from archetype.core.prompt_composer import compose_prompt

from .models import ASSET_SLOTS, GenerationStatus, StudioState
from .validation import (
    ValidationError,
    validate_directive,
    validate_required_assets,
    validate_variation_available,
)

logger = logging.getLogger(__name__)

_generation_client: GenerationClient | None = None


class GenerationInProgressError(RuntimeError):
    """A generation was requested while another one is still pending."""

    pass


@lru_cache(maxsize=1)
def get_catalogs() -> StudioCatalogs:
    """Load the configured preset catalogs once per process."""
    return load_catalogs(config.presets_path)


def get_generation_client() -> GenerationClient:
    """Return the process-wide generation client, creating it on first use."""
    global _generation_client
    if _generation_client is None:
        logger.info("Initializing GenerationClient")
        _generation_client = GenerationClient(config)
    return _generation_client


def initialize_studio_state(
    state: StudioState | None = None, catalogs: StudioCatalogs | None = None
) -> StudioState:
    """Return ``state`` or a fresh default state.

    Args:
        state: Existing StudioState or None
        catalogs: Catalogs for a new state (default: configured catalogs)
    """
    if state is None:
        logger.info("Creating new StudioState")
        state = StudioState.new(catalogs or get_catalogs())
    return state


def reset_session(state: StudioState) -> StudioState:
    """Clear the selection and results.

    The request token is advanced so that a response still in flight is
    discarded when it arrives.
    """
    logger.info(f"Resetting session: {state}")
    state.selection = Selection.with_defaults(state.catalogs)
    state.results = []
    state.status = GenerationStatus.IDLE
    state.error = None
    state.selected_result_id = None
    state.request_token += 1
    return state


# ---------------------------------------------------------------------------
# Selection transitions
# ---------------------------------------------------------------------------


def set_asset(state: StudioState, slot: str, path: str | Path | None) -> StudioState:
    """Replace an image slot with the contents of ``path``.

    A ``None`` path clears the slot. The image content is not inspected.

    Raises:
        ValueError: If ``slot`` is not identity, outfit or product
        ReadError: If the file cannot be read (the slot keeps its old value)
    """
    if slot not in ASSET_SLOTS:
        raise ValueError(f"Unknown image slot: {slot}")

    asset = ImageAsset.from_path(path) if path is not None else None
    setattr(state.selection, slot, asset)
    if asset is None:
        logger.info(f"Cleared {slot} image")
    else:
        logger.info(f"Loaded {slot} image ({len(asset.data)} bytes)")
    return state


def toggle_pose(state: StudioState, pose_id: str) -> StudioState:
    """Select ``pose_id``, or deselect it if it is already selected.

    Raises:
        UnknownPresetError: If the pose is not in the catalog
    """
    pose = state.catalogs.poses.get(pose_id)
    current = state.selection.pose
    if current is not None and current.id == pose.id:
        state.selection.pose = None
        logger.debug(f"Pose deselected: {pose_id}")
    else:
        state.selection.pose = pose
        logger.debug(f"Pose selected: {pose_id}")
    return state


def select_lighting(state: StudioState, option_id: str) -> StudioState:
    state.selection.lighting = state.catalogs.lighting.get(option_id)
    return state


def select_skin_texture(state: StudioState, option_id: str) -> StudioState:
    state.selection.skin_texture = state.catalogs.skin_textures.get(option_id)
    return state


def select_aspect_ratio(state: StudioState, option_id: str) -> StudioState:
    state.selection.aspect_ratio = state.catalogs.aspect_ratios.get(option_id)
    return state


def set_directive(state: StudioState, text: str | None) -> StudioState:
    state.selection.directive = text or ""
    return state


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


def _fail(state: StudioState, message: str) -> None:
    state.status = GenerationStatus.FAILED
    state.error = message


async def submit_generation(
    state: StudioState,
    client: GenerationClient,
    variation: str | None = None,
) -> GenerationResult | None:
    """Validate, compose and dispatch one generation request.

    Failures never escape: validation and service errors put the state in
    FAILED with the error message and earlier results stay as they are.

    Args:
        state: Session state (mutated in place)
        client: Generation client to call
        variation: Optional variation modifier for the prompt

    Returns:
        The new result, or None if the request failed or was discarded

    Raises:
        GenerationInProgressError: If a request is already pending
    """
    if state.is_pending:
        raise GenerationInProgressError("A generation is already in progress.")

    selection = state.selection
    try:
        validate_required_assets(selection)
        validate_directive(selection.directive)
    except ValidationError as e:
        logger.warning(f"Validation error: {e}")
        _fail(state, str(e))
        return None

    prompt = compose_prompt(selection, variation)

    state.request_token += 1
    token = state.request_token
    state.status = GenerationStatus.PENDING
    state.error = None

    try:
        result = await client.generate(
            selection.identity,
            selection.outfit,
            selection.product,
            selection.aspect_ratio.value,
            prompt,
        )
    except GenerationError as e:
        if state.request_token != token:
            logger.warning(f"Discarding failure of superseded request {token}: {e}")
            return None
        logger.error(f"Generation failed: {e}")
        _fail(state, str(e))
        return None

    if state.request_token != token:
        logger.warning(f"Discarding result {result.id} of superseded request {token}")
        return None

    state.results.insert(0, result)
    state.status = GenerationStatus.SUCCEEDED
    logger.info(f"Result {result.id} added; {len(state.results)} result(s) in session")
    return result


async def generate_variation(
    state: StudioState,
    client: GenerationClient,
    rng: random.Random | None = None,
) -> GenerationResult | None:
    """Re-run the current selection with a random variation modifier.

    Args:
        state: Session state (mutated in place)
        client: Generation client to call
        rng: Random source for the modifier (default: module ``random``)

    Raises:
        GenerationInProgressError: If a request is already pending
    """
    if state.is_pending:
        raise GenerationInProgressError("A generation is already in progress.")

    try:
        validate_variation_available(state)
    except ValidationError as e:
        logger.warning(f"Validation error: {e}")
        _fail(state, str(e))
        return None

    modifier = (rng or random).choice(state.catalogs.variation_modifiers)
    logger.info(f"Requesting variation: {modifier}")
    return await submit_generation(state, client, variation=modifier)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


def get_result(state: StudioState, result_id: str | None) -> GenerationResult | None:
    if result_id is None:
        return None
    return next((r for r in state.results if r.id == result_id), None)


def remove_result(state: StudioState, result_id: str) -> bool:
    """Delete one result by id.

    Returns:
        True if a result was removed, False if the id was unknown
    """
    remaining = [r for r in state.results if r.id != result_id]
    if len(remaining) == len(state.results):
        logger.warning(f"Cannot remove result {result_id}: not found")
        return False

    state.results = remaining
    if state.selected_result_id == result_id:
        state.selected_result_id = None
    logger.info(f"Removed result {result_id}; {len(remaining)} result(s) left")
    return True
