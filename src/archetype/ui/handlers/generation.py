"""Image generation handlers."""

import logging

import gradio as gr

from .. import state as studio
from ..formatting import (
    PENDING_MESSAGE,
    format_asset_status,
    format_pose_status,
    format_result_info,
    format_status,
)
from ..models import ASSET_SLOTS, GenerationStatus, StudioState
from .results import render_gallery
from .selection import pose_button_variants

logger = logging.getLogger(__name__)


def lock_controls(state: StudioState) -> tuple[dict, dict, str]:
    """Disable both generation buttons before a request starts.

    Returns:
        Tuple of (generate_button_update, variation_button_update, status_markdown)
    """
    return (
        gr.update(interactive=False),
        gr.update(interactive=False),
        PENDING_MESSAGE,
    )


def _outputs(state: StudioState) -> tuple:
    return (
        render_gallery(state),
        format_status(state),
        gr.update(interactive=state.can_generate),
        gr.update(interactive=state.can_request_variation),
        format_result_info(studio.get_result(state, state.selected_result_id)),
        state,
    )


async def _run(state: StudioState, variation: bool) -> tuple:
    state = studio.initialize_studio_state(state)
    client = studio.get_generation_client()

    try:
        if variation:
            await studio.generate_variation(state, client)
        else:
            await studio.submit_generation(state, client)

    except studio.GenerationInProgressError as e:
        logger.warning(f"Rejected request: {e}")
        gr.Warning(str(e))

    except Exception as e:
        # Unexpected error; the known failure types never reach this point
        logger.error(f"Error generating image: {e}", exc_info=True)
        state.status = GenerationStatus.FAILED
        state.error = f"An unexpected error occurred. Check logs for details. ({e})"

    return _outputs(state)


async def generate_image(state: StudioState) -> tuple:
    """Handle the Generate button.

    Returns:
        Tuple of (gallery, status_markdown, generate_button_update,
        variation_button_update, result_info_markdown, updated_state)
    """
    return await _run(state, variation=False)


async def generate_variation(state: StudioState) -> tuple:
    """Handle the Variation button; same outputs as :func:`generate_image`."""
    return await _run(state, variation=True)


def reset_session_handler(state: StudioState) -> tuple:
    """Start over with an empty selection and no results.

    Returns:
        The outputs of :func:`generate_image`, followed by input resets:
        one per image slot, skin texture, lighting and aspect ratio values,
        directive text, one update per pose button, asset status and pose
        status markdown
    """
    state = studio.reset_session(studio.initialize_studio_state(state))
    selection = state.selection
    return (
        *_outputs(state),
        *(gr.update(value=None) for _ in ASSET_SLOTS),
        selection.skin_texture.id,
        selection.lighting.id,
        selection.aspect_ratio.id,
        "",
        *pose_button_variants(state),
        format_asset_status(selection),
        format_pose_status(selection),
    )
