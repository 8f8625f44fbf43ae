"""Result gallery handlers: selection, removal and export."""

import logging
import tempfile
from pathlib import Path

import gradio as gr
from PIL import Image

from archetype.core.config import config

from .. import state as studio
from ..formatting import format_result_caption, format_result_info
from ..models import StudioState

logger = logging.getLogger(__name__)

PLACEHOLDER_SIZE = (256, 256)
PLACEHOLDER_COLOR = (200, 200, 200)


def render_gallery(state: StudioState) -> list[tuple]:
    """Gallery value for the session results, newest first.

    A result that cannot be decoded is shown as a grey placeholder so that
    gallery positions keep matching ``state.results``.
    """
    gallery = []
    for result in state.results:
        caption = format_result_caption(result)
        try:
            image = result.to_pil()
        except (OSError, ValueError) as e:
            logger.warning(f"Cannot display result {result.id}: {e}")
            image = Image.new("RGB", PLACEHOLDER_SIZE, PLACEHOLDER_COLOR)
            caption = f"{caption} (unreadable)"
        gallery.append((image, caption))
    return gallery


def select_result(state: StudioState, evt: gr.SelectData) -> tuple[str, StudioState]:
    """Handle a click on a gallery item.

    Args:
        state: UI state
        evt: Gradio selection event (``index`` is the gallery position)

    Returns:
        Tuple of (result_info_markdown, updated_state)
    """
    index = evt.index
    if isinstance(index, (list, tuple)):
        index = index[0]

    if index is None or not 0 <= index < len(state.results):
        state.selected_result_id = None
        return format_result_info(None), state

    result = state.results[index]
    state.selected_result_id = result.id
    logger.debug(f"Selected result {result.id}")
    return format_result_info(result), state


def remove_selected_result(state: StudioState) -> tuple[list[tuple], str, dict, StudioState]:
    """Remove the selected result from the session.

    Returns:
        Tuple of (gallery, result_info_markdown, variation_button_update, updated_state)
    """
    if state.selected_result_id is None:
        gr.Info("Select a result first")
    else:
        studio.remove_result(state, state.selected_result_id)

    return (
        render_gallery(state),
        format_result_info(None),
        gr.update(interactive=state.can_request_variation),
        state,
    )


def export_selected_result(state: StudioState) -> dict:
    """Write the selected result to disk and offer it for download.

    Returns:
        Update for the download file component
    """
    result = studio.get_result(state, state.selected_result_id)
    if result is None:
        gr.Info("Select a result first")
        return gr.update(value=None, visible=False)

    try:
        export_root = config.export_dir or Path(tempfile.gettempdir()) / "archetype-exports"
        path = result.export(export_root)
    except OSError as e:
        logger.error(f"Error exporting result {result.id}: {e}", exc_info=True)
        gr.Warning(f"Export failed: {e}")
        return gr.update(value=None, visible=False)

    return gr.update(value=str(path), visible=True)
