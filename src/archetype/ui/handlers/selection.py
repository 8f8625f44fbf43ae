"""Asset upload, preset selection and directive handlers."""

import logging
from collections.abc import Callable

import gradio as gr

from archetype.core.errors import ReadError, UnknownPresetError

from .. import state as studio
from ..formatting import format_asset_status, format_pose_status
from ..models import StudioState

logger = logging.getLogger(__name__)


def make_upload_handler(slot: str) -> Callable[[str | None, StudioState], tuple[str, StudioState]]:
    """Build the ``change`` handler for one image slot.

    Args:
        slot: identity, outfit or product

    Returns:
        Handler taking (file path, state) and returning
        (asset status markdown, updated state)
    """

    def upload_asset(path: str | None, state: StudioState) -> tuple[str, StudioState]:
        state = studio.initialize_studio_state(state)
        try:
            state = studio.set_asset(state, slot, path)
        except ReadError as e:
            logger.warning(f"Could not load {slot} image: {e}")
            gr.Warning(str(e))
        return format_asset_status(state.selection), state

    upload_asset.__name__ = f"upload_{slot}"
    return upload_asset


def pose_button_variants(state: StudioState) -> list[dict]:
    """Button updates highlighting the selected pose, in catalog order."""
    selected = state.selection.pose.id if state.selection.pose is not None else None
    return [
        gr.update(variant="primary" if pose.id == selected else "secondary")
        for pose in state.catalogs.poses
    ]


def make_pose_handler(pose_id: str) -> Callable[[StudioState], tuple]:
    """Build the ``click`` handler of one pose button.

    Returns:
        Handler taking state and returning one update per pose button,
        the pose status markdown, and the updated state
    """

    def toggle_pose(state: StudioState) -> tuple:
        state = studio.initialize_studio_state(state)
        state = studio.toggle_pose(state, pose_id)
        return (*pose_button_variants(state), format_pose_status(state.selection), state)

    toggle_pose.__name__ = f"toggle_pose_{pose_id}"
    return toggle_pose


def _select(selector, option_id: str, state: StudioState, kind: str) -> StudioState:
    state = studio.initialize_studio_state(state)
    try:
        return selector(state, option_id)
    except UnknownPresetError as e:
        logger.warning(f"Ignoring {kind} selection: {e}")
        gr.Warning(str(e))
        return state


def select_lighting_handler(option_id: str, state: StudioState) -> StudioState:
    return _select(studio.select_lighting, option_id, state, "lighting")


def select_skin_texture_handler(option_id: str, state: StudioState) -> StudioState:
    return _select(studio.select_skin_texture, option_id, state, "skin texture")


def select_aspect_ratio_handler(option_id: str, state: StudioState) -> StudioState:
    return _select(studio.select_aspect_ratio, option_id, state, "aspect ratio")


def set_directive_handler(text: str, state: StudioState) -> StudioState:
    state = studio.initialize_studio_state(state)
    return studio.set_directive(state, text)
