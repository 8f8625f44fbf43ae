"""UI event handlers organized by feature area.

This package provides handlers for all Gradio UI events, organized into logical modules:
- selection: Image uploads, preset pickers and directive text
- generation: Generate, variation and session reset
- results: Result gallery selection, removal and export
"""

from .generation import (
    generate_image,
    generate_variation,
    lock_controls,
    reset_session_handler,
)
from .results import (
    export_selected_result,
    remove_selected_result,
    render_gallery,
    select_result,
)
from .selection import (
    make_pose_handler,
    make_upload_handler,
    pose_button_variants,
    select_aspect_ratio_handler,
    select_lighting_handler,
    select_skin_texture_handler,
    set_directive_handler,
)

__all__ = [
    # Generation handlers
    "generate_image",
    "generate_variation",
    "lock_controls",
    "reset_session_handler",
    # Result handlers
    "export_selected_result",
    "remove_selected_result",
    "render_gallery",
    "select_result",
    # Selection handlers
    "make_pose_handler",
    "make_upload_handler",
    "pose_button_variants",
    "select_aspect_ratio_handler",
    "select_lighting_handler",
    "select_skin_texture_handler",
    "set_directive_handler",
]
