"""Gradio UI for Archetype Studio."""

import logging

import gradio as gr

from archetype.core.catalog import StudioCatalogs
from archetype.core.config import config

from .components import AssetSlotUI, PosePickerUI, preset_radio
from .formatting import format_asset_status, format_pose_status, format_result_info, format_status
from .handlers import (
    export_selected_result,
    generate_image,
    generate_variation,
    lock_controls,
    make_pose_handler,
    make_upload_handler,
    remove_selected_result,
    reset_session_handler,
    select_aspect_ratio_handler,
    select_lighting_handler,
    select_result,
    select_skin_texture_handler,
    set_directive_handler,
)
from .models import ASSET_SLOTS, StudioState
from .state import get_catalogs

# Configure logging
logging.basicConfig(
    level=config.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

CUSTOM_CSS = """
.studio-status {
    min-height: 2.5em;
}
.result-info pre {
    white-space: pre-wrap;
}
"""


def create_ui(catalogs: StudioCatalogs | None = None) -> gr.Blocks:
    """Create the studio UI.

    Args:
        catalogs: Preset catalogs (default: loaded from ``config.presets_path``)

    Returns:
        Gradio Blocks app
    """
    catalogs = catalogs or get_catalogs()
    initial_state = StudioState.new(catalogs)

    app = gr.Blocks(title="Archetype Studio", css=CUSTOM_CSS)

    with app:
        # Session state - one instance per user
        studio_state = gr.State(initial_state)

        gr.Markdown(
            """
            # ARCHETYPE STUDIO
            ### Professional content engine
            """
        )

        with gr.Row():
            with gr.Column(scale=4):
                controls = create_controls(studio_state, catalogs, initial_state)
            with gr.Column(scale=8):
                results = create_results(studio_state)

        wire_generation(studio_state, controls, results)

    return app


def create_controls(
    studio_state: gr.State, catalogs: StudioCatalogs, initial_state: StudioState
) -> dict:
    """Asset slots, presets, directive text and the action buttons.

    Returns:
        Dictionary of the components needed for generation wiring
    """
    gr.Markdown("### 01. Asset Library")
    slots = {slot: AssetSlotUI(slot) for slot in ASSET_SLOTS}
    asset_status = gr.Markdown(format_asset_status(initial_state.selection))

    skin_radio = preset_radio("Skin Texture", catalogs.skin_textures, info="Applies to the identity")

    gr.Markdown("### 02. Art Direction")
    lighting_radio = preset_radio("Lighting", catalogs.lighting)
    ratio_radio = preset_radio("Aspect Ratio", catalogs.aspect_ratios)

    gr.Markdown("**Pose Preset** · click again to deselect")
    pose_picker = PosePickerUI(catalogs.poses)
    pose_status = gr.Markdown(format_pose_status(initial_state.selection))

    directive_input = gr.Textbox(
        label="Creative Directive",
        placeholder="Describe the scene (e.g., 'sunset rooftop, city skyline')...",
        lines=3,
    )

    gr.Markdown("### 03. Render")
    status_output = gr.Markdown(format_status(initial_state), elem_classes=["studio-status"])
    with gr.Row():
        generate_btn = gr.Button("Generate", variant="primary")
        variation_btn = gr.Button("Generate Similar Variation", interactive=False)
    reset_btn = gr.Button("New Session", variant="secondary", size="sm")

    # Uploads
    for slot, slot_ui in slots.items():
        slot_ui.image.change(
            fn=make_upload_handler(slot),
            inputs=[slot_ui.image, studio_state],
            outputs=[asset_status, studio_state],
        )

    # Presets
    skin_radio.change(
        fn=select_skin_texture_handler,
        inputs=[skin_radio, studio_state],
        outputs=[studio_state],
    )
    lighting_radio.change(
        fn=select_lighting_handler,
        inputs=[lighting_radio, studio_state],
        outputs=[studio_state],
    )
    ratio_radio.change(
        fn=select_aspect_ratio_handler,
        inputs=[ratio_radio, studio_state],
        outputs=[studio_state],
    )
    for pose_id, button in pose_picker.buttons.items():
        button.click(
            fn=make_pose_handler(pose_id),
            inputs=[studio_state],
            outputs=[*pose_picker.outputs, pose_status, studio_state],
        )

    directive_input.change(
        fn=set_directive_handler,
        inputs=[directive_input, studio_state],
        outputs=[studio_state],
    )

    return {
        "generate_btn": generate_btn,
        "variation_btn": variation_btn,
        "reset_btn": reset_btn,
        "status_output": status_output,
        # Inputs cleared by a session reset, in reset_session_handler order
        "reset_inputs": [
            *(slots[slot].image for slot in ASSET_SLOTS),
            skin_radio,
            lighting_radio,
            ratio_radio,
            directive_input,
            *pose_picker.outputs,
            asset_status,
            pose_status,
        ],
    }


def create_results(studio_state: gr.State) -> dict:
    """Results gallery with inspect, export and remove actions.

    Returns:
        Dictionary with the gallery and result info components
    """
    gr.Markdown("### Generated Images")

    gallery = gr.Gallery(
        label="Results",
        type="pil",
        height=560,
        columns=3,
        object_fit="contain",
        allow_preview=True,
    )
    result_info = gr.Markdown(format_result_info(None), elem_classes=["result-info"])

    with gr.Row():
        export_btn = gr.Button("Export", variant="secondary")
        remove_btn = gr.Button("Remove", variant="stop")
    download_file = gr.File(label="Download", visible=False, interactive=False)

    gallery.select(
        fn=select_result,
        inputs=[studio_state],
        outputs=[result_info, studio_state],
    )

    export_btn.click(
        fn=export_selected_result,
        inputs=[studio_state],
        outputs=[download_file],
    )

    return {
        "gallery": gallery,
        "result_info": result_info,
        "remove_btn": remove_btn,
    }


def wire_generation(studio_state: gr.State, controls: dict, results: dict) -> None:
    """Connect the generate, variation, reset and remove actions."""
    generate_btn = controls["generate_btn"]
    variation_btn = controls["variation_btn"]
    status_output = controls["status_output"]

    generation_outputs = [
        results["gallery"],
        status_output,
        generate_btn,
        variation_btn,
        results["result_info"],
        studio_state,
    ]

    # Lock both buttons first so a second click cannot start another request
    for button, handler in ((generate_btn, generate_image), (variation_btn, generate_variation)):
        button.click(
            fn=lock_controls,
            inputs=[studio_state],
            outputs=[generate_btn, variation_btn, status_output],
            queue=False,
        ).then(
            fn=handler,
            inputs=[studio_state],
            outputs=generation_outputs,
        )

    controls["reset_btn"].click(
        fn=reset_session_handler,
        inputs=[studio_state],
        outputs=[*generation_outputs, *controls["reset_inputs"]],
    )

    results["remove_btn"].click(
        fn=remove_selected_result,
        inputs=[studio_state],
        outputs=[results["gallery"], results["result_info"], variation_btn, studio_state],
    )


def main():
    """Launch the standalone Gradio UI."""
    logger.info("Starting Archetype Studio UI...")
    logger.info(f"Model: {config.model_name}")

    app = create_ui()

    logger.info(f"Launching Gradio UI on {config.server_host}:{config.server_port}")

    app.queue().launch(
        server_name=config.server_host,
        server_port=config.server_port,
        share=config.gradio_share,
        show_error=True,
        inbrowser=False,
    )


if __name__ == "__main__":
    main()
