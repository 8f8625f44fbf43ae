"""Reusable UI components for the Archetype Gradio interface."""

import gradio as gr

from archetype.core.catalog import PresetCatalog

from .models import ASSET_LABELS


class AssetSlotUI:
    """Upload slot for one reference image.

    The image is handed to handlers as a file path; reading it into an
    ImageAsset happens in the handler.
    """

    HINTS = {
        "identity": "Source face. Facial features are preserved 1:1.",
        "outfit": "Garment reference. Color, texture and pattern are replicated.",
        "product": "Optional item to integrate naturally.",
    }

    def __init__(self, slot: str, height: int = 220):
        self.slot = slot
        required = "" if slot == "product" else " (Required)"
        self.image = gr.Image(
            label=f"{ASSET_LABELS[slot]}{required}",
            type="filepath",
            sources=["upload", "clipboard"],
            height=height,
        )
        gr.Markdown(f"<sub>{self.HINTS[slot]}</sub>")


class PosePickerUI:
    """Row of toggle buttons, one per pose preset.

    Clicking the selected pose again deselects it, which a radio cannot do.
    """

    def __init__(self, catalog: PresetCatalog):
        self.catalog = catalog
        self.buttons: dict[str, gr.Button] = {}
        with gr.Row():
            for pose in catalog:
                self.buttons[pose.id] = gr.Button(pose.label, variant="secondary", size="sm")

    @property
    def outputs(self) -> list[gr.Button]:
        """Buttons in catalog order, matching ``pose_button_variants``."""
        return [self.buttons[pose_id] for pose_id in self.catalog.ids]


def preset_radio(label: str, catalog: PresetCatalog, info: str | None = None) -> gr.Radio:
    """Single-select picker over a catalog, defaulting to its first option."""
    return gr.Radio(
        label=label,
        choices=catalog.choices(),
        value=catalog.default.id,
        info=info,
    )
