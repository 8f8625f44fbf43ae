"""Data models for Archetype UI session state."""

import logging
from dataclasses import dataclass, field
from enum import Enum

from archetype.core.catalog import StudioCatalogs
from archetype.core.models import GenerationResult, Selection

logger = logging.getLogger(__name__)


class GenerationStatus(str, Enum):
    """Lifecycle of the single generation request a session may have."""

    IDLE = "idle"
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class StudioState:
    """Session state for the Gradio UI.

    Each browser session gets its own copy (Gradio deep-copies the initial
    ``gr.State`` value), so nothing here is shared between users.

    Attributes
    ----------
    catalogs : StudioCatalogs
        Preset catalogs the selection draws from
    selection : Selection
        Current images, presets and directive text
    results : list[GenerationResult]
        Generated results, newest first
    status : GenerationStatus
        Current request status
    error : str | None
        Message of the most recent failure; cleared on the next submit
    request_token : int
        Incremented on every dispatch and on reset; an outcome is only
        written back if its token is still current
    selected_result_id : str | None
        Result currently selected in the gallery
    """

    catalogs: StudioCatalogs
    selection: Selection
    results: list[GenerationResult] = field(default_factory=list)
    status: GenerationStatus = GenerationStatus.IDLE
    error: str | None = None
    request_token: int = 0
    selected_result_id: str | None = None

    @classmethod
    def new(cls, catalogs: StudioCatalogs) -> "StudioState":
        return cls(catalogs=catalogs, selection=Selection.with_defaults(catalogs))

    @property
    def is_pending(self) -> bool:
        return self.status is GenerationStatus.PENDING

    @property
    def can_generate(self) -> bool:
        return not self.is_pending

    @property
    def can_request_variation(self) -> bool:
        return bool(self.results) and not self.is_pending

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"StudioState(status={self.status.value}, "
            f"images={self.selection.image_count}, "
            f"results={len(self.results)})"
        )


# Gradio image slots, in request order
ASSET_SLOTS = ("identity", "outfit", "product")

ASSET_LABELS = {
    "identity": "Identity",
    "outfit": "Outfit",
    "product": "Product",
}
