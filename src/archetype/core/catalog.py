"""Preset catalogs for poses, lighting, skin textures and aspect ratios.

The catalogs are static configuration: they are read once from a JSON file
(``data/presets.json`` by default), validated with Pydantic, and then handed
around as immutable objects. Nothing in the application mutates them.

File Layout
-----------
::

    {
      "poses":          [{"id": ..., "label": ..., "prompt": ...}, ...],
      "lighting":       [{"id": ..., "label": ..., "prompt": ...}, ...],
      "skin_textures":  [{"id": ..., "label": ..., "prompt": ...}, ...],
      "aspect_ratios":  [{"id": ..., "label": ..., "value": "1:1"}, ...],
      "variation_modifiers": ["...", ...]
    }

The first entry of the lighting, skin-texture and aspect-ratio catalogs is
the default selection. Poses have no default: no pose is selected until the
user picks one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import UnknownPresetError

logger = logging.getLogger(__name__)

AspectRatioValue = Literal["1:1", "9:16", "16:9", "4:3"]


class PresetOption(BaseModel):
    """A single selectable preset: stable id, display label, prompt fragment."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    label: str
    prompt: str = ""


class AspectRatioOption(PresetOption):
    """Aspect-ratio preset; ``value`` is the token passed to the service."""

    value: AspectRatioValue


@dataclass(frozen=True)
class PresetCatalog:
    """Ordered, read-only collection of preset options."""

    name: str
    options: tuple[PresetOption, ...]

    def __post_init__(self) -> None:
        ids = [option.id for option in self.options]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"Duplicate {self.name} preset ids: {', '.join(duplicates)}")

    def __iter__(self):
        return iter(self.options)

    def __len__(self) -> int:
        return len(self.options)

    def __contains__(self, option_id: object) -> bool:
        return any(option.id == option_id for option in self.options)

    @property
    def ids(self) -> list[str]:
        return [option.id for option in self.options]

    @property
    def default(self) -> PresetOption:
        """First option of the catalog.

        Raises:
            ValueError: If the catalog is empty
        """
        if not self.options:
            raise ValueError(f"The {self.name} catalog has no options")
        return self.options[0]

    def get(self, option_id: str) -> PresetOption:
        """Look up an option by id.

        Raises:
            UnknownPresetError: If no option has this id
        """
        for option in self.options:
            if option.id == option_id:
                return option
        raise UnknownPresetError(self.name, option_id)

    def choices(self) -> list[tuple[str, str]]:
        """(label, id) pairs in catalog order, the shape Gradio radios expect."""
        return [(option.label, option.id) for option in self.options]


class PresetFile(BaseModel):
    """Schema of the presets JSON file."""

    poses: list[PresetOption] = Field(default_factory=list)
    lighting: list[PresetOption] = Field(..., min_length=1)
    skin_textures: list[PresetOption] = Field(..., min_length=1)
    aspect_ratios: list[AspectRatioOption] = Field(..., min_length=1)
    variation_modifiers: list[str] = Field(..., min_length=1)

    @field_validator("variation_modifiers")
    @classmethod
    def _strip_modifiers(cls, value: list[str]) -> list[str]:
        modifiers = [v.strip() for v in value if v and v.strip()]
        if not modifiers:
            raise ValueError("At least one non-empty variation modifier is required")
        return modifiers


@dataclass(frozen=True)
class StudioCatalogs:
    """All preset catalogs plus the variation modifiers."""

    poses: PresetCatalog
    lighting: PresetCatalog
    skin_textures: PresetCatalog
    aspect_ratios: PresetCatalog
    variation_modifiers: tuple[str, ...]

    @classmethod
    def from_preset_file(cls, data: PresetFile) -> StudioCatalogs:
        return cls(
            poses=PresetCatalog("pose", tuple(data.poses)),
            lighting=PresetCatalog("lighting", tuple(data.lighting)),
            skin_textures=PresetCatalog("skin texture", tuple(data.skin_textures)),
            aspect_ratios=PresetCatalog("aspect ratio", tuple(data.aspect_ratios)),
            variation_modifiers=tuple(data.variation_modifiers),
        )

    def to_dict(self) -> dict:
        """JSON-ready view of the catalogs (used by ``GET /api/config``)."""
        return {
            "poses": [p.model_dump() for p in self.poses],
            "lighting": [p.model_dump() for p in self.lighting],
            "skin_textures": [p.model_dump() for p in self.skin_textures],
            "aspect_ratios": [p.model_dump() for p in self.aspect_ratios],
            "variation_modifiers": list(self.variation_modifiers),
        }


def load_catalogs(path: Path | str) -> StudioCatalogs:
    """Read and validate the presets file.

    Args:
        path: Location of the presets JSON file

    Returns:
        Validated, immutable catalogs

    Raises:
        FileNotFoundError: If the file does not exist
        pydantic.ValidationError: If the file does not match the schema
        ValueError: If a catalog contains duplicate ids
    """
    path = Path(path)
    logger.info(f"Loading preset catalogs from {path}")
    data = PresetFile.model_validate_json(path.read_text(encoding="utf-8"))
    catalogs = StudioCatalogs.from_preset_file(data)
    logger.info(
        f"Loaded {len(catalogs.poses)} poses, {len(catalogs.lighting)} lighting, "
        f"{len(catalogs.skin_textures)} skin textures, "
        f"{len(catalogs.aspect_ratios)} aspect ratios, "
        f"{len(catalogs.variation_modifiers)} variation modifiers"
    )
    return catalogs
