"""Core functionality for Archetype Studio.

This package holds everything that does not depend on a user interface:

- **config.py**: Environment-based configuration using Pydantic Settings
  (ARCHETYPE_ prefix, GEMINI_API_KEY for the credential)
- **catalog.py**: Immutable pose/lighting/skin-texture/aspect-ratio catalogs
  loaded from ``data/presets.json``
- **models.py**: ImageAsset, Selection and GenerationResult
- **prompt_composer.py**: Pure prompt assembly from a Selection
- **generation_client.py**: Single-shot async call to the synthesis service
- **errors.py**: ServiceError, EmptyResultError, ReadError, UnknownPresetError

Usage Example
-------------
    from archetype.core import GenerationClient, Selection, compose_prompt, config
    from archetype.core.catalog import load_catalogs

    catalogs = load_catalogs(config.presets_path)
    selection = Selection.with_defaults(catalogs)
    prompt = compose_prompt(selection)
    result = await GenerationClient(config).generate(
        identity, outfit, None, selection.aspect_ratio.value, prompt
    )
"""

from archetype.core.catalog import PresetCatalog, PresetOption, StudioCatalogs, load_catalogs
from archetype.core.config import ArchetypeConfig, config
from archetype.core.errors import (
    EmptyResultError,
    GenerationError,
    ReadError,
    ServiceError,
    UnknownPresetError,
)
from archetype.core.generation_client import GenerationClient
from archetype.core.models import GenerationResult, ImageAsset, Selection
from archetype.core.prompt_composer import compose_directive, compose_prompt

__all__ = [
    "ArchetypeConfig",
    "config",
    "PresetCatalog",
    "PresetOption",
    "StudioCatalogs",
    "load_catalogs",
    "GenerationClient",
    "GenerationResult",
    "ImageAsset",
    "Selection",
    "compose_directive",
    "compose_prompt",
    "EmptyResultError",
    "GenerationError",
    "ReadError",
    "ServiceError",
    "UnknownPresetError",
]
