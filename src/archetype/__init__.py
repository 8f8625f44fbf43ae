"""Archetype Studio - identity-preserving fashion photo synthesis."""

__version__ = "0.1.0"

from archetype.core.config import ArchetypeConfig, config

__all__ = [
    "ArchetypeConfig",
    "config",
]
