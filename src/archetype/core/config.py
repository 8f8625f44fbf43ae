"""Configuration management for Archetype Studio.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the ARCHETYPE_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (ARCHETYPE_* prefix)
2. .env file in the project root
3. Default values defined in ArchetypeConfig

The service credential is the one exception to the prefix rule: it is read
from ``ARCHETYPE_API_KEY`` or, failing that, ``GEMINI_API_KEY`` so that an
existing Gemini environment works unchanged.

Example .env file:
    GEMINI_API_KEY=your-key
    ARCHETYPE_MODEL_NAME=gemini-2.5-flash-image
    ARCHETYPE_SERVER_PORT=7860

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
This ensures a single source of truth for all configuration values across
the application.

Usage Example
-------------
    from archetype.core.config import config

    print(config.model_name)
    print(config.presets_path)

Credential Handling
-------------------
The API key is not validated here. A missing or wrong key surfaces as an
authentication failure from the outbound generation call, which the UI
reports like any other service error.
"""

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PRESETS_PATH = Path(__file__).resolve().parent.parent / "data" / "presets.json"


class ArchetypeConfig(BaseSettings):
    """Main configuration for Archetype Studio.

    Attributes
    ----------
    Service Settings:
        api_key : str
            Credential for the image synthesis service (ARCHETYPE_API_KEY or
            GEMINI_API_KEY)
        model_name : str
            Multimodal model used for image synthesis

    Catalog Settings:
        presets_path : Path
            JSON file holding the pose, lighting, skin-texture and
            aspect-ratio catalogs plus the variation modifiers

    Server Settings:
        server_host : str
            Bind address for the ASGI server
        server_port : int
            Port for the ASGI server (1024-65535)
        ui_path : str
            Mount point of the Gradio UI on the ASGI app
        gradio_share : bool
            Create public gradio.live link for the standalone UI

    Misc:
        log_level : str
            Root logging level for the entry points
        export_dir : Path | None
            Directory for exported results (system temp dir when unset)

    Examples
    --------
        >>> custom_config = ArchetypeConfig(api_key="test", server_port=8080)
        >>> custom_config.model_name
        'gemini-2.5-flash-image'
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ARCHETYPE_",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Service settings
    api_key: str = Field(
        default="",
        validation_alias=AliasChoices("ARCHETYPE_API_KEY", "GEMINI_API_KEY"),
        description="Credential for the image synthesis service",
    )
    model_name: str = Field(
        default="gemini-2.5-flash-image",
        description="Multimodal model used for image synthesis",
    )

    # Catalogs
    presets_path: Path = Field(
        default=DEFAULT_PRESETS_PATH,
        description="JSON file with preset catalogs and variation modifiers",
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    server_port: int = Field(
        default=7860,
        description="Server port",
        ge=1024,
        le=65535,
    )
    ui_path: str = Field(
        default="/",
        description="Path the Gradio UI is mounted on",
    )
    gradio_share: bool = Field(
        default=False,
        description="Create public gradio.live link (keep False for local-only)",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Root logging level",
    )
    export_dir: Path | None = Field(
        default=None,
        description="Directory for exported results (temp dir when unset)",
    )


# Global configuration instance
# Loads values from environment variables (ARCHETYPE_* prefix) and .env file.
config = ArchetypeConfig()
