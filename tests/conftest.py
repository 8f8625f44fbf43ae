"""Shared pytest fixtures for Archetype tests."""

import shutil
import tempfile
from io import BytesIO
from pathlib import Path
from types import SimpleNamespace
from typing import Generator
from unittest.mock import AsyncMock, MagicMock, Mock

import pytest
from PIL import Image

from archetype.core.catalog import StudioCatalogs, load_catalogs
from archetype.core.config import DEFAULT_PRESETS_PATH, ArchetypeConfig
from archetype.core.generation_client import GenerationClient
from archetype.core.models import GenerationResult, ImageAsset
from archetype.ui.models import StudioState


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> ArchetypeConfig:
    """Create a test configuration that never reads the environment.

    Returns:
        ArchetypeConfig with a dummy key and exports going to ``temp_dir``
    """
    return ArchetypeConfig(
        api_key="test-key",
        model_name="test-image-model",
        export_dir=temp_dir / "exports",
        _env_file=None,
    )


@pytest.fixture(scope="session")
def catalogs() -> StudioCatalogs:
    """Catalogs from the packaged presets file."""
    return load_catalogs(DEFAULT_PRESETS_PATH)


@pytest.fixture
def png_bytes() -> bytes:
    """A tiny but real PNG, so results can be decoded for display."""
    buffer = BytesIO()
    Image.new("RGB", (4, 4), color=(200, 120, 80)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def image_asset(png_bytes: bytes) -> ImageAsset:
    return ImageAsset(data=png_bytes, mime_type="image/png")


@pytest.fixture
def image_file(temp_dir: Path, png_bytes: bytes) -> Path:
    """An image file on disk, as Gradio hands uploads to handlers."""
    path = temp_dir / "upload.png"
    path.write_bytes(png_bytes)
    return path


@pytest.fixture
def studio_state(catalogs: StudioCatalogs) -> StudioState:
    """Fresh session state with default presets and no images."""
    return StudioState.new(catalogs)


@pytest.fixture
def ready_state(studio_state: StudioState, image_asset: ImageAsset) -> StudioState:
    """Session state with identity and outfit images present."""
    studio_state.selection.identity = image_asset
    studio_state.selection.outfit = image_asset
    return studio_state


@pytest.fixture
def generation_client(png_bytes: bytes) -> Mock:
    """Generation client double whose results echo the prompt they were given.

    ``generate`` is an AsyncMock, so call counts and arguments can be
    asserted directly.
    """

    def _generate(identity, outfit, product, aspect_ratio, prompt):
        return GenerationResult.create(ImageAsset(data=png_bytes, mime_type="image/png"), prompt)

    client = Mock(spec=GenerationClient)
    client.generate = AsyncMock(side_effect=_generate)
    return client


@pytest.fixture
def genai_response(png_bytes: bytes):
    """Factory for SDK-shaped responses.

    Call with ``parts`` to override the parts of the first candidate; the
    default response carries a text part followed by one PNG image part.
    """

    def _make(parts=None):
        if parts is None:
            parts = [
                SimpleNamespace(text="Here is your photo.", inline_data=None),
                SimpleNamespace(
                    text=None,
                    inline_data=SimpleNamespace(data=png_bytes, mime_type="image/png"),
                ),
            ]
        content = SimpleNamespace(parts=parts)
        return SimpleNamespace(candidates=[SimpleNamespace(content=content)])

    return _make


@pytest.fixture
def genai_client(genai_response) -> MagicMock:
    """Fake ``genai.Client`` whose async ``generate_content`` returns an image."""
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(return_value=genai_response())
    return client


@pytest.fixture
def test_client(generation_client: Mock):
    """FastAPI TestClient with the generation client replaced by a double.

    The lifespan runs on entering the client, so the double is installed
    after startup.
    """
    from fastapi.testclient import TestClient

    from archetype.api.main import app

    with TestClient(app) as client:
        app.state.generation_client = generation_client
        yield client
