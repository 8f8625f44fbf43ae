"""Core data models: image assets, selections and generation results."""

from __future__ import annotations

import base64
import binascii
import logging
import time
import uuid
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path

from PIL import Image

from .catalog import AspectRatioOption, PresetOption, StudioCatalogs
from .errors import ReadError

logger = logging.getLogger(__name__)

# Input images are always declared to the service with this MIME type.
INPUT_MIME_TYPE = "image/jpeg"
RESULT_MIME_TYPE = "image/png"

EXPORT_EXTENSIONS = {"image/png": ".png", "image/jpeg": ".jpg", "image/webp": ".webp"}
DEFAULT_EXPORT_EXTENSION = ".png"


@dataclass(frozen=True)
class ImageAsset:
    """An encoded image payload held in memory.

    The bytes are passed through untouched; no decoding or re-encoding
    happens on the way to the service.
    """

    data: bytes
    mime_type: str = INPUT_MIME_TYPE

    @classmethod
    def from_path(cls, path: str | Path, mime_type: str = INPUT_MIME_TYPE) -> ImageAsset:
        """Read a user-selected file.

        Raises:
            ReadError: If the file cannot be read or is empty
        """
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            raise ReadError(f"Could not read image file {Path(path).name}: {e}") from e
        if not data:
            raise ReadError(f"Image file {Path(path).name} is empty")
        return cls(data=data, mime_type=mime_type)

    @classmethod
    def from_base64(cls, encoded: str, mime_type: str = INPUT_MIME_TYPE) -> ImageAsset:
        """Decode a base64 payload; a ``data:`` URI prefix is tolerated.

        Raises:
            ReadError: If the payload is not valid base64 or decodes to nothing
        """
        if encoded.startswith("data:") and "," in encoded:
            encoded = encoded.split(",", 1)[1]
        try:
            data = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ReadError(f"Invalid base64 image payload: {e}") from e
        if not data:
            raise ReadError("Image payload is empty")
        return cls(data=data, mime_type=mime_type)

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    @property
    def data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.to_base64()}"

    def __repr__(self) -> str:
        return f"ImageAsset(mime_type={self.mime_type!r}, size={len(self.data)})"


@dataclass(frozen=True)
class GenerationResult:
    """One synthesized photo and the prompt that produced it.

    Attributes
    ----------
    id : str
        Creation time in milliseconds since the epoch plus a short random
        suffix, e.g. "1760891234567-3fa2c1"
    image : ImageAsset
        The returned image payload
    prompt : str
        Exact composed prompt sent to the service
    created_at : float
        Creation time in seconds since the epoch
    """

    id: str
    image: ImageAsset
    prompt: str
    created_at: float

    @classmethod
    def create(cls, image: ImageAsset, prompt: str, now: float | None = None) -> GenerationResult:
        created_at = time.time() if now is None else now
        return cls(
            id=f"{int(created_at * 1000)}-{uuid.uuid4().hex[:6]}",
            image=image,
            prompt=prompt,
            created_at=created_at,
        )

    @property
    def data_uri(self) -> str:
        return self.image.data_uri

    @property
    def export_filename(self) -> str:
        extension = EXPORT_EXTENSIONS.get(self.image.mime_type, DEFAULT_EXPORT_EXTENSION)
        return f"influencer-{self.id}{extension}"

    def to_pil(self) -> Image.Image:
        """Decode the payload for display."""
        return Image.open(BytesIO(self.image.data))

    def export(self, directory: str | Path) -> Path:
        """Write the raw payload to ``directory`` under its export filename.

        Returns:
            Path of the written file
        """
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / self.export_filename
        path.write_bytes(self.image.data)
        logger.info(f"Exported result {self.id} to {path}")
        return path


@dataclass
class Selection:
    """The user's current choices.

    Images are optional until a generation is requested. Lighting, skin
    texture and aspect ratio always hold exactly one option; pose may be
    None.
    """

    lighting: PresetOption
    skin_texture: PresetOption
    aspect_ratio: AspectRatioOption
    pose: PresetOption | None = None
    identity: ImageAsset | None = None
    outfit: ImageAsset | None = None
    product: ImageAsset | None = None
    directive: str = ""

    @classmethod
    def with_defaults(cls, catalogs: StudioCatalogs) -> Selection:
        """Selection with the first lighting/texture/ratio option and nothing else."""
        return cls(
            lighting=catalogs.lighting.default,
            skin_texture=catalogs.skin_textures.default,
            aspect_ratio=catalogs.aspect_ratios.default,
        )

    @classmethod
    def from_ids(
        cls,
        catalogs: StudioCatalogs,
        *,
        lighting_id: str | None = None,
        skin_texture_id: str | None = None,
        aspect_ratio_id: str | None = None,
        pose_id: str | None = None,
        directive: str = "",
        identity: ImageAsset | None = None,
        outfit: ImageAsset | None = None,
        product: ImageAsset | None = None,
    ) -> Selection:
        """Build a selection from preset ids; missing ids fall back to defaults.

        Raises:
            UnknownPresetError: If any given id is not in its catalog
        """
        return cls(
            lighting=catalogs.lighting.get(lighting_id) if lighting_id else catalogs.lighting.default,
            skin_texture=(
                catalogs.skin_textures.get(skin_texture_id)
                if skin_texture_id
                else catalogs.skin_textures.default
            ),
            aspect_ratio=(
                catalogs.aspect_ratios.get(aspect_ratio_id)
                if aspect_ratio_id
                else catalogs.aspect_ratios.default
            ),
            pose=catalogs.poses.get(pose_id) if pose_id else None,
            identity=identity,
            outfit=outfit,
            product=product,
            directive=directive,
        )

    @property
    def image_count(self) -> int:
        return sum(1 for image in (self.identity, self.outfit, self.product) if image is not None)
