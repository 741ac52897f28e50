"""Album art processing with Pillow: resize, JPEG re-encode, statistics."""

import base64
import io
from dataclasses import dataclass

from PIL import Image, ImageOps, ImageStat, UnidentifiedImageError

from now_playing_card.exceptions import ArtworkException
from now_playing_card.logging_config import get_logger, log_with_context
from now_playing_card.models.snapshot import ColorPalette
from now_playing_card.services.palette_service import ChannelStats, extract_palette

ART_TARGET_SIZE = 400
DOWNSAMPLE_SIZE = 24
JPEG_QUALITY = 85

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProcessedArt:
    """Result of ``process_album_art``."""

    jpeg_bytes: bytes
    stats: ChannelStats
    downsample: bytes
    downsample_width: int
    downsample_height: int

    @property
    def base64(self) -> str:
        return base64.b64encode(self.jpeg_bytes).decode("ascii")


def _fit_square(image: Image.Image, size: int) -> Image.Image:
    """Center-crop/scale to a ``size`` square, only when the image is larger."""
    if image.width > size or image.height > size:
        return ImageOps.fit(image, (size, size), centering=(0.5, 0.5))
    return image.copy()


def process_album_art(image_bytes: bytes, target_size: int = ART_TARGET_SIZE) -> ProcessedArt:
    """Resize album art and gather the pixel data the palette needs.

    Args:
        image_bytes: Raw JPEG/PNG bytes from the player
        target_size: Square size for the embedded art

    Returns:
        ProcessedArt with progressive JPEG bytes, channel stats and a
        24x24 (or smaller, never enlarged) raw RGB downsample

    Raises:
        ArtworkException: If the bytes cannot be decoded as an image
    """
    try:
        with Image.open(io.BytesIO(image_bytes)) as source:
            image = source.convert("RGB")
    except (UnidentifiedImageError, OSError) as e:
        raise ArtworkException(
            f"Failed to decode album art: {str(e)}",
            details={"error_type": "decode_error", "size": len(image_bytes)},
        ) from e

    resized = _fit_square(image, target_size)

    buffer = io.BytesIO()
    resized.save(buffer, format="JPEG", quality=JPEG_QUALITY, progressive=True)

    stat = ImageStat.Stat(resized)
    stats = ChannelStats(
        means=tuple(stat.mean[:3]),
        maxima=tuple(int(high) for _, high in stat.extrema[:3]),
    )

    tiny = _fit_square(resized, DOWNSAMPLE_SIZE)

    log_with_context(
        logger,
        "debug",
        "Album art processed",
        source_size=f"{image.width}x{image.height}",
        resized_size=f"{resized.width}x{resized.height}",
        jpeg_bytes=buffer.tell(),
        event_type="art_processed",
    )

    return ProcessedArt(
        jpeg_bytes=buffer.getvalue(),
        stats=stats,
        downsample=tiny.tobytes(),
        downsample_width=tiny.width,
        downsample_height=tiny.height,
    )


def build_album_art(image_bytes: bytes, target_size: int = ART_TARGET_SIZE) -> tuple[str, ColorPalette]:
    """Process album art and extract its palette.

    Returns:
        Tuple of (base64 JPEG, ColorPalette)

    Raises:
        ArtworkException: If the bytes cannot be decoded as an image
    """
    art = process_album_art(image_bytes, target_size)
    palette = extract_palette(art.stats, art.downsample, art.downsample_width, art.downsample_height)
    return art.base64, palette
