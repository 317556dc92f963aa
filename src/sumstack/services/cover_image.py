"""Best-effort loader for the decorative cover art shown on the main menu."""
from __future__ import annotations

import logging
import os
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from sumstack.constants import COVER_IMAGE_ENV

logger = logging.getLogger(__name__)

DEFAULT_COVER_PATH = Path(__file__).resolve().parents[1] / "assets" / "cover.png"


def default_cover_path() -> Path:
    override = os.environ.get(COVER_IMAGE_ENV)
    if override:
        return Path(override)
    return DEFAULT_COVER_PATH


def fetch_cover_image(path: Path | None = None, *, max_dim: int | None = 640) -> Image.Image | None:
    """Load and downscale the cover image; any failure yields None.

    The menu falls back to a placeholder when this returns None, so problems
    are logged rather than raised.
    """
    path = Path(path) if path is not None else default_cover_path()
    if not path.exists():
        logger.warning("Cover image not found at %s; using placeholder", path)
        return None
    try:
        with Image.open(path) as handle:
            img = handle.convert("RGBA")
    except (OSError, UnidentifiedImageError, ValueError) as exc:
        logger.warning("Failed to load cover image %s: %s", path, exc)
        return None
    if max_dim is not None and max(img.size) > max_dim:
        w, h = img.size
        scale = max_dim / max(w, h)
        new_size = (max(1, int(w * scale)), max(1, int(h * scale)))
        resampling = getattr(Image, "Resampling", None)
        if resampling and hasattr(resampling, "LANCZOS"):
            img = img.resize(new_size, resampling.LANCZOS)
        else:
            img = img.resize(new_size)
    return img
