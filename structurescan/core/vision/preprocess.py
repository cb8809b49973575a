# structurescan/core/vision/preprocess.py
from __future__ import annotations

import hashlib
from io import BytesIO
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from structurescan.core.config import INPUT_SIZE
from structurescan.core.errors import DecodeFailure
from structurescan.schemas.models import ImageSource

# Accept anything ImageSource covers, plus an already-decoded PIL image
ImageLike = ImageSource | Image.Image


# ---------- Identity helpers ----------


def _sha256_of_path(p: Path) -> str:
    h = hashlib.sha256()
    with p.open("rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            h.update(chunk)
    return h.hexdigest()


def sha256_of(image: ImageLike) -> str:
    """
    Content hash for an image input. Paths and bytes hash their encoded bytes;
    a PIL image hashes its RGB pixel buffer plus size.
    """
    if isinstance(image, bytes):
        return hashlib.sha256(image).hexdigest()
    if isinstance(image, str | Path):
        try:
            return _sha256_of_path(Path(image))
        except OSError as e:
            raise DecodeFailure(f"cannot read {image}: {e}") from e
    rgb = image.convert("RGB")
    h = hashlib.sha256(f"{rgb.width}x{rgb.height}".encode())
    h.update(rgb.tobytes())
    return h.hexdigest()


def source_ref_of(image: ImageLike, sha256: str) -> str:
    """Caller-facing reference: the path for on-disk images, a short hash otherwise."""
    if isinstance(image, str | Path):
        return str(image)
    return f"sha256:{sha256[:16]}"


# ---------- Decode & tensorize ----------


def decode(image: ImageLike) -> Image.Image:
    """Decode into an RGB bitmap or raise DecodeFailure."""
    if isinstance(image, Image.Image):
        try:
            return image.convert("RGB")
        except (OSError, ValueError) as e:
            raise DecodeFailure(f"unusable image object: {e}") from e

    if isinstance(image, bytes):
        if not image:
            raise DecodeFailure("empty image payload")
        stream: BytesIO | Path = BytesIO(image)
        label = "<bytes>"
    else:
        stream = Path(image)
        label = str(stream)
        if not stream.is_file():
            raise DecodeFailure(f"image not found: {label}")
        if stream.stat().st_size == 0:
            raise DecodeFailure(f"zero-byte image: {label}")

    try:
        with Image.open(stream) as img:
            img.load()
            return img.convert("RGB")
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
        raise DecodeFailure(f"cannot decode {label}: {type(e).__name__}: {e}") from e


def to_tensor(img: Image.Image, size: int = INPUT_SIZE) -> np.ndarray:
    """
    Resize to size×size and return a C-contiguous float32 array of shape
    (1, size, size, 3), channels scaled to [0, 1] by /255.
    """
    resized = img.convert("RGB").resize((size, size), Image.Resampling.BILINEAR)
    arr = np.asarray(resized, dtype=np.uint8).astype(np.float32) / 255.0  # HWC
    return np.ascontiguousarray(arr[None, ...])


def prepare(image: ImageLike, *, size: int = INPUT_SIZE) -> np.ndarray:
    """Decode + resize + normalize. Deterministic for identical bytes and size."""
    return to_tensor(decode(image), size=size)
