# tests/utils.py
"""
Single source of truth for test data, factories, and canonical vectors.
Update values here to cascade across the test suite.
"""

from __future__ import annotations

from collections.abc import Sequence
from io import BytesIO
from pathlib import Path

from PIL import Image

from structurescan.core.config import DEFAULT_CONFIG, EngineConfig
from structurescan.core.vision.detector import detect, primary_label
from structurescan.core.vision.risk import classify
from structurescan.schemas.labels import DAMAGE_TYPE_LEVEL, AreaType, DamageType
from structurescan.schemas.models import (
    AreaAssessment,
    BuildingArea,
    ConfidenceVector,
    DetectedIssue,
    ImageAssessment,
)
from structurescan.tools.classifier import PaletteClassifier

# -----------------------------
# Canonical score vectors
# -----------------------------
# Order: crack_high, crack_moderate, crack_low, paint, algae, plain

SPALLING_VECTOR = (0.9, 0.0, 0.0, 0.0, 0.0, 0.0)
MAJOR_CRACK_VECTOR = (0.0, 0.8, 0.0, 0.0, 0.0, 0.1)
MINOR_CRACK_VECTOR = (0.0, 0.0, 0.7, 0.0, 0.0, 0.2)
PAINT_VECTOR = (0.0, 0.0, 0.0, 0.65, 0.0, 0.2)
ALGAE_VECTOR = (0.0, 0.0, 0.0, 0.0, 0.85, 0.1)
PLAIN_VECTOR = (0.0, 0.0, 0.0, 0.0, 0.0, 0.9)
AMBIGUOUS_VECTOR = (0.0, 0.0, 0.0, 0.0, 0.0, 0.1)

# -----------------------------
# Solid-colour photos → palette classifier
# -----------------------------

SPALLING_RGB = (200, 40, 40)
ALGAE_RGB = (40, 200, 40)
PLAIN_RGB = (40, 40, 200)
MINOR_CRACK_RGB = (200, 200, 40)
AMBIGUOUS_RGB = (128, 128, 128)

DEFAULT_PALETTE: dict[tuple[int, int, int], Sequence[float]] = {
    SPALLING_RGB: SPALLING_VECTOR,
    ALGAE_RGB: ALGAE_VECTOR,
    PLAIN_RGB: PLAIN_VECTOR,
    MINOR_CRACK_RGB: MINOR_CRACK_VECTOR,
}


def make_palette_classifier(**overrides) -> PaletteClassifier:
    palette = overrides.pop("palette", DEFAULT_PALETTE)
    return PaletteClassifier(palette, default=overrides.pop("default", AMBIGUOUS_VECTOR), **overrides)


# -----------------------------
# Image factories
# -----------------------------


def png_bytes(w: int = 64, h: int = 64, color: tuple[int, int, int] = (128, 128, 128)) -> bytes:
    """Solid-colour PNG with low compression."""
    buf = BytesIO()
    Image.new("RGB", (w, h), color=color).save(buf, format="PNG", compress_level=1)
    return buf.getvalue()


def make_solid_png(path: Path, color: tuple[int, int, int], size: tuple[int, int] = (32, 32)) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color=color).save(path)
    return path


def make_gradient_img(path: Path, size: tuple[int, int], delta: int = 0) -> None:
    """Horizontal grey gradient; `delta` shifts every pixel (clamped to 0..255)."""
    w, h = size
    img = Image.new("RGB", size)
    px = img.load()
    for x in range(w):
        v = max(0, min(255, int(255 * x / max(1, w - 1)) + delta))
        for y in range(h):
            px[x, y] = (v, v, v)
    path.parent.mkdir(parents=True, exist_ok=True)
    img.save(path)


# -----------------------------
# Result factories
# -----------------------------


def make_issue(damage_type: DamageType, confidence: float = 0.8) -> DetectedIssue:
    return DetectedIssue(
        damage_type=damage_type,
        damage_level=DAMAGE_TYPE_LEVEL[damage_type],
        confidence=confidence,
    )


def make_image_assessment(
    scores: Sequence[float],
    *,
    source_ref: str = "img.png",
    config: EngineConfig = DEFAULT_CONFIG,
) -> ImageAssessment:
    """Run the model-free stages on a score vector, skipping decode and inference."""
    vector = ConfidenceVector.from_sequence(scores)
    issues = detect(vector, config)
    label, conf = primary_label(vector)
    return ImageAssessment(
        source_ref=source_ref,
        sha256="0" * 64,
        vector=vector,
        detected_issues=issues,
        plain_confidence=vector.plain,
        image_risk=classify(issues, vector.plain, config),
        primary_label=label,
        primary_confidence=conf,
    )


def make_area_assessment(area_id: str, *vectors: Sequence[float], area_type: AreaType = AreaType.other) -> AreaAssessment:
    from structurescan.core.assessment.aggregate import build_area_assessment

    images = [make_image_assessment(v, source_ref=f"{area_id}_{i}.png") for i, v in enumerate(vectors)]
    area = BuildingArea(id=area_id, name=area_id.title(), area_type=area_type)
    return build_area_assessment(area, images)


def make_building_area(area_id: str, photos: Sequence, area_type: AreaType = AreaType.other) -> BuildingArea:
    return BuildingArea(id=area_id, name=area_id.title(), area_type=area_type, photos=list(photos))
