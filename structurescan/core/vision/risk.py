# structurescan/core/vision/risk.py

from __future__ import annotations

from collections.abc import Sequence

from structurescan.core.config import DEFAULT_CONFIG, EngineConfig
from structurescan.schemas.labels import DamageType, ImageRisk
from structurescan.schemas.models import DetectedIssue

# Evaluated top-down; the first rule with a matching issue decides the verdict.
_RISK_RULES: tuple[tuple[frozenset[DamageType], ImageRisk], ...] = (
    (frozenset({DamageType.spalling, DamageType.major_crack}), ImageRisk.high),
    (frozenset({DamageType.algae}), ImageRisk.moderate),
    (frozenset({DamageType.minor_crack, DamageType.paint_damage}), ImageRisk.low),
)


def classify(
    issues: Sequence[DetectedIssue],
    plain_confidence: float,
    config: EngineConfig = DEFAULT_CONFIG,
) -> ImageRisk:
    """
    Single-photo risk verdict.

      1. Spalling or Major Crack present  → High
      2. else Algae present               → Moderate
      3. else Minor Crack / Paint Damage  → Low
      4. else plain score > threshold     → None
      5. else                             → Low (an unsure read is never reported as clean)
    """
    present = {i.damage_type for i in issues}
    for types, risk in _RISK_RULES:
        if present & types:
            return risk
    if plain_confidence > config.plain_confidence_threshold:
        return ImageRisk.none
    return ImageRisk.low
