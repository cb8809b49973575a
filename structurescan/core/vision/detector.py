# structurescan/core/vision/detector.py
from __future__ import annotations

from structurescan.core.config import DEFAULT_CONFIG, EngineConfig
from structurescan.schemas.labels import CLASS_TO_DAMAGE_TYPE, DAMAGE_TYPE_LEVEL, PLAIN_LABEL, DamageClass
from structurescan.schemas.models import ConfidenceVector, DetectedIssue


def detect(vector: ConfidenceVector, config: EngineConfig = DEFAULT_CONFIG) -> list[DetectedIssue]:
    """
    Multi-label thresholding over the five damage classes.

    Each class is judged on its own: a score strictly above the detection
    threshold yields one DetectedIssue. The plain score never suppresses a
    detection. Output is ordered by confidence descending, ties by class index.
    """
    threshold = config.detection_threshold
    issues: list[DetectedIssue] = []
    for cls_, score in vector.damage_scores():
        if not score > threshold:
            continue
        damage_type = CLASS_TO_DAMAGE_TYPE[cls_]
        issues.append(
            DetectedIssue(
                damage_type=damage_type,
                damage_level=DAMAGE_TYPE_LEVEL[damage_type],
                confidence=float(score),
            )
        )
    issues.sort(key=lambda i: (-i.confidence, i.class_index))
    return issues


def primary_label(vector: ConfidenceVector) -> tuple[str, float]:
    """
    Arg-max over all six scores, as the label shown on a photo card.
    Returns (damage type value or 'Plain', score). First index wins ties.
    With no score above zero the photo reads as 'Plain'.
    """
    best_cls = DamageClass.crack_high
    best = vector.score(best_cls)
    for cls_ in DamageClass:
        s = vector.score(cls_)
        if s > best:
            best_cls, best = cls_, s
    if best_cls is DamageClass.plain or best <= 0:
        return PLAIN_LABEL, best
    return CLASS_TO_DAMAGE_TYPE[best_cls].value, best
