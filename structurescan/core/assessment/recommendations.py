# structurescan/core/assessment/recommendations.py
"""
Remediation templates and recommendation merging.

A closed table keyed by (DamageType, DamageLevel) holds the canned advice.
`group()` merges every occurrence of a key within a caller-chosen scope (one
area, or a whole assessment) into a single entry carrying how many images
reported it and their mean confidence.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from statistics import mean

from structurescan.schemas.labels import DamageLevel, DamageType, SeverityTier
from structurescan.schemas.models import (
    AreaAssessment,
    AssessmentSummary,
    DetectedIssue,
    ImageAssessment,
    MergedRecommendation,
    RecommendationTemplate,
)

# ----------------------------
# Template table
# ----------------------------

_TEMPLATES: dict[tuple[DamageType, DamageLevel], RecommendationTemplate] = {
    (DamageType.spalling, DamageLevel.high): RecommendationTemplate(
        title="Serious Concrete Damage",
        description=(
            "Concrete is breaking away from the surface, possibly exposing metal bars inside. "
            "This needs urgent attention from a building expert."
        ),
        severity=SeverityTier.high,
        actions=(
            "Call a structural engineer or building expert within 2-3 days",
            "Take clear photos of the damaged area from different angles",
            "Check if you can see any metal bars (rebar) showing through - avoid using this area",
            "Measure the damage - if deeper than 1 inch or larger than your hand, it needs professional repair",
            "Professional will remove damaged concrete, clean metal bars, fill with repair cement",
            "After repair, seal the surface to protect it from water and prevent future damage",
        ),
    ),
    (DamageType.major_crack, DamageLevel.high): RecommendationTemplate(
        title="Large Crack Found",
        description=(
            "Wide crack detected (wider than 3mm or about 1/8 inch). "
            "This could mean the foundation is settling or the structure is under stress."
        ),
        severity=SeverityTier.high,
        actions=(
            "Contact a structural engineer or building expert within 1-2 weeks",
            "Put markers on both sides of the crack to see if it's getting bigger",
            "Measure and photograph the crack - note how wide, how long, and where it is",
            "Check if doors or windows are sticking, or if floors are sloping",
            "Expert may inject special material to fill the crack or strengthen the structure",
            "Seal the crack after repair to keep water out and prevent freeze damage",
        ),
    ),
    (DamageType.minor_crack, DamageLevel.low): RecommendationTemplate(
        title="Small Hairline Cracks",
        description=(
            "Thin cracks found - these are common as buildings settle and concrete dries. "
            "Usually not serious, but keep an eye on them."
        ),
        severity=SeverityTier.low,
        actions=(
            "Check these cracks once or twice a year during regular building inspections",
            "Watch if the crack gets bigger over 6-12 months - mark the ends and take photos with a ruler",
            "Fill the cracks during your next scheduled maintenance to stop water getting in",
            "Use flexible crack filler that works for indoor or outdoor use",
            "No need to worry - these small cracks are normal in concrete and brick buildings",
        ),
    ),
    (DamageType.paint_damage, DamageLevel.low): RecommendationTemplate(
        title="Paint Peeling or Flaking",
        description=(
            "Paint is coming off the surface. Usually caused by water damage or old paint. "
            "Mostly cosmetic, but fix the water source first."
        ),
        severity=SeverityTier.low,
        actions=(
            "Plan to repaint within 12-24 months during regular maintenance",
            "Find and fix the water problem FIRST (look for leaks, bad drainage, or too much humidity)",
            "Proper fix steps: scrape off loose paint, clean the surface, apply primer, then paint",
            "Choose the right paint - mildew-resistant for bathrooms/kitchens, weather-resistant for outside",
            "This is a cosmetic issue - no safety concerns, just maintenance needed",
        ),
    ),
    (DamageType.algae, DamageLevel.moderate): RecommendationTemplate(
        title="Algae/Moss Growth",
        description=(
            "Algae or moss growing on the building means there's too much moisture. "
            "Not immediately dangerous, but can damage materials over time."
        ),
        severity=SeverityTier.moderate,
        actions=(
            "Clean the area within 1-2 months using algae remover or cleaning solution",
            "Cleaning method: gently wash with garden hose and soft brush - DON'T use pressure washer",
            "Find and fix why it's wet (improve drainage, fix gutters, repair any roof leaks)",
            "Cut back trees and bushes so more sunlight reaches the wall and air can flow",
            "You can apply special coating to prevent algae from growing back",
            "Check again in 6-12 months to make sure the moisture problem is fixed",
        ),
    ),
}

CLEAN_SURFACE = RecommendationTemplate(
    title="Clean Surface",
    description=(
        "No structural damage or surface deterioration detected. "
        "Building surface appears well-maintained and in good condition."
    ),
    severity=SeverityTier.good,
    actions=(
        "Continue regular maintenance schedule (annual or bi-annual inspections)",
        "Monitor during routine inspections for any emerging issues",
        "Maintain proper drainage and moisture control measures",
        "No immediate action required - building surface in good condition",
    ),
)

_SEVERITY_ORDER: dict[SeverityTier, int] = {
    SeverityTier.high: 0,
    SeverityTier.moderate: 1,
    SeverityTier.low: 2,
    SeverityTier.good: 3,
}


# ----------------------------
# Lookup & grouping
# ----------------------------


def lookup(damage_type: DamageType | str, damage_level: DamageLevel | str) -> RecommendationTemplate:
    """Template for a (type, level) key; anything unmatched gets the clean-surface template."""
    try:
        key = (DamageType(damage_type), DamageLevel(damage_level))
    except ValueError:
        return CLEAN_SURFACE
    return _TEMPLATES.get(key, CLEAN_SURFACE)


def _merged(
    template: RecommendationTemplate,
    *,
    image_count: int,
    average_confidence: float,
    damage_type: DamageType | None = None,
    damage_level: DamageLevel | None = None,
) -> MergedRecommendation:
    return MergedRecommendation(
        damage_type=damage_type,
        damage_level=damage_level,
        title=template.title,
        description=template.description,
        severity=template.severity,
        actions=template.actions,
        image_count=image_count,
        average_confidence=average_confidence,
    )


def clean_recommendation(clean_image_count: int = 0) -> MergedRecommendation:
    return _merged(CLEAN_SURFACE, image_count=clean_image_count, average_confidence=0.0)


def group(issues: Iterable[DetectedIssue], *, clean_image_count: int = 0) -> list[MergedRecommendation]:
    """
    Merge issues sharing a (damage_type, damage_level) key.

    Each entry carries image_count = occurrences and the mean confidence.
    Entries are ordered by severity (HIGH first), then first appearance.
    No issues at all → a single clean-surface entry whose image_count is
    `clean_image_count` and whose average confidence is 0.
    """
    buckets: dict[tuple[DamageType, DamageLevel], list[float]] = {}
    for issue in issues:
        buckets.setdefault(issue.key, []).append(issue.confidence)

    if not buckets:
        return [clean_recommendation(clean_image_count)]

    merged = [
        _merged(
            lookup(damage_type, damage_level),
            image_count=len(confs),
            average_confidence=mean(confs),
            damage_type=damage_type,
            damage_level=damage_level,
        )
        for (damage_type, damage_level), confs in buckets.items()
    ]
    # sort is stable: equal severities keep first-appearance order
    merged.sort(key=lambda m: _SEVERITY_ORDER[m.severity])
    return merged


# ----------------------------
# Scope helpers
# ----------------------------


def _issues_of(images: Sequence[ImageAssessment]) -> list[DetectedIssue]:
    return [issue for img in images for issue in img.detected_issues]


def _clean_count(images: Sequence[ImageAssessment]) -> int:
    return sum(1 for img in images if img.is_clean)


def recommend_for_images(images: Sequence[ImageAssessment]) -> list[MergedRecommendation]:
    return group(_issues_of(images), clean_image_count=_clean_count(images))


def recommend_for_area(area: AreaAssessment) -> list[MergedRecommendation]:
    return recommend_for_images(area.images)


def recommend_for_summary(summary: AssessmentSummary) -> list[MergedRecommendation]:
    return recommend_for_images(summary.images)


def recommend_for_image(image: ImageAssessment) -> list[RecommendationTemplate]:
    """Per-photo advice: one template per detected issue, or the clean template."""
    if image.is_clean:
        return [CLEAN_SURFACE]
    return [lookup(i.damage_type, i.damage_level) for i in image.detected_issues]
