# structurescan/core/assessment/aggregate.py

from __future__ import annotations

from collections.abc import Iterable, Sequence
from statistics import mean

from structurescan.core.errors import EmptyBatchFailure
from structurescan.schemas.labels import DamageType, ImageRisk
from structurescan.schemas.models import (
    AreaAssessment,
    AssessmentSummary,
    BuildingArea,
    DetectionSummaryItem,
    ImageAssessment,
    ImageFailure,
)

# ----------------------------
# Risk folding
# ----------------------------


def worst_risk(risks: Iterable[ImageRisk]) -> ImageRisk:
    """Maximum-ranked risk; an empty input aggregates to None."""
    return max(risks, key=lambda r: r.rank, default=ImageRisk.none)


def aggregate_images(images: Iterable[ImageAssessment]) -> ImageRisk:
    return worst_risk(img.image_risk for img in images)


def aggregate_areas(areas: Iterable[AreaAssessment]) -> ImageRisk:
    return worst_risk(a.area_risk for a in areas)


# ----------------------------
# Issue tallies
# ----------------------------


def count_issues(images: Iterable[ImageAssessment]) -> dict[DamageType, int]:
    """
    Per-type tally of detected issues across images, zero-filled.
    Counts image occurrences: the same defect seen in two photos counts twice.
    """
    counts = {t: 0 for t in DamageType}
    for img in images:
        for issue in img.detected_issues:
            counts[issue.damage_type] += 1
    return counts


def detection_summary(images: Iterable[ImageAssessment]) -> list[DetectionSummaryItem]:
    """Count + mean confidence per detected damage type, most frequent first."""
    confs: dict[DamageType, list[float]] = {}
    for img in images:
        for issue in img.detected_issues:
            confs.setdefault(issue.damage_type, []).append(issue.confidence)

    order = list(DamageType)
    items = [DetectionSummaryItem(damage_type=t, count=len(v), average_confidence=mean(v)) for t, v in confs.items()]
    items.sort(key=lambda it: (-it.count, order.index(it.damage_type)))
    return items


# ----------------------------
# Builders
# ----------------------------


def build_area_assessment(area: BuildingArea, images: Sequence[ImageAssessment]) -> AreaAssessment:
    return AreaAssessment(
        area_id=area.id,
        area_name=area.name,
        area_type=area.area_type,
        images=list(images),
        area_risk=aggregate_images(images),
    )


def build_summary(
    areas: Sequence[AreaAssessment],
    *,
    failures: Sequence[ImageFailure] = (),
    images_total: int | None = None,
) -> AssessmentSummary:
    """
    Fold area results into the terminal summary.

    Raises EmptyBatchFailure when no image was analyzed, since there is
    nothing to report on.
    """
    images = [img for a in areas for img in a.images]
    if not images:
        raise EmptyBatchFailure(f"no image could be analyzed ({len(failures)} failed)")

    counts = count_issues(images)
    return AssessmentSummary(
        overall_risk=aggregate_areas(areas),
        total_issue_count=sum(counts.values()),
        per_type_counts=counts,
        detection_summary=detection_summary(images),
        areas=list(areas),
        images=images,
        failures=list(failures),
        images_total=images_total if images_total is not None else len(images) + len(failures),
        images_analyzed=len(images),
    )


def describe_summary(summary: AssessmentSummary) -> str:
    """One-line report sentence for the summary header."""
    if summary.total_issue_count > 0:
        head = f"{summary.total_issue_count} areas of concern detected."
    else:
        head = "No structural damage or surface deterioration detected."
    tail = f" Overall risk: {summary.overall_risk.risk_label}."
    if summary.failures:
        tail += f" {len(summary.failures)} of {summary.images_total} photos could not be analyzed."
    return head + tail
