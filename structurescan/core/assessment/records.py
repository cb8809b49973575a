# structurescan/core/assessment/records.py
"""
Plain-dict records for persistence and JSON output.

Keys are camelCase to match the stored assessment documents. Every value is a
str, int, float, bool, list or dict, so the records can go straight to
json.dumps() or a document store.
"""

from __future__ import annotations

from typing import Any

from structurescan.core.assessment.aggregate import describe_summary
from structurescan.core.assessment.recommendations import recommend_for_area, recommend_for_image, recommend_for_summary
from structurescan.schemas.labels import DAMAGE_TYPE_LEVEL, PLAIN_LABEL, DamageType
from structurescan.schemas.models import (
    AreaAssessment,
    AssessmentSummary,
    DetectedIssue,
    ImageAssessment,
    ImageFailure,
    MergedRecommendation,
    RecommendationTemplate,
)

JSONDict = dict[str, Any]


def _primary_level(image: ImageAssessment) -> str:
    if image.primary_label == PLAIN_LABEL:
        return "None"
    return DAMAGE_TYPE_LEVEL[DamageType(image.primary_label)].value


def issue_record(issue: DetectedIssue) -> JSONDict:
    return {
        "type": issue.damage_type.value,
        "level": issue.damage_level.value,
        "confidence": issue.confidence,
    }


def template_record(template: RecommendationTemplate) -> JSONDict:
    return {
        "title": template.title,
        "description": template.description,
        "severity": template.severity.value,
        "actions": list(template.actions),
    }


def recommendation_record(rec: MergedRecommendation) -> JSONDict:
    return {
        "damageType": rec.damage_type.value if rec.damage_type else None,
        "damageLevel": rec.damage_level.value if rec.damage_level else None,
        "title": rec.title,
        "description": rec.description,
        "severity": rec.severity.value,
        "actions": list(rec.actions),
        "imageCount": rec.image_count,
        "avgConfidence": rec.average_confidence,
    }


def image_record(image: ImageAssessment) -> JSONDict:
    return {
        "imageRef": image.source_ref,
        "sha256": image.sha256,
        "damageType": image.primary_label,
        "damageLevel": _primary_level(image),
        "confidence": image.primary_confidence,
        "detectedIssues": [issue_record(i) for i in image.detected_issues],
        "imageRisk": image.image_risk.value,
        "recommendations": [template_record(t) for t in recommend_for_image(image)],
    }


def failure_record(failure: ImageFailure) -> JSONDict:
    return {
        "imageRef": failure.source_ref,
        "areaId": failure.area_id,
        "kind": failure.kind,
        "message": failure.message,
    }


def area_record(area: AreaAssessment) -> JSONDict:
    return {
        "areaId": area.area_id,
        "areaName": area.area_name,
        "areaType": area.area_type.value,
        "areaRisk": area.area_risk.risk_label,
        "images": [image_record(img) for img in area.images],
        "recommendations": [recommendation_record(r) for r in recommend_for_area(area)],
    }


def summary_record(summary: AssessmentSummary, *, reanalysis_count: int = 0) -> JSONDict:
    return {
        "overallRisk": summary.overall_risk.risk_label,
        "totalIssues": summary.total_issue_count,
        "issueCounts": {t.value: n for t, n in summary.per_type_counts.items()},
        "detectionSummary": [
            {"damageType": d.damage_type.value, "count": d.count, "avgConfidence": d.average_confidence}
            for d in summary.detection_summary
        ],
        "areas": [area_record(a) for a in summary.areas],
        "recommendations": [recommendation_record(r) for r in recommend_for_summary(summary)],
        "failures": [failure_record(f) for f in summary.failures],
        "imagesTotal": summary.images_total,
        "imagesAnalyzed": summary.images_analyzed,
        "description": describe_summary(summary),
        "reanalysisCount": reanalysis_count,
    }
