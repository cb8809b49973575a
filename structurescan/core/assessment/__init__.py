"""
structurescan.core.assessment
=============================

Batch-level stages: aggregation, recommendations, the batch pipeline and the
assessment session lifecycle.
"""

from __future__ import annotations

from .aggregate import (
    aggregate_areas,
    aggregate_images,
    build_area_assessment,
    build_summary,
    count_issues,
    describe_summary,
    detection_summary,
    worst_risk,
)
from .pipeline import BatchResult, analyze_areas, analyze_image, run_batch
from .recommendations import (
    CLEAN_SURFACE,
    group,
    lookup,
    recommend_for_area,
    recommend_for_image,
    recommend_for_summary,
)
from .records import area_record, image_record, issue_record, recommendation_record, summary_record
from .session import AssessmentSession, SessionState

__all__ = [
    # Aggregation
    "worst_risk",
    "aggregate_images",
    "aggregate_areas",
    "count_issues",
    "detection_summary",
    "build_area_assessment",
    "build_summary",
    "describe_summary",
    # Recommendations
    "CLEAN_SURFACE",
    "lookup",
    "group",
    "recommend_for_area",
    "recommend_for_summary",
    "recommend_for_image",
    # Pipeline
    "BatchResult",
    "analyze_image",
    "run_batch",
    "analyze_areas",
    # Session
    "AssessmentSession",
    "SessionState",
    # Records
    "issue_record",
    "image_record",
    "area_record",
    "recommendation_record",
    "summary_record",
]
