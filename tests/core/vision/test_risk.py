from __future__ import annotations

import pytest

from structurescan.core.config import EngineConfig
from structurescan.core.vision.risk import classify
from structurescan.schemas.labels import DamageType, ImageRisk
from tests import make_image_assessment, make_issue


@pytest.mark.parametrize(
    "types,expected",
    [
        ([DamageType.spalling], ImageRisk.high),
        ([DamageType.major_crack], ImageRisk.high),
        ([DamageType.algae], ImageRisk.moderate),
        ([DamageType.minor_crack], ImageRisk.low),
        ([DamageType.paint_damage], ImageRisk.low),
        ([DamageType.paint_damage, DamageType.algae], ImageRisk.moderate),
        ([DamageType.minor_crack, DamageType.algae, DamageType.major_crack], ImageRisk.high),
    ],
)
def test_rules_in_priority_order(types, expected):
    issues = [make_issue(t) for t in types]
    # plain confidence is irrelevant once an issue exists
    assert classify(issues, 0.99) is expected


def test_no_issues_plain_threshold_is_strict():
    assert classify([], 0.31) is ImageRisk.none
    assert classify([], 0.30) is ImageRisk.low
    assert classify([], 0.0) is ImageRisk.low


def test_plain_threshold_comes_from_config():
    cfg = EngineConfig(plain_confidence_threshold=0.9)
    assert classify([], 0.85, cfg) is ImageRisk.low
    assert classify([], 0.95, cfg) is ImageRisk.none


def test_default_clean_and_ambiguous_reads():
    clean = make_image_assessment([0, 0, 0, 0, 0, 0.95])
    assert clean.detected_issues == []
    assert clean.image_risk is ImageRisk.none

    unsure = make_image_assessment([0, 0, 0, 0, 0, 0.1])
    assert unsure.detected_issues == []
    assert unsure.image_risk is ImageRisk.low


def test_risk_labels_and_rank():
    assert ImageRisk.high.risk_label == "High Risk"
    assert ImageRisk.none.risk_label == "No Risk"
    assert ImageRisk.high.rank > ImageRisk.moderate.rank > ImageRisk.low.rank > ImageRisk.none.rank
