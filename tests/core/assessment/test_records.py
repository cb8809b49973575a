from __future__ import annotations

import json

from structurescan.core.assessment.aggregate import build_summary
from structurescan.core.assessment.records import area_record, image_record, recommendation_record, summary_record
from structurescan.core.assessment.recommendations import group
from structurescan.schemas.labels import DamageType
from structurescan.schemas.models import ImageFailure
from tests import make_area_assessment, make_image_assessment, make_issue
from tests.utils import ALGAE_VECTOR, PLAIN_VECTOR, SPALLING_VECTOR


def test_image_record_keys_and_values():
    rec = image_record(make_image_assessment([0.9, 0, 0, 0, 0.7, 0.1], source_ref="wall.png"))
    assert rec["imageRef"] == "wall.png"
    assert rec["damageType"] == "Spalling"
    assert rec["damageLevel"] == "High"
    assert rec["confidence"] == 0.9
    assert rec["imageRisk"] == "High"
    assert rec["detectedIssues"] == [
        {"type": "Spalling", "level": "High", "confidence": 0.9},
        {"type": "Algae", "level": "Moderate", "confidence": 0.7},
    ]
    assert [r["title"] for r in rec["recommendations"]] == ["Serious Concrete Damage", "Algae/Moss Growth"]


def test_plain_image_record():
    rec = image_record(make_image_assessment(PLAIN_VECTOR))
    assert rec["damageType"] == "Plain"
    assert rec["damageLevel"] == "None"
    assert rec["imageRisk"] == "None"
    assert rec["recommendations"][0]["severity"] == "GOOD"


def test_all_zero_image_record_matches_no_damage():
    rec = image_record(make_image_assessment([0.0] * 6))
    assert rec["detectedIssues"] == []
    assert rec["damageType"] == "Plain"
    assert rec["damageLevel"] == "None"
    assert rec["confidence"] == 0.0
    assert rec["recommendations"][0]["severity"] == "GOOD"


def test_recommendation_record():
    (merged,) = group([make_issue(DamageType.algae, 0.6), make_issue(DamageType.algae, 0.8)])
    rec = recommendation_record(merged)
    assert rec["damageType"] == "Algae"
    assert rec["damageLevel"] == "Moderate"
    assert rec["imageCount"] == 2
    assert abs(rec["avgConfidence"] - 0.7) < 1e-9
    assert isinstance(rec["actions"], list)


def test_area_and_summary_records_are_json_ready():
    area = make_area_assessment("foundation", SPALLING_VECTOR, ALGAE_VECTOR)
    a = area_record(area)
    assert a["areaId"] == "foundation"
    assert a["areaRisk"] == "High Risk"
    assert len(a["images"]) == 2

    summary = build_summary([area], failures=[ImageFailure(source_ref="x.jpg", area_id="foundation", kind="decode")])
    s = summary_record(summary, reanalysis_count=1)
    assert s["overallRisk"] == "High Risk"
    assert s["totalIssues"] == 2
    assert s["issueCounts"]["Spalling"] == 1
    assert s["issueCounts"]["Minor Crack"] == 0
    assert s["reanalysisCount"] == 1
    assert s["failures"][0]["kind"] == "decode"
    assert s["description"].startswith("2 areas of concern detected.")
    # must survive a JSON round trip unchanged
    assert json.loads(json.dumps(s)) == s
