# structurescan/schemas/models.py

from __future__ import annotations

from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from structurescan.core.config import DETECTION_THRESHOLD
from structurescan.schemas.labels import (
    _CLASS_ORDER,
    DAMAGE_CLASSES,
    DAMAGE_TYPE_CLASS,
    DAMAGE_TYPE_LEVEL,
    AreaType,
    DamageClass,
    DamageLevel,
    DamageType,
    ImageRisk,
    SeverityTier,
)

# Anything the preprocessor can decode: a path on disk or raw encoded bytes
ImageSource = str | Path | bytes

FailureKind = Literal["decode", "inference", "cancelled"]


# =========================
# Classifier output
# =========================


class ConfidenceVector(BaseModel):
    """
    Named view over the classifier's six ordered scores.

    Built once at the classifier boundary; downstream code reads fields by name
    and never indexes the raw model output.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    crack_high: float = Field(0.0, description="Index 0: spalling / heavy concrete cracking.")
    crack_moderate: float = Field(0.0, description="Index 1: major (wide) crack.")
    crack_low: float = Field(0.0, description="Index 2: minor hairline crack.")
    paint: float = Field(0.0, description="Index 3: peeling or flaking paint.")
    algae: float = Field(0.0, description="Index 4: algae / moss growth.")
    plain: float = Field(0.0, description="Index 5: plain, undamaged surface.")

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> ConfidenceVector:
        """
        Map an ordered score sequence onto named fields.
        Missing trailing entries default to 0.0; entries past the sixth are ignored.
        """
        vals = [float(v) for v in list(values)[: len(_CLASS_ORDER)]]
        vals += [0.0] * (len(_CLASS_ORDER) - len(vals))
        return cls(**{c.value: v for c, v in zip(_CLASS_ORDER, vals, strict=True)})

    def score(self, cls_: DamageClass) -> float:
        return float(getattr(self, cls_.value))

    def as_list(self) -> list[float]:
        return [self.score(c) for c in _CLASS_ORDER]

    def damage_scores(self) -> Iterator[tuple[DamageClass, float]]:
        """(class, score) for the five damage classes, in class order."""
        for c in DAMAGE_CLASSES:
            yield c, self.score(c)


# =========================
# Per-image results
# =========================


class DetectedIssue(BaseModel):
    """
    One damage class whose score cleared the detection threshold.

    Issues rebuilt outside the detector are held to the same rules: the
    confidence must be strictly above the threshold and the level must be the
    one bound to the type. The originating class index follows from the type.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    damage_type: DamageType = Field(..., description="Category of defect.")
    damage_level: DamageLevel = Field(..., description="Severity bound to the damage type.")
    confidence: float = Field(..., gt=DETECTION_THRESHOLD, description="Classifier score for this class.")

    @model_validator(mode="after")
    def _level_matches_type(self) -> DetectedIssue:
        expected = DAMAGE_TYPE_LEVEL[self.damage_type]
        if self.damage_level is not expected:
            raise ValueError(f"{self.damage_type.value} is always reported as {expected.value}, got {self.damage_level.value}")
        return self

    @property
    def class_index(self) -> int:
        """Originating classifier output index."""
        return DAMAGE_TYPE_CLASS[self.damage_type].position

    @property
    def key(self) -> tuple[DamageType, DamageLevel]:
        return (self.damage_type, self.damage_level)


class ImageAssessment(BaseModel):
    """Analysis of a single photo. Immutable; re-analysis builds a new one."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    source_ref: str = Field(..., description="Caller-facing reference to the photo (path or content hash).")
    sha256: str = Field(..., description="Content hash of the decoded input.")
    vector: ConfidenceVector = Field(..., description="Raw classifier scores.")
    detected_issues: list[DetectedIssue] = Field(default_factory=list, description="Issues, confidence descending.")
    plain_confidence: float = Field(0.0, description="Plain-surface score, carried for risk classification.")
    image_risk: ImageRisk = Field(..., description="Derived single-photo verdict.")
    primary_label: str = Field(..., description="Arg-max class over all six scores ('Plain' for the plain class).")
    primary_confidence: float = Field(0.0, description="Score of the arg-max class.")

    @property
    def is_clean(self) -> bool:
        return not self.detected_issues


class ImageFailure(BaseModel):
    """Per-image note for a photo that contributed nothing to the aggregate."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    source_ref: str
    area_id: str | None = None
    kind: FailureKind
    message: str = ""


# =========================
# Areas & summaries
# =========================


class BuildingArea(BaseModel):
    """Caller input: one named building area and its photos."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, extra="ignore")

    id: str = Field(..., description="Stable area identifier.")
    name: str = Field(..., description="Human-readable area name, e.g. 'Foundation'.")
    area_type: AreaType = Field(AreaType.other, description="Area catalogue entry.")
    description: str = Field("", description="Optional free-form notes.")
    photos: list[ImageSource] = Field(default_factory=list, description="Photo paths or encoded bytes, in capture order.")


class AreaAssessment(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    area_id: str
    area_name: str = ""
    area_type: AreaType = AreaType.other
    images: list[ImageAssessment] = Field(default_factory=list)
    area_risk: ImageRisk = Field(ImageRisk.none, description="Worst image risk in the area; None when empty.")


class DetectionSummaryItem(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    damage_type: DamageType
    count: int = Field(..., ge=0)
    average_confidence: float = Field(..., ge=0)


class AssessmentSummary(BaseModel):
    """Terminal aggregate for one analysis run. Replaced wholesale on re-analysis."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    overall_risk: ImageRisk
    total_issue_count: int = Field(..., ge=0)
    per_type_counts: dict[DamageType, int] = Field(default_factory=dict, description="Image-occurrence tally per damage type.")
    detection_summary: list[DetectionSummaryItem] = Field(default_factory=list)
    areas: list[AreaAssessment] = Field(default_factory=list)
    images: list[ImageAssessment] = Field(default_factory=list, description="All analyzed images, submission order.")
    failures: list[ImageFailure] = Field(default_factory=list)
    images_total: int = Field(0, ge=0, description="Photos submitted, including failed ones.")
    images_analyzed: int = Field(0, ge=0)

    @field_validator("per_type_counts")
    @classmethod
    def _non_negative_counts(cls, v: dict[DamageType, int]) -> dict[DamageType, int]:
        for k, val in v.items():
            if val < 0:
                raise ValueError(f"per_type_counts[{k}] must be >= 0")
        return v


# =========================
# Recommendations
# =========================


class RecommendationTemplate(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    title: str
    description: str
    severity: SeverityTier
    actions: tuple[str, ...] = ()


class MergedRecommendation(BaseModel):
    """All occurrences of one (type, level) pair within a scope, merged."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    damage_type: DamageType | None = Field(None, description="None for the synthetic clean-surface entry.")
    damage_level: DamageLevel | None = None
    title: str
    description: str
    severity: SeverityTier
    actions: tuple[str, ...] = ()
    image_count: int = Field(..., ge=0, description="Issue occurrences (images) merged into this entry.")
    average_confidence: float = Field(..., ge=0)
