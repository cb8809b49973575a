# structurescan/core/config.py

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, Field

# Tuned empirically against the shipped classifier
DETECTION_THRESHOLD = 0.50
PLAIN_CONFIDENCE_THRESHOLD = 0.30

# Classifier input resolution (square)
INPUT_SIZE = 224


class EngineConfig(BaseModel):
    """
    Engine-wide settings. Fixed for the lifetime of a batch; stages read them
    from here rather than taking per-call overrides.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    detection_threshold: float = Field(
        DETECTION_THRESHOLD,
        ge=DETECTION_THRESHOLD,
        le=1,
        description="A damage class is reported only when its score is strictly above this. Never below the default.",
    )
    plain_confidence_threshold: float = Field(
        PLAIN_CONFIDENCE_THRESHOLD,
        ge=0,
        le=1,
        description="With no issues, a plain score strictly above this means 'no risk'; otherwise the image is Low risk.",
    )
    input_size: int = Field(INPUT_SIZE, gt=0, description="Square side length the classifier expects.")
    max_workers: int | None = Field(None, gt=0, description="Worker threads per batch. None → os.cpu_count().")
    max_reanalyses: int = Field(1, ge=0, description="Re-analysis runs allowed per assessment session.")

    def worker_count(self) -> int:
        return self.max_workers or os.cpu_count() or 1

    @classmethod
    def from_env(cls) -> EngineConfig:
        """Defaults overridden by STRUCTURESCAN_* environment variables when set."""
        overrides: dict[str, object] = {}
        for env_key, field_name in (
            ("STRUCTURESCAN_DETECTION_THRESHOLD", "detection_threshold"),
            ("STRUCTURESCAN_PLAIN_THRESHOLD", "plain_confidence_threshold"),
            ("STRUCTURESCAN_INPUT_SIZE", "input_size"),
            ("STRUCTURESCAN_MAX_WORKERS", "max_workers"),
            ("STRUCTURESCAN_MAX_REANALYSES", "max_reanalyses"),
        ):
            raw = os.getenv(env_key, "").strip()
            if raw:
                overrides[field_name] = raw
        return cls.model_validate(overrides)


DEFAULT_CONFIG = EngineConfig()
