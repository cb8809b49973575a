from __future__ import annotations

import os

import pytest
from pydantic import ValidationError

from structurescan.core.config import DEFAULT_CONFIG, DETECTION_THRESHOLD, PLAIN_CONFIDENCE_THRESHOLD, EngineConfig


def test_defaults():
    assert DEFAULT_CONFIG.detection_threshold == DETECTION_THRESHOLD == 0.50
    assert DEFAULT_CONFIG.plain_confidence_threshold == PLAIN_CONFIDENCE_THRESHOLD == 0.30
    assert DEFAULT_CONFIG.input_size == 224
    assert DEFAULT_CONFIG.max_reanalyses == 1
    assert DEFAULT_CONFIG.worker_count() == (os.cpu_count() or 1)
    assert EngineConfig(max_workers=3).worker_count() == 3


def test_from_env(monkeypatch):
    monkeypatch.setenv("STRUCTURESCAN_DETECTION_THRESHOLD", "0.6")
    monkeypatch.setenv("STRUCTURESCAN_MAX_WORKERS", "2")
    monkeypatch.setenv("STRUCTURESCAN_PLAIN_THRESHOLD", " ")
    cfg = EngineConfig.from_env()
    assert cfg.detection_threshold == 0.6
    assert cfg.max_workers == 2
    assert cfg.plain_confidence_threshold == 0.30


def test_validation_and_frozen(monkeypatch):
    with pytest.raises(ValidationError):
        EngineConfig(detection_threshold=1.5)
    with pytest.raises(ValidationError):
        EngineConfig(detection_threshold=0.4)
    with pytest.raises(ValidationError):
        EngineConfig(max_workers=0)
    with pytest.raises(ValidationError):
        DEFAULT_CONFIG.detection_threshold = 0.1

    monkeypatch.setenv("STRUCTURESCAN_INPUT_SIZE", "not-a-number")
    with pytest.raises(ValidationError):
        EngineConfig.from_env()
