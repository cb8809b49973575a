# structurescan/core/vision/classifier.py
from __future__ import annotations

from collections.abc import Callable
from typing import Any, Literal

import numpy as np

from structurescan.core.errors import InferenceFailure, classifier_error_guard
from structurescan.schemas.models import ConfidenceVector
from structurescan.tools.classifier import (
    ClassifierAdapter,
    ClassifierFactory,
    MockClassifier,
    OnnxClassifier,
    StaticClassifier,
)

ClassifierName = Literal["mock", "static", "onnx"]


def infer(adapter: ClassifierAdapter, tensor: np.ndarray, *, source_ref: str = "") -> ConfidenceVector:
    """
    Run the adapter on one tensor and name its outputs.

    Any exception raised by the adapter surfaces as InferenceFailure. Output
    shorter than six scores is zero-padded; non-numeric output is a failure.
    """
    with classifier_error_guard(source_ref):
        raw = adapter.infer(tensor)
        values = np.asarray(raw, dtype=np.float64).reshape(-1)
    if not np.all(np.isfinite(values)):
        raise InferenceFailure(f"classifier returned non-finite scores for {source_ref or 'image'}")
    return ConfidenceVector.from_sequence(values.tolist())


# --- Factory registry --------------------------------------------------------

_FACTORIES: dict[str, Callable[..., ClassifierAdapter]] = {
    "mock": MockClassifier,
    "static": StaticClassifier,
    "onnx": OnnxClassifier,
}


def register_classifier(name: str, factory: Callable[..., ClassifierAdapter]) -> None:
    """Runtime registration for an adapter constructor. Call once during app/CLI init."""
    _FACTORIES[name] = factory


def make_classifier_factory(name: ClassifierName | str, **kwargs: Any) -> ClassifierFactory:
    """
    Return a zero-argument factory for the named adapter, suitable for a
    ClassifierPool. Raises ValueError for an unknown name.
    """
    ctor = _FACTORIES.get(name)
    if ctor is None:
        raise ValueError(f"Unknown classifier: {name}")

    def _factory() -> ClassifierAdapter:
        return ctor(**kwargs)

    return _factory
