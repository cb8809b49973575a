"""
Classifier tools package

Re-exports the adapter protocol, the pooled lifecycle and the concrete
adapters, so callers can do:

    from structurescan.tools.classifier import (
        ClassifierAdapter,
        ClassifierPool,
        OnnxClassifier,
        MockClassifier,
    )
"""

from __future__ import annotations

# Concrete adapters
from .mock_classifier import MockClassifier, PaletteClassifier, StaticClassifier
from .onnx_classifier import OnnxClassifier

# Protocol / pool
from .provider_base import ClassifierAdapter, ClassifierFactory, ClassifierPool, release

__all__ = [
    "ClassifierAdapter",
    "ClassifierFactory",
    "ClassifierPool",
    "release",
    "MockClassifier",
    "PaletteClassifier",
    "StaticClassifier",
    "OnnxClassifier",
]
