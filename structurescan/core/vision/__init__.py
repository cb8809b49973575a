"""
structurescan.core.vision
=========================

Per-photo stages of the damage assessment engine.

Exports:
- Preprocessor: prepare(), decode(), to_tensor(), sha256_of()
- Classifier boundary: infer(), make_classifier_factory(), register_classifier()
- Issue detector: detect(), primary_label()
- Risk classifier: classify()
"""

from __future__ import annotations

# ---- Classifier boundary ----
from .classifier import infer, make_classifier_factory, register_classifier

# ---- Issue detection ----
from .detector import detect, primary_label

# ---- Preprocessing ----
from .preprocess import decode, prepare, sha256_of, to_tensor

# ---- Risk ----
from .risk import classify

__all__ = [
    # Preprocessing
    "prepare",
    "decode",
    "to_tensor",
    "sha256_of",
    # Classifier boundary
    "infer",
    "make_classifier_factory",
    "register_classifier",
    # Detection / risk
    "detect",
    "primary_label",
    "classify",
]
