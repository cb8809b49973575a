# structurescan/core/errors.py
"""
Typed errors for the damage assessment engine.

Exports
-------
- AssessmentError, DecodeFailure, InferenceFailure, EmptyBatchFailure,
  SessionStateError, AnalysisCancelled
- IMAGE_ERRORS
- classifier_error_guard()

Only DecodeFailure and InferenceFailure are expected per image; both are
recovered into per-image failure notes by the batch pipeline. EmptyBatchFailure
is the single end-to-end failure a caller must handle.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

# =========================
# Exception types
# =========================


class AssessmentError(RuntimeError):
    """Base class for damage assessment failures."""


class DecodeFailure(AssessmentError):
    """The input could not be decoded into a bitmap (missing, empty, corrupt, unsupported)."""


class InferenceFailure(AssessmentError):
    """The classifier adapter raised or returned unusable output."""


class EmptyBatchFailure(AssessmentError):
    """No image in the batch was analyzed successfully; no summary can be built."""


class SessionStateError(AssessmentError):
    """An assessment session was asked to make a transition its state forbids."""


class AnalysisCancelled(AssessmentError):
    """The batch cancel signal was set before this stage started."""


# Selector tuple for per-image grouped handling
IMAGE_ERRORS = (
    DecodeFailure,
    InferenceFailure,
)


@contextmanager
def classifier_error_guard(source_ref: str = "") -> Iterator[None]:
    """Normalize anything raised by a classifier adapter into InferenceFailure."""
    try:
        yield
    except InferenceFailure:
        raise
    except Exception as exc:  # noqa: BLE001
        where = f" for {source_ref}" if source_ref else ""
        raise InferenceFailure(f"classifier failed{where}: {type(exc).__name__}: {exc}") from exc


__all__ = [
    "AssessmentError",
    "DecodeFailure",
    "InferenceFailure",
    "EmptyBatchFailure",
    "SessionStateError",
    "AnalysisCancelled",
    "IMAGE_ERRORS",
    "classifier_error_guard",
]
