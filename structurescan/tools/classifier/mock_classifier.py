# structurescan/tools/classifier/mock_classifier.py
"""
Mock Classifier Adapters

Purpose
-------
Deterministic, model-free adapters so the full pipeline runs in tests and local
development without a trained network.

- StaticClassifier: always returns the same score vector.
- PaletteClassifier: picks a score vector by the mean colour of the input
  tensor, so solid-colour test photos map to known readings.
- MockClassifier: tensor-statistics stub; flat surfaces read as 'plain', strong
  contrast reads as cracking, green-dominant surfaces read as algae.

None of these load model weights. Like the real model they only see the
preprocessed tensor, so they honour the same contract.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping, Sequence

import numpy as np

RGB = tuple[int, int, int]

# Ambiguous read: nothing over threshold, plain not confident
AMBIGUOUS_VECTOR: tuple[float, ...] = (0.10, 0.10, 0.20, 0.15, 0.20, 0.25)


def mean_rgb(tensor: np.ndarray) -> RGB:
    """Mean colour of a (1, H, W, 3) tensor in [0, 1], as 0..255 ints."""
    arr = np.asarray(tensor, dtype=np.float32).reshape(-1, 3)
    if not arr.size:
        return (0, 0, 0)
    r, g, b = (int(round(float(v) * 255.0)) for v in arr.mean(axis=0))
    return (r, g, b)


class StaticClassifier:
    """Returns the same vector for every tensor."""

    thread_safe = True

    def __init__(self, vector: Sequence[float]) -> None:
        self.vector = [float(v) for v in vector]
        self.calls = 0
        self.closed = False
        self._lock = threading.Lock()

    def infer(self, tensor: np.ndarray) -> list[float]:
        with self._lock:
            self.calls += 1
        return list(self.vector)

    def close(self) -> None:
        self.closed = True


class PaletteClassifier:
    """
    Colour-keyed scores. The nearest palette colour within `tolerance`
    (max per-channel distance) wins; otherwise `default` is returned.
    """

    thread_safe = True

    def __init__(
        self,
        palette: Mapping[RGB, Sequence[float]],
        *,
        default: Sequence[float] = AMBIGUOUS_VECTOR,
        tolerance: int = 8,
    ) -> None:
        self.palette = {tuple(k): [float(v) for v in vec] for k, vec in palette.items()}
        self.default = [float(v) for v in default]
        self.tolerance = tolerance

    def infer(self, tensor: np.ndarray) -> list[float]:
        rgb = mean_rgb(tensor)
        best: tuple[int, list[float]] | None = None
        for key, vec in self.palette.items():
            dist = max(abs(a - b) for a, b in zip(rgb, key, strict=True))
            if dist <= self.tolerance and (best is None or dist < best[0]):
                best = (dist, vec)
        return list(best[1]) if best else list(self.default)


class MockClassifier:
    """
    Tensor-statistics stub. Uses spread and channel balance of the normalized
    input; identical tensors always produce identical scores.
    """

    thread_safe = True

    def infer(self, tensor: np.ndarray) -> list[float]:
        arr = np.asarray(tensor, dtype=np.float32)
        if not arr.size:
            return [0.0] * 6
        spread = float(arr.std())

        crack_high = 0.0
        crack_low = 0.0
        plain = 0.0
        if spread >= 0.30:
            crack_high = min(0.95, 0.5 + spread)
        elif spread >= 0.15:
            crack_low = min(0.90, 0.4 + spread * 2)
        else:
            plain = min(0.98, 0.6 + (1.0 - spread) * 0.3)

        algae = 0.0
        r, g, b = (v / 255.0 for v in mean_rgb(arr))
        # green-dominant surface
        if g - max(r, b) >= 0.12:
            algae = min(0.92, 0.55 + (g - max(r, b)))
            plain = min(plain, 0.2)
        return [crack_high, 0.0, crack_low, 0.0, algae, plain]
