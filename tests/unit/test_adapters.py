from __future__ import annotations

import sys
import types

import numpy as np

from structurescan.tools.classifier import OnnxClassifier, PaletteClassifier
from structurescan.tools.classifier.mock_classifier import AMBIGUOUS_VECTOR, mean_rgb


def _solid(rgb, size=8) -> np.ndarray:
    arr = np.empty((1, size, size, 3), dtype=np.float32)
    arr[...] = np.asarray(rgb, dtype=np.float32) / 255.0
    return arr


def test_mean_rgb_and_palette_lookup():
    assert mean_rgb(_solid((10, 20, 30))) == (10, 20, 30)

    clf = PaletteClassifier({(200, 0, 0): [0.9, 0, 0, 0, 0, 0]}, tolerance=8)
    assert clf.infer(_solid((196, 4, 3)))[0] == 0.9
    assert clf.infer(_solid((100, 100, 100))) == list(AMBIGUOUS_VECTOR)


class _FakeSession:
    """Stands in for onnxruntime.InferenceSession; records the fed tensor shape."""

    def __init__(self, path, providers=None):
        self.path = path
        self.providers = providers
        self.fed_shape = None

    def get_inputs(self):
        return [types.SimpleNamespace(name="input", shape=[1, 3, 224, 224])]

    def get_outputs(self):
        return [types.SimpleNamespace(name="probs")]

    def run(self, names, feeds):
        self.fed_shape = feeds["input"].shape
        return [np.asarray([[0.1, 0.2, 0.3, 0.1, 0.1, 0.2]], dtype=np.float32)]


def test_onnx_classifier_nchw_and_flatten(monkeypatch):
    fake = types.ModuleType("onnxruntime")
    fake.InferenceSession = _FakeSession
    monkeypatch.setitem(sys.modules, "onnxruntime", fake)

    clf = OnnxClassifier("model.onnx")
    assert clf.nchw
    assert clf.sess.providers == ["CPUExecutionProvider"]
    out = clf.infer(np.zeros((1, 224, 224, 3), dtype=np.float32))
    assert clf.sess.fed_shape == (1, 3, 224, 224)
    assert len(out) == 6
    assert abs(out[2] - 0.3) < 1e-6
    clf.close()
    assert clf.sess is None
