# structurescan/tools/classifier/onnx_classifier.py
from __future__ import annotations

from typing import Any

import numpy as np


class OnnxClassifier:
    """
    Lightweight wrapper around onnxruntime.InferenceSession for the six-class
    surface damage model. Lazily imports onnxruntime and stays CPU-only.

    Expects the preprocessor's (1, H, W, 3) float32 tensor; transposes to NCHW
    when the model declares a channels-first input.
    """

    # One InferenceSession.run per call; onnxruntime sessions are reentrant
    thread_safe = True

    def __init__(self, model_path: str, *, input_name: str | None = None) -> None:
        try:
            import onnxruntime as ort
        except Exception as e:  # pragma: no cover
            raise RuntimeError("onnxruntime not available; install the 'onnx' extra to use OnnxClassifier") from e

        self.model_path = model_path
        self.sess: Any = ort.InferenceSession(model_path, providers=["CPUExecutionProvider"])

        inputs = self.sess.get_inputs()
        if not inputs:
            raise RuntimeError("ONNX model has no inputs")
        self.input_name = input_name or inputs[0].name
        ishape = inputs[0].shape
        # ishape could be [1, 3, H, W] or [1, H, W, 3]
        self.nchw = False
        try:
            if ishape[-1] == 3:
                self.nchw = False
            elif ishape[1] == 3:
                self.nchw = True
        except (IndexError, TypeError):
            self.nchw = False

        outs = self.sess.get_outputs()
        if not outs:
            raise RuntimeError("ONNX model has no outputs")
        self.output_name = outs[0].name

    def infer(self, tensor: np.ndarray) -> list[float]:
        x = np.asarray(tensor, dtype=np.float32)
        if self.nchw:
            x = x.transpose(0, 3, 1, 2)
        pred = self.sess.run([self.output_name], {self.input_name: x})[0]
        vec = np.asarray(pred, dtype=np.float32).reshape(-1)
        return [float(v) for v in vec]

    def close(self) -> None:
        self.sess = None
