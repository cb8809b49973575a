# structurescan/tools/classifier/provider_base.py
"""
Classifier Adapter Interface + pooled lifecycle

Purpose
-------
Define the minimal contract the engine needs from the damage classifier, and a
pool that owns adapter instances for the duration of one batch.

Design
------
- Protocol `ClassifierAdapter` keeps a single `infer(tensor)` call.
- Optional duck-typed `close()` releases model resources.
- Optional class attribute `thread_safe = True` lets one instance serve every
  worker; otherwise the pool hands each worker its own instance.

Public API
----------
class ClassifierAdapter(Protocol):
    def infer(self, tensor: np.ndarray) -> Sequence[float]

class ClassifierPool:
    with ClassifierPool(factory, size=4) as pool:
        with pool.acquire() as adapter:
            adapter.infer(tensor)

Invariants & Guardrails
-----------------------
- Adapters are created lazily, at most `size` of them, once per pool.
- A non-thread-safe adapter is never used by two workers at the same time.
- `close()` releases every created adapter exactly once, even when the batch
  was cancelled or failed.
"""

from __future__ import annotations

import queue
import threading
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from typing import Protocol

import numpy as np

from structurescan.core.logs import get_logger

log = get_logger(__name__)


class ClassifierAdapter(Protocol):
    def infer(self, tensor: np.ndarray) -> Sequence[float]: ...

    # NOTE: Adapters may optionally implement these.
    # thread_safe: bool
    # def close(self) -> None: ...


ClassifierFactory = Callable[[], ClassifierAdapter]


def is_thread_safe(adapter: ClassifierAdapter) -> bool:
    return bool(getattr(adapter, "thread_safe", False))


def release(adapter: ClassifierAdapter) -> None:
    """Call adapter.close() if it has one."""
    close = getattr(adapter, "close", None)
    if callable(close):
        close()


class ClassifierPool:
    """Bounded pool of classifier adapters with scoped acquisition."""

    def __init__(self, factory: ClassifierFactory, size: int = 1) -> None:
        if size < 1:
            raise ValueError("pool size must be >= 1")
        self._factory = factory
        self._size = size
        self._lock = threading.Lock()
        self._idle: queue.LifoQueue[ClassifierAdapter] = queue.LifoQueue()
        self._created: list[ClassifierAdapter] = []
        self._shared: ClassifierAdapter | None = None
        self._closed = False

    @property
    def created(self) -> int:
        return len(self._created)

    def _checkout(self) -> ClassifierAdapter:
        with self._lock:
            if self._closed:
                raise RuntimeError("classifier pool is closed")
            if self._shared is not None:
                return self._shared
            try:
                return self._idle.get_nowait()
            except queue.Empty:
                pass
            if len(self._created) < self._size:
                adapter = self._factory()
                self._created.append(adapter)
                log.debug("loaded classifier %s (%d/%d)", type(adapter).__name__, len(self._created), self._size)
                if is_thread_safe(adapter):
                    self._shared = adapter
                return adapter
        # All instances busy: wait for one to come back
        return self._idle.get()

    def _checkin(self, adapter: ClassifierAdapter) -> None:
        if adapter is self._shared:
            return
        self._idle.put(adapter)

    @contextmanager
    def acquire(self) -> Iterator[ClassifierAdapter]:
        adapter = self._checkout()
        try:
            yield adapter
        finally:
            self._checkin(adapter)

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            created, self._created = self._created, []
            self._shared = None
        for adapter in created:
            try:
                release(adapter)
            except Exception as e:  # noqa: BLE001
                log.warning("classifier close failed: %s: %s", type(e).__name__, e)
        log.debug("released %d classifier instance(s)", len(created))

    def __enter__(self) -> ClassifierPool:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
