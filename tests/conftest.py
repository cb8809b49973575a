# tests/conftest.py
from __future__ import annotations

import os
import random
from pathlib import Path

import pytest

from tests.utils import (
    ALGAE_RGB,
    AMBIGUOUS_RGB,
    PLAIN_RGB,
    SPALLING_RGB,
    make_gradient_img as _make_gradient_img,
    make_solid_png,
    png_bytes as _make_png,
)


# -------- Global deterministic seed --------
@pytest.fixture(autouse=True, scope="session")
def _seed_session():
    random.seed(1337)
    os.environ.setdefault("PYTHONHASHSEED", "0")
    yield


@pytest.fixture(autouse=True)
def _no_engine_env(monkeypatch):
    """Keep STRUCTURESCAN_* settings from the developer shell out of tests."""
    for key in list(os.environ):
        if key.startswith("STRUCTURESCAN_"):
            monkeypatch.delenv(key, raising=False)


# -------- Photo fixtures --------
@pytest.fixture
def building_dir(tmp_path: Path) -> Path:
    """
    Building folder with one sub-folder per area.

    Files created:
      - foundation/01_spalling.png   → Spalling / High
      - foundation/02_plain.png      → clean
      - exterior_walls/01_algae.png  → Algae / Moderate
      - garage/01_unsure.png         → ambiguous (Low), area type OTHER
    """
    base = tmp_path / "building"
    make_solid_png(base / "foundation" / "01_spalling.png", SPALLING_RGB)
    make_solid_png(base / "foundation" / "02_plain.png", PLAIN_RGB)
    make_solid_png(base / "exterior_walls" / "01_algae.png", ALGAE_RGB)
    make_solid_png(base / "garage" / "01_unsure.png", AMBIGUOUS_RGB)
    (base / "garage" / "notes.txt").write_text("not a photo", encoding="utf-8")
    return base


@pytest.fixture
def png_bytes():
    """
    Fixture that returns a callable to generate PNG bytes with low compression.
    Usage:
        data = png_bytes(64, 64, color=(10, 20, 30))
    """
    return _make_png


@pytest.fixture
def make_gradient_img():
    """
    Fixture that returns a callable to generate gradient images at a given path.
    Usage:
        make_gradient_img(path, (w, h), delta=0)
    """

    def _factory(path: Path, size: tuple[int, int], delta: int = 0) -> None:
        _make_gradient_img(path=path, size=size, delta=delta)

    return _factory


# -------- Pytest markers --------
def pytest_configure(config):
    config.addinivalue_line("markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')")
    config.addinivalue_line("markers", "integration: marks integration tests")
