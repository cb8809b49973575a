# structurescan/orchestrators/assessment_orchestrator.py
from __future__ import annotations

import threading
from collections.abc import Iterable, Sequence
from pathlib import Path

from structurescan.core.assessment.pipeline import analyze_areas
from structurescan.core.config import DEFAULT_CONFIG, EngineConfig
from structurescan.core.logs import get_logger
from structurescan.schemas.labels import AreaType, area_type_from_name
from structurescan.schemas.models import AssessmentSummary, BuildingArea
from structurescan.tools.classifier import ClassifierFactory

log = get_logger(__name__)

_IMAGE_EXTS = {".jpg", ".jpeg", ".png", ".webp", ".bmp", ".tif", ".tiff"}


class AssessmentOrchestrator:
    """
    Folder-driven entry point.

    Loose photos in the folder form one area named after the folder; each
    sub-folder forms its own area, typed from its name ('foundation',
    'exterior_walls', ...; anything unknown is OTHER).
    """

    def __init__(self, classifier_factory: ClassifierFactory, *, config: EngineConfig = DEFAULT_CONFIG) -> None:
        self.classifier_factory = classifier_factory
        self.config = config

    def analyze_paths(
        self,
        photo_paths: Sequence[str],
        *,
        area_name: str = "Photos",
        cancel: threading.Event | None = None,
    ) -> AssessmentSummary:
        area = BuildingArea(
            id=_area_id(area_name),
            name=area_name,
            area_type=area_type_from_name(area_name),
            photos=_normalize_paths(photo_paths),
        )
        return self.analyze_areas([area], cancel=cancel)

    def analyze_areas(self, areas: Sequence[BuildingArea], *, cancel: threading.Event | None = None) -> AssessmentSummary:
        return analyze_areas(areas, self.classifier_factory, config=self.config, cancel=cancel)

    def analyze_folder(self, folder: str, *, cancel: threading.Event | None = None) -> AssessmentSummary:
        """Raises EmptyBatchFailure when the folder holds no analyzable photo."""
        areas = self.areas_from_folder(folder)
        log.info("folder %s: %d area(s)", folder, len(areas))
        return self.analyze_areas(areas, cancel=cancel)

    @classmethod
    def areas_from_folder(cls, folder: str) -> list[BuildingArea]:
        base = Path(folder)
        if not base.is_dir():
            return []

        areas: list[BuildingArea] = []
        seen: set[str] = set()
        loose = cls.list_images(str(base))
        if loose:
            areas.append(_make_area(base.name or "Photos", loose, seen))
        for sub in sorted((d for d in base.iterdir() if d.is_dir()), key=lambda d: d.name.lower()):
            photos = cls.list_images(str(sub), recursive=True)
            if photos:
                areas.append(_make_area(sub.name, photos, seen))
        return areas

    @staticmethod
    def list_images(folder: str, *, recursive: bool = False) -> list[str]:
        base = Path(folder)
        if not base.exists() or not base.is_dir():
            return []

        if not recursive:
            files = [p for p in sorted(base.iterdir(), key=lambda x: x.name.lower()) if p.is_file() and p.suffix.lower() in _IMAGE_EXTS]
            return [str(p) for p in files]

        collected: list[str] = []
        for dirpath, filenames in _walk_sorted(base):
            for name in filenames:
                p = Path(dirpath) / name
                if p.suffix.lower() in _IMAGE_EXTS and p.is_file():
                    collected.append(str(p))
        return collected


def _area_id(name: str, seen: set[str] | None = None) -> str:
    """Slug of the area name; repeats within `seen` get a numeric suffix."""
    slug = "".join(ch if ch.isalnum() else "_" for ch in name.strip().lower()).strip("_") or "area"
    if seen is None:
        return slug
    area_id, n = slug, 1
    while area_id in seen:
        n += 1
        area_id = f"{slug}_{n}"
    seen.add(area_id)
    return area_id


def _make_area(name: str, photos: list[str], seen: set[str] | None = None) -> BuildingArea:
    at = area_type_from_name(name)
    return BuildingArea(
        id=_area_id(name, seen),
        name=name if at is AreaType.other else at.display_name,
        area_type=at,
        description=at.description,
        photos=list(photos),
    )


def _normalize_paths(paths: Iterable[str]) -> list[str]:
    out: list[str] = []
    seen: set[str] = set()
    for p in paths:
        ap = str(Path(p).resolve())
        if ap in seen:
            continue
        seen.add(ap)
        out.append(ap)
    return out


def _walk_sorted(base: Path) -> Iterable[tuple[str, list[str]]]:
    stack = [base]
    while stack:
        current = stack.pop(0)
        if not current.is_dir():
            continue
        dirnames = sorted([d.name for d in current.iterdir() if d.is_dir()], key=str.lower)
        filenames = sorted([f.name for f in current.iterdir() if f.is_file()], key=str.lower)
        yield (str(current), filenames)
        for d in dirnames:
            stack.append(current / d)
