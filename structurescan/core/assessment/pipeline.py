# structurescan/core/assessment/pipeline.py
"""
Per-image pipeline and batch runner.

analyze_image() runs Preprocessor → Classifier → Issue Detector → Risk
Classifier for one photo. run_batch() fans those pipelines out on a thread
pool that shares one ClassifierPool, and puts every outcome back in its
submission slot. analyze_areas() runs one batch over every area's photos and
folds the results into an AssessmentSummary.
"""

from __future__ import annotations

import threading
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from contextlib import ExitStack
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from structurescan.core.assessment.aggregate import build_area_assessment, build_summary
from structurescan.core.config import DEFAULT_CONFIG, EngineConfig
from structurescan.core.errors import IMAGE_ERRORS, AnalysisCancelled, DecodeFailure, classifier_error_guard
from structurescan.core.logs import get_logger
from structurescan.core.vision.classifier import infer
from structurescan.core.vision.detector import detect, primary_label
from structurescan.core.vision.preprocess import ImageLike, prepare, sha256_of, source_ref_of
from structurescan.core.vision.risk import classify
from structurescan.schemas.models import (
    AssessmentSummary,
    BuildingArea,
    FailureKind,
    ImageAssessment,
    ImageFailure,
    ImageSource,
)
from structurescan.tools.classifier import ClassifierAdapter, ClassifierFactory, ClassifierPool

log = get_logger(__name__)


class BatchResult(BaseModel):
    """Outcome of one batch, one slot per submitted photo in submission order."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    results: list[ImageAssessment | ImageFailure] = Field(default_factory=list)
    cancelled: bool = False

    @property
    def assessments(self) -> list[ImageAssessment]:
        return [r for r in self.results if isinstance(r, ImageAssessment)]

    @property
    def failures(self) -> list[ImageFailure]:
        return [r for r in self.results if isinstance(r, ImageFailure)]


def _check_cancel(cancel: threading.Event | None) -> None:
    if cancel is not None and cancel.is_set():
        raise AnalysisCancelled("analysis cancelled")


def _describe(source: ImageLike) -> str:
    """Reference for a photo that may not even be readable."""
    if isinstance(source, bytes):
        return source_ref_of(source, sha256_of(source))
    if isinstance(source, str | Path):
        return str(source)
    return "<image>"


# ----------------------------
# Single image
# ----------------------------


def analyze_image(
    source: ImageLike,
    adapter: ClassifierAdapter,
    config: EngineConfig = DEFAULT_CONFIG,
    *,
    cancel: threading.Event | None = None,
) -> ImageAssessment:
    """
    One stateless pipeline invocation.

    Raises DecodeFailure / InferenceFailure for this photo only, and
    AnalysisCancelled when `cancel` is set before a stage begins.
    """
    _check_cancel(cancel)
    sha = sha256_of(source)
    ref = source_ref_of(source, sha)
    tensor = prepare(source, size=config.input_size)

    _check_cancel(cancel)
    vector = infer(adapter, tensor, source_ref=ref)

    issues = detect(vector, config)
    label, label_conf = primary_label(vector)
    return ImageAssessment(
        source_ref=ref,
        sha256=sha,
        vector=vector,
        detected_issues=issues,
        plain_confidence=vector.plain,
        image_risk=classify(issues, vector.plain, config),
        primary_label=label,
        primary_confidence=label_conf,
    )


def _run_one(
    source: ImageSource,
    pool: ClassifierPool,
    config: EngineConfig,
    cancel: threading.Event | None,
) -> ImageAssessment:
    _check_cancel(cancel)
    with ExitStack() as stack:
        # model load errors belong to the image that triggered the load
        with classifier_error_guard(_describe(source)):
            adapter = stack.enter_context(pool.acquire())
        return analyze_image(source, adapter, config, cancel=cancel)


def _failure(source: ImageSource, kind: FailureKind, message: str = "") -> ImageFailure:
    return ImageFailure(source_ref=_describe(source), kind=kind, message=message)


# ----------------------------
# Batches
# ----------------------------


def run_batch(
    sources: Sequence[ImageSource],
    classifier_factory: ClassifierFactory,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
    cancel: threading.Event | None = None,
) -> BatchResult:
    """
    Analyze photos in parallel with one classifier pool for the whole batch.

    - Worker count comes from config (CPU count by default).
    - A failing photo becomes an ImageFailure in its slot; the rest go on.
    - Setting `cancel` stops new stages from starting and cancels queued
      work. Anything not finished is noted with kind="cancelled".
    """
    if not sources:
        return BatchResult(results=[], cancelled=bool(cancel and cancel.is_set()))

    workers = min(config.worker_count(), len(sources))
    slots: list[ImageAssessment | ImageFailure | None] = [None] * len(sources)
    log.info("batch start: %d photo(s), %d worker(s)", len(sources), workers)

    with (
        ClassifierPool(classifier_factory, size=workers) as pool,
        ThreadPoolExecutor(max_workers=workers, thread_name_prefix="structurescan") as ex,
    ):
        futures: dict[Future[ImageAssessment], int] = {
            ex.submit(_run_one, src, pool, config, cancel): i for i, src in enumerate(sources)
        }
        for fut in as_completed(futures):
            i = futures[fut]
            src = sources[i]
            if fut.cancelled():
                slots[i] = _failure(src, "cancelled")
                continue
            try:
                slots[i] = fut.result()
            except AnalysisCancelled:
                slots[i] = _failure(src, "cancelled")
            except IMAGE_ERRORS as e:
                kind: FailureKind = "decode" if isinstance(e, DecodeFailure) else "inference"
                log.warning("photo %s skipped (%s): %s", _describe(src), kind, e)
                slots[i] = _failure(src, kind, str(e))

            if cancel is not None and cancel.is_set():
                for other in futures:
                    other.cancel()

    cancelled = bool(cancel and cancel.is_set())
    results = [s if s is not None else _failure(sources[i], "cancelled") for i, s in enumerate(slots)]
    done = sum(1 for r in results if isinstance(r, ImageAssessment))
    log.info("batch end: %d/%d analyzed%s", done, len(results), " (cancelled)" if cancelled else "")
    return BatchResult(results=results, cancelled=cancelled)


def analyze_areas(
    areas: Sequence[BuildingArea],
    classifier_factory: ClassifierFactory,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
    cancel: threading.Event | None = None,
) -> AssessmentSummary:
    """
    One batch over all area photos, regrouped per area.
    Raises EmptyBatchFailure when nothing could be analyzed.
    """
    owners = [pos for pos, area in enumerate(areas) for _ in area.photos]
    sources = [photo for area in areas for photo in area.photos]
    batch = run_batch(sources, classifier_factory, config=config, cancel=cancel)

    per_area: list[list[ImageAssessment]] = [[] for _ in areas]
    failures: list[ImageFailure] = []
    for pos, res in zip(owners, batch.results, strict=True):
        if isinstance(res, ImageFailure):
            failures.append(res.model_copy(update={"area_id": areas[pos].id}))
        else:
            per_area[pos].append(res)

    assessed = [build_area_assessment(area, imgs) for area, imgs in zip(areas, per_area, strict=True)]
    return build_summary(assessed, failures=failures, images_total=len(sources))
