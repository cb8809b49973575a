# structurescan/core/assessment/session.py
"""
Assessment session lifecycle.

    NOT_ANALYZED ──▶ ANALYZING ──▶ SAVING ──▶ COMPLETE
                         ▲                        │
                         └──── re-analysis ───────┘   (while reanalysis_count < max_reanalyses)

A failed analysis or a rejected save drops the session back to the stable
state it started from (NOT_ANALYZED or COMPLETE) and keeps the prior summary.
The re-analysis allowance is only spent when a re-analysis is saved.
"""

from __future__ import annotations

import threading
import uuid
from collections.abc import Callable, Sequence
from enum import Enum

from structurescan.core.assessment.pipeline import analyze_areas
from structurescan.core.config import DEFAULT_CONFIG, EngineConfig
from structurescan.core.errors import AnalysisCancelled, SessionStateError
from structurescan.core.logs import get_logger
from structurescan.schemas.models import AssessmentSummary, BuildingArea
from structurescan.tools.classifier import ClassifierFactory

log = get_logger(__name__)

# save(summary, is_reanalysis) -> accepted?
SaveCallback = Callable[[AssessmentSummary, bool], bool]


class SessionState(str, Enum):
    not_analyzed = "NOT_ANALYZED"
    analyzing = "ANALYZING"
    saving = "SAVING"
    complete = "COMPLETE"


_STABLE = frozenset({SessionState.not_analyzed, SessionState.complete})


class AssessmentSession:
    def __init__(self, session_id: str | None = None, *, config: EngineConfig = DEFAULT_CONFIG) -> None:
        self.session_id = session_id or uuid.uuid4().hex
        self.config = config
        self._lock = threading.Lock()
        self._state = SessionState.not_analyzed
        self._stable = SessionState.not_analyzed
        self._summary: AssessmentSummary | None = None
        self._pending: AssessmentSummary | None = None
        self._reanalysis_count = 0

    # ---- read-only views ----

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def summary(self) -> AssessmentSummary | None:
        """Last saved summary."""
        return self._summary

    @property
    def reanalysis_count(self) -> int:
        return self._reanalysis_count

    @property
    def can_reanalyze(self) -> bool:
        return self._state is SessionState.complete and self._reanalysis_count < self.config.max_reanalyses

    @property
    def is_reanalysis(self) -> bool:
        """True while the in-flight run started from COMPLETE."""
        return self._state not in _STABLE and self._stable is SessionState.complete

    # ---- transitions ----

    def begin_analysis(self) -> None:
        with self._lock:
            if self._state is SessionState.not_analyzed:
                pass
            elif self._state is SessionState.complete:
                if self._reanalysis_count >= self.config.max_reanalyses:
                    raise SessionStateError(
                        f"session {self.session_id}: re-analysis limit reached ({self.config.max_reanalyses})"
                    )
            else:
                raise SessionStateError(f"session {self.session_id}: cannot start analysis while {self._state.value}")
            self._stable = self._state
            self._state = SessionState.analyzing

    def begin_saving(self, summary: AssessmentSummary) -> None:
        with self._lock:
            if self._state is not SessionState.analyzing:
                raise SessionStateError(f"session {self.session_id}: cannot save while {self._state.value}")
            self._pending = summary
            self._state = SessionState.saving

    def complete(self) -> AssessmentSummary:
        with self._lock:
            if self._state is not SessionState.saving or self._pending is None:
                raise SessionStateError(f"session {self.session_id}: nothing to complete while {self._state.value}")
            if self._stable is SessionState.complete:
                self._reanalysis_count += 1
            self._summary, self._pending = self._pending, None
            self._state = self._stable = SessionState.complete
            return self._summary

    def abort(self) -> None:
        """Return to the stable state this run started from. No-op when already stable."""
        with self._lock:
            if self._state in _STABLE:
                return
            log.info("session %s: reverting %s → %s", self.session_id, self._state.value, self._stable.value)
            self._pending = None
            self._state = self._stable

    # ---- driver ----

    def run(
        self,
        areas: Sequence[BuildingArea],
        classifier_factory: ClassifierFactory,
        *,
        save: SaveCallback,
        cancel: threading.Event | None = None,
    ) -> AssessmentSummary | None:
        """
        Analyze → save → complete in one call.

        Returns the new summary once `save` accepts it, or None when `save`
        rejects it (the session keeps its previous summary). Analysis errors,
        cancellation and exceptions from `save` revert the session and
        propagate.
        """
        self.begin_analysis()
        reanalysis = self.is_reanalysis
        try:
            summary = analyze_areas(areas, classifier_factory, config=self.config, cancel=cancel)
            if cancel is not None and cancel.is_set():
                raise AnalysisCancelled(f"session {self.session_id}: analysis cancelled")
            self.begin_saving(summary)
            accepted = save(summary, reanalysis)
        except Exception:
            self.abort()
            raise

        if not accepted:
            log.warning("session %s: save rejected", self.session_id)
            self.abort()
            return None
        log.info(
            "session %s: %s saved (overall %s)",
            self.session_id,
            "re-analysis" if reanalysis else "analysis",
            summary.overall_risk.value,
        )
        return self.complete()
