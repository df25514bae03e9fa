"""
Aggregated pipeline metrics.
"""

from __future__ import annotations

import threading
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Dict

from ..document.enums import DocumentState
from ..document.primitives import utc_now


class PipelineMetrics:
    """Counters and timings across pipeline runs.

    Safe to share between runs on different threads.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.started_at: datetime = utc_now()
        self._reset_counters()

    def _reset_counters(self) -> None:
        self.pipelines_started = 0
        self.pipelines_completed = 0
        self.pipelines_failed = 0
        self.revision_cycles = 0
        self.approvals_requested = 0
        self.approvals_granted = 0
        self.approvals_rejected = 0

        self.total_processing_seconds = 0.0
        self._min_processing_seconds = None
        self.max_processing_seconds = 0.0

        self._failures_by_state: Dict[DocumentState, int] = defaultdict(int)
        self._stage_seconds: Dict[str, float] = defaultdict(float)
        self._stage_invocations: Dict[str, int] = defaultdict(int)

    # Recording

    def record_pipeline_started(self) -> None:
        with self._lock:
            self.pipelines_started += 1

    def record_pipeline_completed(self, elapsed: timedelta) -> None:
        seconds = elapsed.total_seconds()
        with self._lock:
            self.pipelines_completed += 1
            self.total_processing_seconds += seconds
            if self._min_processing_seconds is None or seconds < self._min_processing_seconds:
                self._min_processing_seconds = seconds
            self.max_processing_seconds = max(self.max_processing_seconds, seconds)

    def record_pipeline_failed(self, failed_at: DocumentState) -> None:
        with self._lock:
            self.pipelines_failed += 1
            self._failures_by_state[failed_at] += 1

    def record_revision_cycle(self) -> None:
        with self._lock:
            self.revision_cycles += 1

    def record_approval_requested(self) -> None:
        with self._lock:
            self.approvals_requested += 1

    def record_approval_granted(self) -> None:
        with self._lock:
            self.approvals_granted += 1

    def record_approval_rejected(self) -> None:
        with self._lock:
            self.approvals_rejected += 1

    def record_stage_processing(self, stage: str, elapsed: timedelta) -> None:
        with self._lock:
            self._stage_seconds[stage] += elapsed.total_seconds()
            self._stage_invocations[stage] += 1

    # Derived values

    @property
    def min_processing_seconds(self) -> float:
        return self._min_processing_seconds or 0.0

    @property
    def average_processing_seconds(self) -> float:
        if self.pipelines_completed == 0:
            return 0.0
        return self.total_processing_seconds / self.pipelines_completed

    @property
    def success_rate(self) -> float:
        """Completed runs as a fraction of started runs."""
        if self.pipelines_started == 0:
            return 0.0
        return self.pipelines_completed / self.pipelines_started

    @property
    def failures_by_state(self) -> Dict[DocumentState, int]:
        with self._lock:
            return dict(self._failures_by_state)

    def stage_invocations(self, stage: str) -> int:
        return self._stage_invocations.get(stage, 0)

    def stage_total_seconds(self, stage: str) -> float:
        return self._stage_seconds.get(stage, 0.0)

    def stage_average_seconds(self, stage: str) -> float:
        count = self.stage_invocations(stage)
        if count == 0:
            return 0.0
        return self.stage_total_seconds(stage) / count

    @property
    def uptime(self) -> timedelta:
        return utc_now() - self.started_at

    def generate_report(self) -> str:
        """Plain-text summary of all metrics."""
        lines = [
            "=== Pipeline Metrics Report ===",
            "",
            "Pipeline Statistics:",
            f"  Total Started: {self.pipelines_started}",
            f"  Total Completed: {self.pipelines_completed}",
            f"  Total Failed: {self.pipelines_failed}",
            f"  Success Rate: {self.success_rate * 100:.1f}%",
            f"  Total Revisions: {self.revision_cycles}",
            "",
            "Processing Time:",
            f"  Total: {self.total_processing_seconds:.3f}s",
            f"  Average: {self.average_processing_seconds:.3f}s",
            f"  Min: {self.min_processing_seconds:.3f}s",
            f"  Max: {self.max_processing_seconds:.3f}s",
            "",
            "Approval Statistics:",
            f"  Requested: {self.approvals_requested}",
            f"  Granted: {self.approvals_granted}",
            f"  Rejected: {self.approvals_rejected}",
            "",
        ]

        failures = self.failures_by_state
        if failures:
            lines.append("Failures by State:")
            for state, count in failures.items():
                lines.append(f"  {state.name}: {count}")
            lines.append("")

        lines.append("Stage Performance:")
        for stage in sorted(self._stage_invocations):
            lines.append(
                f"  {stage}: {self.stage_invocations(stage)} invocations, "
                f"avg {self.stage_average_seconds(stage):.3f}s"
            )
        lines.append("")

        total = int(self.uptime.total_seconds())
        hours, remainder = divmod(total, 3600)
        minutes, seconds = divmod(remainder, 60)
        lines.append(f"Uptime: {hours:02d}:{minutes:02d}:{seconds:02d}")
        return "\n".join(lines) + "\n"

    def reset(self) -> None:
        with self._lock:
            self._reset_counters()
