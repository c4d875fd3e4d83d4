"""
Two-Stage Joint Length Sequencer

Aligns two datasets of joints by length:
- Stage 1 (coarse): normalize both datasets, select tolerance-separated pivots
  from each and align the pivot sets with the pairwise DP
- Stage 2 (fine): for every pair of consecutive aligned pivots, extract the
  joints strictly between them on both sides and align those segments

Interval alignments are independent and can run on a bounded worker pool.
Results are always merged by interval position, so the output is ordered by
base length no matter which interval finishes first.
"""

from concurrent.futures import (
    Executor,
    ThreadPoolExecutor,
    ProcessPoolExecutor,
    as_completed,
)
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple
import logging
import os
import threading
import time
import numpy as np

from .models import (
    Joint,
    JointMatchResult,
    NormalizedSequence,
    SequencingResult,
    AlignmentCancelledError,
    UnsupportedConfigurationError,
)
from .core.normalizer import normalize_dataset
from .core.search import get_search_strategy
from .core.pivots import select_pivots
from .core.aligner import align_pivots, align_segment
from .core.segments import extract_segment

IntervalTask = Tuple[int, NormalizedSequence, NormalizedSequence, float]


def _align_interval(task: IntervalTask) -> Tuple[int, List[JointMatchResult]]:
    """Align one interval; module-level so process pools can pickle it"""
    index, base_segment, target_segment, tolerance = task
    return index, align_segment(base_segment, target_segment, tolerance)


class JointLengthSequencer:
    """
    Pivot-anchored alignment of two joint datasets.

    Configuration parameters:
    - search: "binary" (default) or "linear" lookup for pivots and segments
    - parallel: run interval alignments on a worker pool
    - executor: "process" (default) or "thread" pool; the DP loop holds the
      GIL, so a thread pool gives no speedup on its own
    - max_workers: pool size cap (defaults to the CPU count)
    - min_parallel_intervals: fewer intervals than this run inline
    """

    # Algorithm defaults
    PIVOT_PERCENTILE = 0.1
    TOLERANCE = 1.5
    PIVOT_REQUIRED = 10
    LENGTH_COLUMN = "length"

    # Execution defaults
    SEARCH = "binary"
    PARALLEL = True
    EXECUTOR = "process"
    MIN_PARALLEL_INTERVALS = 2

    EXECUTORS = {"thread": ThreadPoolExecutor, "process": ProcessPoolExecutor}

    def __init__(self, pool: Optional[Executor] = None, **config):
        """Initialize sequencer

        Args:
            pool: Optional caller-owned executor; never shut down here
            **config: Execution configuration (see class docstring)

        Raises:
            UnsupportedConfigurationError: Unknown search strategy or executor
        """
        self.config = config
        self.logger = logging.getLogger(__name__)
        self.pool = pool

        self.search = get_search_strategy(config.get("search", self.SEARCH))
        self.parallel = bool(config.get("parallel", self.PARALLEL))
        self.executor = config.get("executor", self.EXECUTOR)
        if self.executor not in self.EXECUTORS:
            raise UnsupportedConfigurationError(
                f"Executor {self.executor!r} is not implemented "
                f"(available: {', '.join(sorted(self.EXECUTORS))})"
            )
        self.max_workers = config.get("max_workers") or os.cpu_count() or 1
        self.min_parallel_intervals = config.get(
            "min_parallel_intervals", self.MIN_PARALLEL_INTERVALS
        )

    def calculate_matches(
        self,
        base_data: Optional[Sequence[Mapping[str, Any]]],
        target_data: Optional[Sequence[Mapping[str, Any]]],
        pivot_percentile: float = PIVOT_PERCENTILE,
        tolerance: float = TOLERANCE,
        pivot_required: int = PIVOT_REQUIRED,
        base_length_col: str = LENGTH_COLUMN,
        target_length_col: str = LENGTH_COLUMN,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[JointMatchResult]:
        """Match joints of two datasets by length.

        Returns:
            Matches referencing original record positions, ordered by base
            length; empty when either dataset is empty or no pivots align
        """
        return self.run(
            base_data,
            target_data,
            pivot_percentile=pivot_percentile,
            tolerance=tolerance,
            pivot_required=pivot_required,
            base_length_col=base_length_col,
            target_length_col=target_length_col,
            cancel_event=cancel_event,
        ).matches

    def run(
        self,
        base_data: Optional[Sequence[Mapping[str, Any]]],
        target_data: Optional[Sequence[Mapping[str, Any]]],
        pivot_percentile: float = PIVOT_PERCENTILE,
        tolerance: float = TOLERANCE,
        pivot_required: int = PIVOT_REQUIRED,
        base_length_col: str = LENGTH_COLUMN,
        target_length_col: str = LENGTH_COLUMN,
        cancel_event: Optional[threading.Event] = None,
    ) -> SequencingResult:
        """Execute both stages and return matches with run statistics.

        Raises:
            MissingFieldError: A record lacks its length column
            InvalidValueError: A length value is not a finite number
            AlignmentCancelledError: ``cancel_event`` was set mid-run
        """
        start_time = time.time()
        stats: Dict[str, Any] = {
            "base_joints": len(base_data) if base_data else 0,
            "target_joints": len(target_data) if target_data else 0,
            "tolerance": tolerance,
            "pivot_percentile": pivot_percentile,
            "pivot_required": pivot_required,
            "search": self.search.name,
        }

        if not base_data or not target_data:
            self.logger.info("Empty dataset supplied; nothing to align")
            return self._finish([], stats, start_time)

        self.logger.info(
            f"Starting Joint Length Sequencing\n"
            f"Base: {stats['base_joints']} joints, Target: {stats['target_joints']} joints\n"
            f"Tolerance: {tolerance}, pivot percentile: {pivot_percentile}, "
            f"pivots required: {pivot_required}"
        )

        base_joints = normalize_dataset(base_data, base_length_col)
        target_joints = normalize_dataset(target_data, target_length_col)

        # Stage 1: pivots
        self.logger.info("=" * 70)
        self.logger.info("Stage 1: Pivot Alignment")
        self.logger.info("=" * 70)

        base_pivots = select_pivots(
            base_joints, pivot_percentile, pivot_required, tolerance, self.search
        )
        target_pivots = select_pivots(
            target_joints, pivot_percentile, pivot_required, tolerance, self.search
        )
        stats["base_pivots"] = len(base_pivots) if base_pivots is not None else 0
        stats["target_pivots"] = len(target_pivots) if target_pivots is not None else 0
        self.logger.info(
            f"Pivots: base={stats['base_pivots']}, target={stats['target_pivots']}"
        )

        if (
            base_pivots is None
            or target_pivots is None
            or len(base_pivots) < pivot_required
            or len(target_pivots) < pivot_required
        ):
            self.logger.warning("Pivot selection insufficient; returning no matches")
            return self._finish([], stats, start_time)

        pivot_pairs = align_pivots(base_pivots, target_pivots, tolerance)
        stats["aligned_pivots"] = len(pivot_pairs)
        self.logger.info(f"Aligned pivot pairs: {len(pivot_pairs)}")

        if not pivot_pairs:
            self.logger.warning("No pivot pairs aligned; returning no matches")
            return self._finish([], stats, start_time)

        # Stage 2: segments between consecutive aligned pivots
        self.logger.info("=" * 70)
        self.logger.info("Stage 2: Segment Alignment")
        self.logger.info("=" * 70)

        tasks = self._build_interval_tasks(
            base_joints, target_joints, pivot_pairs, tolerance
        )
        stats["intervals"] = max(len(pivot_pairs) - 1, 0)
        stats["intervals_aligned"] = len(tasks)
        self.logger.info(
            f"Intervals: {stats['intervals']} total, {len(tasks)} with joints on both sides"
        )

        if self.parallel and len(tasks) >= self.min_parallel_intervals:
            interval_matches = self._run_parallel(tasks, cancel_event)
            pool_kind = "caller" if self.pool is not None else self.executor
            stats["mode"] = f"parallel/{pool_kind}"
        else:
            interval_matches = self._run_sequential(tasks, cancel_event)
            stats["mode"] = "sequential"

        stats["segment_matches"] = sum(len(m) for m in interval_matches.values())
        matches = self._merge(pivot_pairs, interval_matches)
        stats["length_difference"] = self._difference_stats(
            matches, base_joints, target_joints
        )

        self.logger.info(
            f"✓ Sequencing complete: {len(pivot_pairs)} pivot matches + "
            f"{stats['segment_matches']} segment matches -> {len(matches)} total"
        )
        return self._finish(matches, stats, start_time)

    def _build_interval_tasks(
        self,
        base_joints: NormalizedSequence,
        target_joints: NormalizedSequence,
        pivot_pairs: List[Tuple[Joint, Joint]],
        tolerance: float,
    ) -> List[IntervalTask]:
        """Segments enclosed by each consecutive pair of aligned pivots"""
        tasks = []
        for k in range(len(pivot_pairs) - 1):
            (base_lo, target_lo), (base_hi, target_hi) = pivot_pairs[k], pivot_pairs[k + 1]
            base_segment = extract_segment(
                base_joints, base_lo.length, base_hi.length, self.search
            )
            target_segment = extract_segment(
                target_joints, target_lo.length, target_hi.length, self.search
            )
            if len(base_segment) == 0 or len(target_segment) == 0:
                continue
            tasks.append((k, base_segment, target_segment, tolerance))
        return tasks

    def _run_sequential(
        self,
        tasks: List[IntervalTask],
        cancel_event: Optional[threading.Event],
    ) -> Dict[int, List[JointMatchResult]]:
        results = {}
        for task in tasks:
            index, matches = _align_interval(task)
            results[index] = matches
            self.logger.debug(f"Interval {index}: {len(matches)} matches")
            self._check_cancelled(cancel_event, len(results), len(tasks))
        return results

    def _run_parallel(
        self,
        tasks: List[IntervalTask],
        cancel_event: Optional[threading.Event],
    ) -> Dict[int, List[JointMatchResult]]:
        """Align intervals on a pool; results keyed by interval index"""
        pool = self.pool
        owns_pool = pool is None
        if owns_pool:
            workers = max(1, min(self.max_workers, len(tasks)))
            self.logger.info(f"Aligning intervals on {workers} {self.executor} workers")
            pool = self.EXECUTORS[self.executor](max_workers=workers)

        results = {}
        futures = [pool.submit(_align_interval, task) for task in tasks]
        try:
            for future in as_completed(futures):
                index, matches = future.result()
                results[index] = matches
                self.logger.debug(f"Interval {index}: {len(matches)} matches")
                self._check_cancelled(cancel_event, len(results), len(tasks))
        finally:
            for future in futures:
                future.cancel()
            if owns_pool:
                pool.shutdown(wait=True)
        return results

    def _check_cancelled(
        self, cancel_event: Optional[threading.Event], done: int, total: int
    ):
        if cancel_event is not None and cancel_event.is_set():
            self.logger.warning(f"Sequencing cancelled after {done}/{total} intervals")
            raise AlignmentCancelledError(
                f"Sequencing cancelled after {done} of {total} intervals"
            )

    @staticmethod
    def _merge(
        pivot_pairs: List[Tuple[Joint, Joint]],
        interval_matches: Dict[int, List[JointMatchResult]],
    ) -> List[JointMatchResult]:
        """Interleave pivot matches with their following interval's matches.

        Output order is pivot 0, interval 0, pivot 1, interval 1, ... which is
        ascending in base length. Repeated (base, target) pairs are dropped.
        """
        merged: List[JointMatchResult] = []
        seen = set()

        def emit(match: JointMatchResult):
            key = (match.base_index, match.target_index)
            if key not in seen:
                seen.add(key)
                merged.append(match)

        for k, (base_pivot, target_pivot) in enumerate(pivot_pairs):
            emit(JointMatchResult(base_pivot.original_index, target_pivot.original_index))
            for match in interval_matches.get(k, []):
                emit(match)
        return merged

    @staticmethod
    def _difference_stats(
        matches: List[JointMatchResult],
        base_joints: NormalizedSequence,
        target_joints: NormalizedSequence,
    ) -> Dict[str, float]:
        """Summary of |base - target| length differences over all matches"""
        if not matches:
            return {"mean": 0.0, "max": 0.0, "stdev": 0.0}

        # Lengths indexed by original position
        base_by_index = np.empty(len(base_joints), dtype=np.float64)
        base_by_index[base_joints.original_indices] = base_joints.lengths
        target_by_index = np.empty(len(target_joints), dtype=np.float64)
        target_by_index[target_joints.original_indices] = target_joints.lengths

        base_idx = np.fromiter((m.base_index for m in matches), dtype=np.int64)
        target_idx = np.fromiter((m.target_index for m in matches), dtype=np.int64)
        diffs = np.abs(base_by_index[base_idx] - target_by_index[target_idx])
        return {
            "mean": round(float(diffs.mean()), 6),
            "max": round(float(diffs.max()), 6),
            "stdev": round(float(diffs.std()), 6),
        }

    def _finish(
        self,
        matches: List[JointMatchResult],
        stats: Dict[str, Any],
        start_time: float,
    ) -> SequencingResult:
        stats["total_matches"] = len(matches)
        stats["total_time_seconds"] = round(time.time() - start_time, 4)
        return SequencingResult(matches=matches, stats=stats)
