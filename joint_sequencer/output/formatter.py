"""Unified output formatting for sequencing results and console reports"""

from typing import Dict, Any
import json
import os

from ..models import SequencingResult


class OutputFormatter:
    """Formats sequencing results into a JSON payload and console output"""

    # Output levels
    OUTPUT_LEVELS = {"minimal", "normal", "verbose"}
    DEFAULT_LEVEL = "normal"
    SAMPLE_MATCHES = 10

    @staticmethod
    def build_summary(stats: Dict[str, Any]) -> Dict[str, Any]:
        """Build summary layer from raw run stats

        Args:
            stats: Stats dict produced by JointLengthSequencer.run

        Returns:
            Structured summary with dataset, pivot and interval counts
        """
        return {
            "total_matches": stats.get("total_matches", 0),
            "datasets": {
                "base_joints": stats.get("base_joints", 0),
                "target_joints": stats.get("target_joints", 0),
            },
            "pivots": {
                "base": stats.get("base_pivots", 0),
                "target": stats.get("target_pivots", 0),
                "aligned": stats.get("aligned_pivots", 0),
            },
            "segments": {
                "intervals": stats.get("intervals", 0),
                "aligned_intervals": stats.get("intervals_aligned", 0),
                "matches": stats.get("segment_matches", 0),
            },
        }

    @staticmethod
    def build_performance(stats: Dict[str, Any]) -> Dict[str, Any]:
        """Build performance layer: timing, execution mode and match closeness"""
        diff = stats.get("length_difference", {})
        return {
            "total_time_seconds": stats.get("total_time_seconds", 0.0),
            "mode": stats.get("mode", "sequential"),
            "search": stats.get("search", "binary"),
            "length_difference": {
                "mean": diff.get("mean", 0.0),
                "max": diff.get("max", 0.0),
                "stdev": diff.get("stdev", 0.0),
            },
        }

    @staticmethod
    def build_payload(result: SequencingResult) -> Dict[str, Any]:
        """Complete JSON-serialisable payload for a sequencing result"""
        return {
            "summary": OutputFormatter.build_summary(result.stats),
            "performance": OutputFormatter.build_performance(result.stats),
            "parameters": {
                "tolerance": result.stats.get("tolerance"),
                "pivot_percentile": result.stats.get("pivot_percentile"),
                "pivot_required": result.stats.get("pivot_required"),
            },
            "matches": [m.to_dict() for m in result.matches],
        }

    @staticmethod
    def save(payload: Dict[str, Any], path: str) -> str:
        """Write payload as JSON, creating parent directories

        Returns:
            Absolute path of the written file
        """
        path = os.path.normpath(os.path.abspath(path))
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
        return path

    @staticmethod
    def format_console(payload: Dict[str, Any], level: str = "normal") -> str:
        """Format payload as console output

        Args:
            payload: Dict from build_payload
            level: Output level (minimal, normal, verbose)

        Returns:
            Formatted console output string
        """
        if level not in OutputFormatter.OUTPUT_LEVELS:
            level = OutputFormatter.DEFAULT_LEVEL

        if level == "minimal":
            return OutputFormatter._format_minimal(payload)
        elif level == "normal":
            return OutputFormatter._format_normal(payload)
        else:  # verbose
            return OutputFormatter._format_verbose(payload)

    @staticmethod
    def _format_minimal(payload: Dict[str, Any]) -> str:
        """Minimal console output - match count only"""
        total = payload.get("summary", {}).get("total_matches", 0)
        return f"[OK] Sequencing completed: {total} matches"

    @staticmethod
    def _format_normal(payload: Dict[str, Any]) -> str:
        """Normal console output - compact summary"""
        summary = payload.get("summary", {})
        datasets = summary.get("datasets", {})
        pivots = summary.get("pivots", {})
        segments = summary.get("segments", {})
        total = summary.get("total_matches", 0)

        if total == 0:
            return "[--] No matches - datasets empty or too few pivots aligned"

        base_count = datasets.get("base_joints", 0)
        coverage = (total / base_count * 100) if base_count > 0 else 0
        return "\n".join(
            [
                f"[OK] Sequencing completed: {total} matches "
                f"({pivots.get('aligned', 0)} pivot / {segments.get('matches', 0)} segment) "
                f"- {coverage:.1f}% of base joints",
            ]
        )

    @staticmethod
    def _format_verbose(payload: Dict[str, Any]) -> str:
        """Verbose console output - normal + detailed stats + sample matches"""
        lines = [OutputFormatter._format_normal(payload), ""]

        summary = payload.get("summary", {})
        datasets = summary.get("datasets", {})
        pivots = summary.get("pivots", {})
        segments = summary.get("segments", {})
        performance = payload.get("performance", {})
        diff = performance.get("length_difference", {})

        lines.extend(
            [
                "--- DETAILED STATS ---",
                f"  Joints: base {datasets.get('base_joints', 0)}, target {datasets.get('target_joints', 0)}",
                f"  Pivots: base {pivots.get('base', 0)}, target {pivots.get('target', 0)}, aligned {pivots.get('aligned', 0)}",
                f"  Intervals: {segments.get('aligned_intervals', 0)}/{segments.get('intervals', 0)} aligned",
                f"  Length diff: mean={diff.get('mean', 0):.4f}, max={diff.get('max', 0):.4f}, stdev={diff.get('stdev', 0):.4f}",
                f"  Timing: total={performance.get('total_time_seconds', 0):.3f}s ({performance.get('mode', '')}, {performance.get('search', '')} search)",
                "",
            ]
        )

        matches = payload.get("matches", [])
        if matches:
            lines.append("MATCHES")
            for i, match in enumerate(matches[: OutputFormatter.SAMPLE_MATCHES], 1):
                lines.append(
                    f"  [{i}] base {match['baseIndex']} <-> target {match['targetIndex']}"
                )
            if len(matches) > OutputFormatter.SAMPLE_MATCHES:
                lines.append(
                    f"  ... {len(matches) - OutputFormatter.SAMPLE_MATCHES} more matches"
                )

        return "\n".join(lines)
