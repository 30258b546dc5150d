"""Formatting helpers for displaying results in the terminal."""

from __future__ import annotations

from coderun_terminal.models import OutputResult, ReviewResult, SessionState, is_failure


def format_duration(ms: int) -> str:
    """Format milliseconds to human-readable duration."""
    if ms < 1000:
        return f"{ms}ms"
    elif ms < 60000:
        return f"{ms / 1000:.1f}s"
    else:
        minutes = ms // 60000
        seconds = (ms % 60000) // 1000
        return f"{minutes}m {seconds}s"


def result_text(result: OutputResult | ReviewResult | None) -> str:
    if result is None:
        return ""
    if is_failure(result):
        return result.message  # type: ignore[union-attr]
    return result.text  # type: ignore[union-attr]


def result_style(result: OutputResult | ReviewResult | None) -> str:
    """Rich style for a result panel."""
    if result is None:
        return "dim"
    return "red" if is_failure(result) else "green"


def format_review(result: ReviewResult | None) -> str:
    """Format an AI review result."""
    if result is None:
        return "(no review yet)"
    if is_failure(result):
        return f"Error in AI review: {result_text(result)}"
    return result_text(result) or "(empty review)"


def format_status(state: SessionState) -> str:
    """One-line summary of the session's busy flags and indicators."""
    parts = [
        f"language={state.language}",
        f"run={state.run_status.value}",
        f"review={state.review_status.value}",
    ]
    if state.last_execution_latency_ms is not None:
        parts.append(f"last_run={format_duration(state.last_execution_latency_ms)}")
    if state.clipboard_acknowledged:
        parts.append("copied")
    return " | ".join(parts)
