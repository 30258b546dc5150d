"""Data models for coderun-terminal."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


@dataclass(frozen=True)
class Success:
    """A completed operation's payload (program output or review text)."""

    text: str = ""


@dataclass(frozen=True)
class Failure:
    """A failed operation's message, shown to the user as-is."""

    message: str


OutputResult = Union[Success, Failure]
ReviewResult = Union[Success, Failure]


def is_failure(result: OutputResult | ReviewResult | None) -> bool:
    """True iff the result is tagged as a failure.

    Only the variant is inspected. Program output that happens to start
    with "Error" is still a success.
    """
    return isinstance(result, Failure)


class RunStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


class ReviewStatus(str, Enum):
    IDLE = "idle"
    REVIEWING = "reviewing"


@dataclass
class SessionState:
    """Mutable editing and result state of one session."""

    language: str
    source_text: str
    stdin_text: str = ""
    run_status: RunStatus = RunStatus.IDLE
    review_status: ReviewStatus = ReviewStatus.IDLE
    last_output: OutputResult | None = None
    last_review: ReviewResult | None = None
    last_execution_latency_ms: int | None = None
    clipboard_acknowledged: bool = False

    @property
    def is_running(self) -> bool:
        return self.run_status is RunStatus.RUNNING

    @property
    def is_reviewing(self) -> bool:
        return self.review_status is ReviewStatus.REVIEWING
