"""Review orchestrator: asks the AI review service for feedback on source code."""

from __future__ import annotations

import logging

from coderun_terminal.errors import ServiceError, TransportError
from coderun_terminal.models import Failure, ReviewResult, ReviewStatus, SessionState, Success
from coderun_terminal.services.api import ServiceClient, describe_error

logger = logging.getLogger(__name__)

REVIEW_FAILED_MESSAGE = "Review failed"


class ReviewOrchestrator:
    """Drive one review request at a time and record its outcome."""

    def __init__(self, state: SessionState, client: ServiceClient) -> None:
        self.state = state
        self.client = client
        self._sequence = 0

    def invalidate(self) -> None:
        self._sequence += 1

    async def submit(self, source_text: str) -> ReviewResult | None:
        """Request a review. Returns None if a review is already in flight."""
        if self.state.is_reviewing:
            logger.debug("Review ignored: a review is already in flight")
            return None

        self._sequence += 1
        ticket = self._sequence
        self.state.review_status = ReviewStatus.REVIEWING
        self.state.last_review = None

        try:
            data = await self.client.review(source_text)
            review = data.get("review")
            result: ReviewResult = Success("" if review is None else str(review))
        except ServiceError as e:
            result = Failure(e.error or REVIEW_FAILED_MESSAGE)
        except TransportError as e:
            logger.warning("Review request failed: %s", e)
            result = Failure(describe_error(e))
        except Exception as e:
            logger.exception("Review orchestration error")
            result = Failure(describe_error(e))
        finally:
            self.state.review_status = ReviewStatus.IDLE

        if ticket != self._sequence:
            logger.info("Discarding stale review result (request %d, current %d)", ticket, self._sequence)
            return result

        self.state.last_review = result
        return result
