"""Run orchestrator: submits source code to the execution service."""

from __future__ import annotations

import logging
import time
from typing import Callable

from coderun_terminal.errors import ServiceError, TransportError
from coderun_terminal.languages import get_language
from coderun_terminal.models import Failure, OutputResult, RunStatus, SessionState, Success
from coderun_terminal.services.api import ServiceClient, describe_error

logger = logging.getLogger(__name__)

RUN_FAILED_MESSAGE = "Compilation failed"


class RunOrchestrator:
    """Drive one execution request at a time and record its outcome."""

    def __init__(
        self,
        state: SessionState,
        client: ServiceClient,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.state = state
        self.client = client
        self._clock = clock
        self._sequence = 0

    def invalidate(self) -> None:
        """Mark any in-flight request as stale so its result is dropped."""
        self._sequence += 1

    async def submit(self, language: str, source_text: str, stdin_text: str) -> OutputResult | None:
        """Execute source remotely. Returns None if a run is already in flight."""
        get_language(language)
        if self.state.is_running:
            logger.debug("Run ignored: a run is already in flight")
            return None

        self._sequence += 1
        ticket = self._sequence
        self.state.run_status = RunStatus.RUNNING
        self.state.last_output = None
        self.state.last_execution_latency_ms = None

        latency_ms: int | None = None
        start = self._clock()
        try:
            data = await self.client.run(language, source_text, stdin_text)
            latency_ms = self._elapsed_ms(start)
            output = data.get("output")
            result: OutputResult = Success("" if output is None else str(output))
        except ServiceError as e:
            latency_ms = self._elapsed_ms(start)
            result = Failure(e.error or RUN_FAILED_MESSAGE)
        except TransportError as e:
            logger.warning("Run request failed: %s", e)
            result = Failure(describe_error(e))
        except Exception as e:
            logger.exception("Run orchestration error")
            result = Failure(describe_error(e))
        finally:
            self.state.run_status = RunStatus.IDLE

        if ticket != self._sequence:
            logger.info("Discarding stale run result (request %d, current %d)", ticket, self._sequence)
            return result

        self.state.last_output = result
        self.state.last_execution_latency_ms = latency_ms
        logger.info("Run finished: %s in %s ms", type(result).__name__.lower(), latency_ms)
        return result

    def _elapsed_ms(self, start: float) -> int:
        return max(0, int((self._clock() - start) * 1000))
