"""Session controller: owns editing state and drives run/review/copy actions."""

from __future__ import annotations

import asyncio
import logging

from coderun_terminal.config import AppConfig
from coderun_terminal.languages import get_language, get_template
from coderun_terminal.models import OutputResult, ReviewResult, SessionState
from coderun_terminal.services.api import ServiceClient
from coderun_terminal.services.clipboard import ClipboardProvider, SystemClipboard
from coderun_terminal.services.reviewer import ReviewOrchestrator
from coderun_terminal.services.runner import RunOrchestrator

logger = logging.getLogger(__name__)


class CodeSession:
    """One user's editing session.

    The run and review orchestrators share this session's state and may be
    in flight at the same time. Each ignores a second submission while its
    own request is outstanding.
    """

    def __init__(
        self,
        config: AppConfig,
        client: ServiceClient | None = None,
        clipboard: ClipboardProvider | None = None,
        language: str | None = None,
    ) -> None:
        self.config = config
        language = language or config.session.default_language
        self.state = SessionState(language=get_language(language).id, source_text=get_template(language))
        self.client = client or ServiceClient(config)
        self.clipboard = clipboard or SystemClipboard()
        self.runner = RunOrchestrator(self.state, self.client)
        self.reviewer = ReviewOrchestrator(self.state, self.client)
        self._ack_handle: asyncio.TimerHandle | None = None

    async def __aenter__(self) -> CodeSession:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

    # --- Editing ---

    def switch_language(self, language: str) -> None:
        """Switch language and reseed the source from its template.

        In-flight requests are not interrupted.
        """
        template = get_template(language)
        self.state.language = language
        self.state.source_text = template
        self.state.last_output = None
        self.state.last_review = None
        self.state.last_execution_latency_ms = None
        if self.config.session.discard_stale_results:
            self.runner.invalidate()
            self.reviewer.invalidate()
        logger.info("Switched language to %s", language)

    def set_source(self, text: str) -> None:
        self.state.source_text = text

    def set_stdin(self, text: str) -> None:
        self.state.stdin_text = text

    # --- Remote operations ---

    async def submit_run(self) -> OutputResult | None:
        """Run the current source with the current stdin."""
        return await self.runner.submit(self.state.language, self.state.source_text, self.state.stdin_text)

    async def submit_review(self) -> ReviewResult | None:
        """Ask for an AI review of the current source."""
        return await self.reviewer.submit(self.state.source_text)

    # --- Clipboard ---

    async def copy_source(self) -> bool:
        """Copy the current source; sets the copied flag for a short window."""
        try:
            copied = await self.clipboard.copy(self.state.source_text)
        except Exception as e:
            logger.warning("Clipboard copy failed: %s", e)
            copied = False
        if not copied:
            return False

        self._cancel_ack_clear()
        self.state.clipboard_acknowledged = True
        loop = asyncio.get_running_loop()
        self._ack_handle = loop.call_later(self.config.session.copy_ack_seconds, self._clear_ack)
        return True

    def _clear_ack(self) -> None:
        self.state.clipboard_acknowledged = False
        self._ack_handle = None

    def _cancel_ack_clear(self) -> None:
        if self._ack_handle is not None:
            self._ack_handle.cancel()
            self._ack_handle = None

    def close(self) -> None:
        """End the session, dropping any pending acknowledgement timer."""
        self._cancel_ack_clear()
        self.state.clipboard_acknowledged = False
