"""Clipboard provider backed by the platform's copy command."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import shutil
import sys
from typing import Protocol

logger = logging.getLogger(__name__)

# Tried in order; the first one found on PATH wins
_COPY_COMMANDS: list[list[str]] = [
    ["pbcopy"],
    ["wl-copy"],
    ["xclip", "-selection", "clipboard"],
    ["xsel", "--clipboard", "--input"],
    ["clip"],
]


class ClipboardProvider(Protocol):
    async def copy(self, text: str) -> bool: ...


def find_copy_command() -> list[str] | None:
    """Return the first available copy command, or None."""
    candidates = _COPY_COMMANDS
    if sys.platform == "win32":
        candidates = [["clip"]]
    for cmd in candidates:
        if shutil.which(cmd[0]):
            return cmd
    return None


class SystemClipboard:
    """Copy text by piping it into pbcopy / wl-copy / xclip / xsel / clip."""

    def __init__(self, timeout: float = 5.0) -> None:
        self.timeout = timeout

    async def copy(self, text: str) -> bool:
        cmd = find_copy_command()
        if cmd is None:
            logger.warning("No clipboard command found on PATH")
            return False

        proc: asyncio.subprocess.Process | None = None
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
            await asyncio.wait_for(proc.communicate(text.encode("utf-8")), timeout=self.timeout)
        except asyncio.TimeoutError:
            if proc is not None:
                with contextlib.suppress(ProcessLookupError):
                    proc.kill()
                await proc.communicate()
            logger.warning("Clipboard command %s timed out", cmd[0])
            return False
        except OSError as e:
            logger.warning("Clipboard command %s failed: %s", cmd[0], e)
            return False

        if proc.returncode:
            logger.warning("Clipboard command %s exited with %s", cmd[0], proc.returncode)
            return False
        return True
