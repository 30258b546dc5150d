"""System utility checks."""

from __future__ import annotations

import asyncio

from coderun_terminal.config import AppConfig
from coderun_terminal.services.api import ServiceClient
from coderun_terminal.services.clipboard import find_copy_command


def check_service(config: AppConfig) -> tuple[bool, str]:
    """Check whether the configured service host is reachable."""
    url = config.service.base_url
    try:
        reachable = asyncio.run(ServiceClient(config).ping())
    except Exception as e:
        return False, f"Error contacting {url}: {e}"
    if not reachable:
        return False, f"Service not reachable at {url}"
    return True, url


def check_clipboard() -> tuple[bool, str]:
    """Check whether a clipboard copy command is available."""
    cmd = find_copy_command()
    if cmd is None:
        return False, "No clipboard command found (install xclip, xsel or wl-clipboard)"
    return True, cmd[0]
