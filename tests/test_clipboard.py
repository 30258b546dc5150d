"""Tests for the system clipboard provider."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from coderun_terminal.services.clipboard import SystemClipboard, find_copy_command


class TestFindCopyCommand:
    def test_none_available(self):
        with patch("coderun_terminal.services.clipboard.shutil.which", return_value=None):
            assert find_copy_command() is None

    def test_first_available_wins(self):
        def which(name):
            return "/usr/bin/xclip" if name == "xclip" else None

        with patch("coderun_terminal.services.clipboard.sys.platform", "linux"):
            with patch("coderun_terminal.services.clipboard.shutil.which", side_effect=which):
                assert find_copy_command() == ["xclip", "-selection", "clipboard"]


class TestSystemClipboard:
    @pytest.mark.asyncio
    async def test_no_command(self):
        with patch("coderun_terminal.services.clipboard.find_copy_command", return_value=None):
            assert await SystemClipboard().copy("x") is False

    @pytest.mark.asyncio
    async def test_copy_success(self):
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(return_value=(b"", b""))
        mock_proc.returncode = 0

        with patch("coderun_terminal.services.clipboard.find_copy_command", return_value=["pbcopy"]):
            with patch(
                "coderun_terminal.services.clipboard.asyncio.create_subprocess_exec", return_value=mock_proc
            ) as create:
                assert await SystemClipboard().copy("héllo") is True
        create.assert_called_once()
        assert create.call_args.args == ("pbcopy",)
        mock_proc.communicate.assert_awaited_once_with("héllo".encode("utf-8"))

    @pytest.mark.asyncio
    async def test_nonzero_exit(self):
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(return_value=(b"", b""))
        mock_proc.returncode = 1

        with patch("coderun_terminal.services.clipboard.find_copy_command", return_value=["xsel"]):
            with patch("coderun_terminal.services.clipboard.asyncio.create_subprocess_exec", return_value=mock_proc):
                assert await SystemClipboard().copy("x") is False

    @pytest.mark.asyncio
    async def test_os_error(self):
        with patch("coderun_terminal.services.clipboard.find_copy_command", return_value=["wl-copy"]):
            with patch(
                "coderun_terminal.services.clipboard.asyncio.create_subprocess_exec",
                side_effect=OSError("not executable"),
            ):
                assert await SystemClipboard().copy("x") is False

    @pytest.mark.asyncio
    async def test_timeout(self):
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(side_effect=[asyncio.TimeoutError, (b"", b"")])
        mock_proc.kill = MagicMock()

        with patch("coderun_terminal.services.clipboard.find_copy_command", return_value=["xclip"]):
            with patch("coderun_terminal.services.clipboard.asyncio.create_subprocess_exec", return_value=mock_proc):
                assert await SystemClipboard(timeout=0.1).copy("x") is False
        mock_proc.kill.assert_called_once()

    @pytest.mark.asyncio
    async def test_timeout_after_process_exited(self):
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(side_effect=[asyncio.TimeoutError, (b"", b"")])
        mock_proc.kill = MagicMock(side_effect=ProcessLookupError)

        with patch("coderun_terminal.services.clipboard.find_copy_command", return_value=["xclip"]):
            with patch("coderun_terminal.services.clipboard.asyncio.create_subprocess_exec", return_value=mock_proc):
                assert await SystemClipboard(timeout=0.1).copy("x") is False
        assert mock_proc.communicate.await_count == 2
