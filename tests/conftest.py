"""Shared test fixtures."""

from __future__ import annotations

import httpx
import pytest

from coderun_terminal.config import AppConfig, LoggingConfig, ServiceConfig, SessionConfig
from coderun_terminal.services.api import ServiceClient


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep tests away from the real ~/.coderun-terminal directory."""
    import coderun_terminal.cli as cli_module
    import coderun_terminal.config as cfg_module

    config_dir = tmp_path / "config"
    monkeypatch.setattr(cfg_module, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(cfg_module, "CONFIG_FILE", config_dir / "config.toml")
    monkeypatch.setattr(cli_module, "CONFIG_FILE", config_dir / "config.toml")
    for var in ("CODERUN_BASE_URL", "CODERUN_TIMEOUT", "CODERUN_DEFAULT_LANGUAGE", "CODERUN_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("CODERUN_LOG_FILE", str(tmp_path / "session.log"))
    cfg_module.reset_config()
    yield
    cfg_module.reset_config()


@pytest.fixture
def app_config(tmp_path):
    """Create a test configuration."""
    return AppConfig(
        service=ServiceConfig(base_url="http://testserver", timeout=5),
        session=SessionConfig(default_language="cpp", copy_ack_seconds=2.0),
        logging=LoggingConfig(level="DEBUG", file=str(tmp_path / "test.log")),
    )


@pytest.fixture
def make_client(app_config):
    """Build a ServiceClient whose requests are answered by ``handler``."""

    def _make(handler, config: AppConfig | None = None) -> ServiceClient:
        return ServiceClient(config or app_config, transport=httpx.MockTransport(handler))

    return _make
