"""Configuration management using TOML + environment variables."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore[no-redef]

import tomli_w

CONFIG_DIR = Path.home() / ".coderun-terminal"
CONFIG_FILE = CONFIG_DIR / "config.toml"

DEFAULT_BASE_URL = "http://localhost:8000"


@dataclass
class ServiceConfig:
    base_url: str = DEFAULT_BASE_URL
    timeout: int = 30
    run_path: str = "/run"
    review_path: str = "/ai-review"


@dataclass
class SessionConfig:
    default_language: str = "cpp"
    copy_ack_seconds: float = 2.0
    discard_stale_results: bool = False


@dataclass
class LoggingConfig:
    level: str = "WARNING"
    file: str = "~/.coderun-terminal/session.log"


@dataclass
class AppConfig:
    service: ServiceConfig = field(default_factory=ServiceConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def ensure_config_dir() -> None:
    """Create config directory with secure permissions."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    os.chmod(CONFIG_DIR, 0o700)


def load_config() -> AppConfig:
    """Load configuration from TOML file with env var overrides."""
    config = AppConfig()

    if CONFIG_FILE.exists():
        with open(CONFIG_FILE, "rb") as f:
            data = tomllib.load(f)

        service = data.get("service", {})
        config.service.base_url = service.get("base_url", config.service.base_url)
        config.service.timeout = service.get("timeout", config.service.timeout)
        config.service.run_path = service.get("run_path", config.service.run_path)
        config.service.review_path = service.get("review_path", config.service.review_path)

        session = data.get("session", {})
        config.session.default_language = session.get("default_language", config.session.default_language)
        config.session.copy_ack_seconds = float(session.get("copy_ack_seconds", config.session.copy_ack_seconds))
        config.session.discard_stale_results = session.get(
            "discard_stale_results", config.session.discard_stale_results
        )

        logging_cfg = data.get("logging", {})
        config.logging.level = logging_cfg.get("level", config.logging.level)
        config.logging.file = logging_cfg.get("file", config.logging.file)

    # Environment variable overrides
    if env_url := os.environ.get("CODERUN_BASE_URL"):
        config.service.base_url = env_url
    if env_timeout := os.environ.get("CODERUN_TIMEOUT"):
        config.service.timeout = int(env_timeout)
    if env_language := os.environ.get("CODERUN_DEFAULT_LANGUAGE"):
        config.session.default_language = env_language
    if env_log_level := os.environ.get("CODERUN_LOG_LEVEL"):
        config.logging.level = env_log_level
    if env_log_file := os.environ.get("CODERUN_LOG_FILE"):
        config.logging.file = env_log_file

    return config


def save_config(config: AppConfig) -> None:
    """Save configuration to TOML file."""
    ensure_config_dir()

    data = {
        "service": {
            "base_url": config.service.base_url,
            "timeout": config.service.timeout,
            "run_path": config.service.run_path,
            "review_path": config.service.review_path,
        },
        "session": {
            "default_language": config.session.default_language,
            "copy_ack_seconds": config.session.copy_ack_seconds,
            "discard_stale_results": config.session.discard_stale_results,
        },
        "logging": {
            "level": config.logging.level,
            "file": config.logging.file,
        },
    }

    with open(CONFIG_FILE, "wb") as f:
        tomli_w.dump(data, f)

    os.chmod(CONFIG_FILE, 0o600)


# Global singleton
_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get or load the global config singleton."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Reset the global config (for testing)."""
    global _config
    _config = None
