"""Terminal client for a remote code execution and AI review service."""

__version__ = "0.1.0"
