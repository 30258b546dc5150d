"""HTTP client for the remote execution and review endpoints."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from coderun_terminal.config import AppConfig
from coderun_terminal.errors import ServiceError, TransportError

logger = logging.getLogger(__name__)


def describe_error(exc: BaseException) -> str:
    """Human-readable text for an exception, never empty."""
    text = str(exc).strip()
    return text or exc.__class__.__name__


class ServiceClient:
    """POST JSON payloads to the execution/review service.

    Every call is a single request/response exchange bounded by
    ``service.timeout``. Failures are raised as :class:`TransportError`
    (no usable response) or :class:`ServiceError` (non-2xx answer).
    """

    def __init__(self, config: AppConfig, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.config = config
        self._transport = transport

    async def run(self, language: str, code: str, stdin: str) -> dict[str, Any]:
        payload = {"language": language, "code": code, "input": stdin}
        return await self._post(self.config.service.run_path, payload)

    async def review(self, code: str) -> dict[str, Any]:
        return await self._post(self.config.service.review_path, {"code": code})

    async def ping(self) -> bool:
        """Check whether the service host answers at all."""
        try:
            async with self._client() as client:
                await client.get("/")
        except httpx.HTTPError:
            return False
        return True

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.config.service.base_url,
            timeout=float(self.config.service.timeout),
            transport=self._transport,
        )

    async def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            async with self._client() as client:
                resp = await client.post(path, json=payload)
        except httpx.TimeoutException as e:
            raise TransportError(f"Request timed out after {self.config.service.timeout}s") from e
        except httpx.HTTPError as e:
            raise TransportError(describe_error(e)) from e

        try:
            data = resp.json()
        except ValueError as e:
            raise TransportError(f"Malformed response body: {describe_error(e)}") from e
        if not isinstance(data, dict):
            raise TransportError(f"Malformed response body: expected a JSON object, got {type(data).__name__}")

        if not resp.is_success:
            error = data.get("error")
            raise ServiceError(resp.status_code, str(error) if error else None)

        logger.debug("POST %s -> %s", path, resp.status_code)
        return data
