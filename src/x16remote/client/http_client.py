"""Async HTTP client for the x16remote control plane."""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class RemoteKeyboardError(Exception):
    """Raised when the control plane cannot be reached or rejects a request."""


class RemoteKeyboard:
    """Submits typing and joystick input to a running control plane.

    Example usage::

        async with RemoteKeyboard("http://127.0.0.1:9090") as kb:
            await kb.send_text("LOAD\\"GAME\\",8,1`ENTER`", typing_rate_ms=40)
            print(await kb.status())
    """

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:9090",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def connect(self) -> None:
        """Create the HTTP client and verify the control plane is up."""
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        )
        try:
            resp = await self._client.get("/health")
            resp.raise_for_status()
            logger.info("Connected to control plane at %s", self._base_url)
        except httpx.HTTPError as e:
            await self._client.aclose()
            self._client = None
            raise RemoteKeyboardError(f"Failed to connect to control plane: {e}") from e

    async def disconnect(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("Disconnected from control plane")

    async def send_text(
        self, text: str, typing_rate_ms: int | None = None, mode: str | None = None
    ) -> dict[str, Any]:
        """Queue text (with macros) for typing."""
        payload: dict[str, Any] = {"text": text}
        if typing_rate_ms is not None:
            payload["typing_rate_ms"] = typing_rate_ms
        if mode is not None:
            payload["mode"] = mode
        data = await self._request("POST", "/keyboard", payload)
        logger.debug("Sent text: %s", text[:50])
        return data

    async def send_joystick(
        self, commands: str, joystick: int = 1, typing_rate_ms: int | None = None
    ) -> dict[str, Any]:
        """Queue a joystick command script."""
        payload: dict[str, Any] = {"commands": commands, "joystick": joystick}
        if typing_rate_ms is not None:
            payload["typing_rate_ms"] = typing_rate_ms
        data = await self._request("POST", "/joystick", payload)
        logger.debug("Sent joystick commands: %s", commands[:50])
        return data

    async def status(self) -> dict[str, Any]:
        return await self._request("GET", "/status")

    async def flush(self) -> dict[str, Any]:
        return await self._request("POST", "/keyboard/flush")

    async def _request(
        self, method: str, path: str, payload: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        if self._client is None:
            raise RemoteKeyboardError("Not connected to control plane")
        try:
            resp = await self._client.request(method, path, json=payload)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPError as e:
            raise RemoteKeyboardError(f"HTTP request to {path} failed: {e}") from e

    async def __aenter__(self) -> RemoteKeyboard:
        await self.connect()
        return self

    async def __aexit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        await self.disconnect()
