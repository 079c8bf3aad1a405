"""
http.py — Remote Game Runtime Client
=====================================
Oyun oturumlarini yoneten ayri bir servise HTTP ile baglanir.

    POST {base_url}/start   {"gameId": ..., "typeFields": {...}}
    POST {base_url}/stop
    GET  {base_url}/status

Every endpoint answers with a RuntimeStatus body. The remote runtime reports
games that end on their own through ``POST /v1/runtime/events/stopped`` on
this service, so stop listeners registered here are never called directly;
the guard still catches missed notifications by polling ``get_status``.
"""

from __future__ import annotations

from typing import Any

import httpx

from game_console.runtime.protocol import GameRuntimeError, StopListener
from game_console.runtime.schema import RuntimeStatus

_TIMEOUT = httpx.Timeout(30.0, connect=5.0)


class HttpGameRuntime:
    def __init__(self, base_url: str, api_key: str = "", client: httpx.AsyncClient | None = None):
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._client = client or httpx.AsyncClient(timeout=_TIMEOUT)
        self._listeners: list[StopListener] = []

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    async def _call(self, operation: str, method: str, path: str, json: dict | None = None) -> RuntimeStatus:
        try:
            resp = await self._client.request(
                method, f"{self._base_url}{path}", json=json, headers=self._headers()
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise GameRuntimeError(operation, f"HTTP {e.response.status_code}: {e.response.text[:200]}") from e
        except httpx.HTTPError as e:
            raise GameRuntimeError(operation, str(e) or type(e).__name__) from e
        return RuntimeStatus.model_validate(resp.json())

    async def start(self, game_id: str, type_fields: dict[str, Any]) -> RuntimeStatus:
        return await self._call("start", "POST", "/start", {"gameId": game_id, "typeFields": type_fields})

    async def stop(self) -> RuntimeStatus:
        return await self._call("stop", "POST", "/stop")

    async def get_status(self) -> RuntimeStatus:
        return await self._call("status", "GET", "/status")

    def add_stop_listener(self, listener: StopListener) -> None:
        self._listeners.append(listener)

    async def aclose(self) -> None:
        await self._client.aclose()
