from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the weather station sink."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.request_timeout)

    def close(self) -> None:
        self._client.close()

    def push_reading(self, path: Path) -> Dict[str, Any]:
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise typer.BadParameter(f"Could not read a JSON reading from {path}: {exc}") from exc
        if not isinstance(payload, dict):
            raise typer.BadParameter(f"{path} must contain a JSON object.")

        try:
            response = self._client.post("/api/ingest", json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        data = response.json().get("data")
        if not isinstance(data, dict):
            raise typer.BadParameter("Unexpected response payload when pushing reading.")
        return data

    def get_latest(self) -> Dict[str, Any]:
        try:
            response = self._client.get("/api/latest")
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        return response.json()

    def watch(
        self,
        interval: float,
        timeout: float,
        on_reading: Callable[[Dict[str, Any]], None],
    ) -> int:
        """Poll for new readings until ``timeout`` and report each one once, oldest first."""
        deadline = time.monotonic() + timeout
        last_seen: Optional[Dict[str, Any]] = None
        seen = 0
        while time.monotonic() <= deadline:
            fresh = _unseen_readings(self.get_latest(), last_seen)
            for reading in fresh:
                seen += 1
                on_reading(reading)
            if fresh:
                last_seen = fresh[-1]
            time.sleep(interval)
        return seen

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("detail")
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


def _unseen_readings(
    payload: Dict[str, Any], last_seen: Optional[Dict[str, Any]]
) -> List[Dict[str, Any]]:
    """Readings newer than ``last_seen``, oldest first.

    The preview is newest first; everything ahead of the last reported entry is
    new. If that entry has already scrolled out of the preview, fall back to
    comparing timestamps.
    """
    latest = payload.get("latest")
    preview = list(payload.get("history_preview") or [])
    if not preview and latest:
        preview = [latest]
    if last_seen is None:
        return list(reversed(preview))
    if last_seen in preview:
        fresh = preview[: preview.index(last_seen)]
    else:
        last_timestamp = last_seen.get("timestamp") or 0
        fresh = [item for item in preview if (item.get("timestamp") or 0) >= last_timestamp]
    return list(reversed(fresh))
