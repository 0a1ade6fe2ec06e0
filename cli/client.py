from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
import typer

from cli.config import CLIConfig
from models.records import ConnectionMode, Reading
from services.monitor import ReadingUnavailable, reading_from_payload


class ApiClient:
    """Minimal HTTP client for the monitor backend.

    Also serves as the live reading source for ``watch`` and ``chat``.
    """

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.request_timeout)

    def close(self) -> None:
        self._client.close()

    def post_reading(
        self,
        voltage: float,
        current: float,
        temperature: Optional[float] = None,
        connection_mode: Optional[ConnectionMode] = None,
    ) -> str:
        body: Dict[str, Any] = {"voltage": voltage, "current": current}
        if temperature is not None:
            body["temperature"] = temperature
        if connection_mode is not None:
            body["connection_mode"] = connection_mode.value
        try:
            response = self._client.post("/api/data", json=body)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.TransportError as exc:
            self._handle_transport_error(exc)
        return str(response.json().get("message", ""))

    def get_latest(self) -> Dict[str, Any]:
        try:
            response = self._client.get("/api/data/latest")
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.TransportError as exc:
            self._handle_transport_error(exc)
        return response.json()

    def fetch_latest_reading(self) -> Reading:
        try:
            response = self._client.get("/api/data/latest")
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise ReadingUnavailable(f"Could not fetch latest reading: {exc}") from exc
        if not isinstance(payload, dict):
            raise ReadingUnavailable("Latest reading payload is not an object.")
        return reading_from_payload(payload)

    def _handle_transport_error(self, exc: httpx.TransportError) -> None:
        typer.secho(
            f"Could not reach {self._config.base_url}: {exc}",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1)

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("detail") or data.get("message")
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
