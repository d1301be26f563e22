from __future__ import annotations

from typing import Any, Dict, List, NoReturn

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the telemetry service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def submit(self, payload: str) -> Dict[str, Any]:
        try:
            response = self._client.post("/temp", json={"data": payload})
            if response.status_code == 400:
                typer.secho(
                    f"Payload {payload!r} was rejected by the service.",
                    fg=typer.colors.RED,
                    err=True,
                )
                raise typer.Exit(code=1)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        return response.json()

    def list_errors(self) -> List[str]:
        try:
            response = self._client.get("/errors")
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        errors = response.json().get("errors")
        if not isinstance(errors, list):
            raise typer.BadParameter("Unexpected response payload when listing errors.")
        return errors

    def clear_errors(self) -> str:
        try:
            response = self._client.delete("/errors")
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        return response.json().get("message", "")

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> NoReturn:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("error") or data.get("detail")
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
