from __future__ import annotations

from typing import Any, Dict, Mapping, Sequence, Tuple

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client that behaves like a reporting station."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def send_reading(self, params: Sequence[Tuple[str, str]]) -> str:
        return self._get(self._config.path, params).text

    def preview_reading(self, params: Sequence[Tuple[str, str]]) -> Dict[str, Any]:
        return self._get("/preview", params).json()

    def health(self) -> Mapping[str, Any]:
        return self._get("/health").json()

    def _get(self, path: str, params: Sequence[Tuple[str, str]] = ()) -> httpx.Response:
        try:
            response = self._client.get(path, params=list(params))
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.TransportError as exc:
            typer.secho(f"Could not reach {self._config.base_url}: {exc}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1)
        return response

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
