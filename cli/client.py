from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the bin tracker API."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def list_bins(self, status: Optional[str] = None) -> Dict[str, Any]:
        params = {"status": status} if status else None
        return self._request("GET", "/api/bins", params=params)

    def create_bin(self, latitude: float, longitude: float, status: str) -> Dict[str, Any]:
        payload = {"latitude": latitude, "longitude": longitude, "status": status}
        return self._request("POST", "/api/bins", json=payload)

    def update_status(self, bin_id: str, status: str) -> Dict[str, Any]:
        return self._request("PUT", f"/api/bins/{bin_id}", json={"status": status})

    def delete_bin(self, bin_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/api/bins/{bin_id}")

    def nearby(self, latitude: float, longitude: float, radius: Optional[float] = None) -> Dict[str, Any]:
        params: Dict[str, Any] = {"lat": latitude, "lng": longitude}
        if radius is not None:
            params["radius"] = radius
        return self._request("GET", "/api/bins/nearby", params=params)

    def stats(self) -> Dict[str, Any]:
        return self._request("GET", "/api/bins/stats")

    def seed(self, payloads: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        created: List[Dict[str, Any]] = []
        for payload in payloads:
            body = self._request("POST", "/api/bins", json=payload)
            created.append(body["data"])
        return created

    def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.RequestError as exc:
            typer.secho(
                f"Could not reach {self._config.base_url}: {exc}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(code=1) from exc
        return response.json()

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("error")
        except ValueError:
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
