"""HTTP client for the Google Directions web service."""

from __future__ import annotations

import logging
from typing import Sequence

import httpx

from ...config import settings

logger = logging.getLogger(__name__)


def _format_point(point: tuple[float, float]) -> str:
    lat, lon = point
    return f"{lat},{lon}"


class DirectionsClient:
    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        language: str | None = None,
        mode: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_key = api_key or settings.google_maps_api_key
        if not self.api_key:
            raise ValueError("Google Maps API key is not configured.")
        self.base_url = (base_url or settings.directions_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.directions_timeout_seconds
        self.language = language or settings.directions_language
        self.mode = mode or settings.travel_mode
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(timeout=httpx.Timeout(self.timeout, connect=5.0), transport=self._transport)

    def directions(
        self,
        origin: tuple[float, float],
        destination: tuple[float, float],
        waypoints: Sequence[tuple[float, float]] | None = None,
        optimize: bool = False,
    ) -> dict:
        """Request one route and return the first entry of ``routes``.

        Points are (lat, lon) tuples. When ``optimize`` is set the service is
        free to reorder ``waypoints``; the chosen order comes back as
        ``waypoint_order`` on the returned route.

        Raises:
            ValueError: The service answered with a status other than ``OK``
                or without any route.
            ConnectionError: The service could not be reached.
        """
        params = {
            "origin": _format_point(origin),
            "destination": _format_point(destination),
            "mode": self.mode,
            "language": self.language,
            "key": self.api_key,
        }
        if waypoints:
            prefix = ["optimize:true"] if optimize else []
            params["waypoints"] = "|".join(prefix + [_format_point(point) for point in waypoints])

        url = f"{self.base_url}/directions/json"
        client = self._get_client()
        try:
            try:
                response = client.get(url, params=params)
                response.raise_for_status()
                data = response.json()
            except (httpx.TimeoutException, httpx.ConnectError, httpx.NetworkError) as e:
                # httpx messages carry the full URL, key included
                raise ConnectionError(
                    f"Failed to reach the directions service at {self.base_url}: {type(e).__name__}"
                ) from e
            except httpx.HTTPStatusError as e:
                raise ValueError(f"Directions request failed with HTTP {e.response.status_code}") from e

            status = data.get("status")
            if status != "OK" or not data.get("routes"):
                message = data.get("error_message") or "no route returned"
                raise ValueError(f"Directions request failed: {status} ({message})")
            return data["routes"][0]
        finally:
            client.close()


def check_health(api_key: str | None = None) -> bool:
    """Probe the directions service with a short fixed route."""
    key = api_key or settings.google_maps_api_key
    if not key:
        return False
    try:
        client = DirectionsClient(api_key=key, timeout=5.0)
        # Two points in Brasília's Plano Piloto
        client.directions((-15.7939, -47.8828), (-15.7801, -47.9292))
        return True
    except (ValueError, ConnectionError) as e:
        logger.warning(f"Directions health check failed: {e}")
        return False
