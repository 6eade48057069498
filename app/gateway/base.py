"""Base class for upstream provider clients."""

from abc import ABC
from dataclasses import dataclass, field
from typing import Any

import httpx

from app.config import settings
from app.errors import UpstreamError
from app.gateway import ensure_api_key

DEFAULT_GENERATION_TIMEOUT = 600.0


@dataclass
class UpstreamResponse:
    payload: Any
    request_id: str | None = None
    logs: list[str] = field(default_factory=list)


class UpstreamProvider(ABC):
    """Shared infrastructure for the fal.ai protocols."""

    provider_name: str = "fal.ai"
    default_timeout: float = 120.0

    def get_api_key(self) -> str:
        return ensure_api_key()

    def generation_timeout(self) -> float:
        return settings.get_float("GENERATION_TIMEOUT", DEFAULT_GENERATION_TIMEOUT)

    def make_client(self, timeout: float | None = None) -> httpx.AsyncClient:
        """Create an httpx async client with the provider's default timeout."""
        return httpx.AsyncClient(timeout=timeout or self.default_timeout)

    def auth_headers(self, api_key: str) -> dict[str, str]:
        return {"Authorization": f"Key {api_key}"}

    def raise_on_error(self, response: httpx.Response) -> None:
        """Raise UpstreamError if response indicates an error.

        The status code is kept in the message; error classification
        matches on it.
        """
        if response.status_code < 400:
            return
        try:
            payload = response.json()
        except ValueError:
            raise UpstreamError(
                f"{self.provider_name} returned an unexpected error ({response.status_code}).",
                upstream_status=response.status_code,
            )

        detail = None
        if isinstance(payload, dict):
            detail = payload.get("detail") or payload.get("error")
        if isinstance(detail, dict):
            detail = detail.get("message")
        elif isinstance(detail, list):
            detail = "; ".join(str(d.get("msg", d)) if isinstance(d, dict) else str(d) for d in detail)
        if detail:
            raise UpstreamError(
                f"{self.provider_name} error ({response.status_code}): {detail}",
                upstream_status=response.status_code,
            )
        raise UpstreamError(
            f"{self.provider_name} error ({response.status_code}). Please try again.",
            upstream_status=response.status_code,
        )

    @staticmethod
    def request_id_of(response: httpx.Response, payload: Any) -> str | None:
        if isinstance(payload, dict):
            for key in ("request_id", "requestId"):
                if payload.get(key):
                    return str(payload[key])
        header = response.headers.get("x-fal-request-id")
        return header if isinstance(header, str) else None
