"""Completion router: one synchronous endpoint fronting many chat models."""

import logging
from typing import Any

from app.config import settings
from app.gateway.base import UpstreamProvider, UpstreamResponse

logger = logging.getLogger("novi.gateway.router")

FAL_RUN_URL = "https://fal.run"


class CompletionRouterProvider(UpstreamProvider):
    provider_name = "fal.ai router"

    def endpoint(self, routing_id: str) -> str:
        base = (settings.get("FAL_RUN_URL") or FAL_RUN_URL).rstrip("/")
        return f"{base}/{routing_id}"

    async def complete(self, routing_id: str, payload: dict[str, Any]) -> UpstreamResponse:
        api_key = self.get_api_key()
        logger.info("Completion via %s (model %s)", routing_id, payload.get("model"))

        async with self.make_client(timeout=self.generation_timeout()) as client:
            response = await client.post(
                self.endpoint(routing_id),
                headers={
                    **self.auth_headers(api_key),
                    "Content-Type": "application/json",
                },
                json=payload,
            )

        self.raise_on_error(response)
        body = response.json()
        logger.info("Completion finished for %s", routing_id)
        return UpstreamResponse(payload=body, request_id=self.request_id_of(response, body))


# Module-level singleton
_provider = CompletionRouterProvider()


async def complete(*a, **kw): return await _provider.complete(*a, **kw)
