"""Media jobs on the fal.ai queue: submit, poll status, fetch the result.

Image, video and speech models all run here.  A job is waited on until it
reaches a terminal state or the generation timeout passes; there is no
resume and no cancel, the caller resubmits.
"""

import asyncio
import logging
import time
from typing import Any

import httpx

from app.config import settings
from app.errors import UpstreamError
from app.gateway.base import UpstreamProvider, UpstreamResponse

logger = logging.getLogger("novi.gateway.media")

FAL_QUEUE_URL = "https://queue.fal.run"
DEFAULT_POLL_INTERVAL = 1.0

DONE = "COMPLETED"
FAILED_STATES = {"FAILED", "ERROR", "CANCELLED"}


def app_root(routing_id: str) -> str:
    """Queue status URLs live under ``owner/app``, without the sub-path."""
    return "/".join(routing_id.split("/")[:2])


class MediaJobProvider(UpstreamProvider):
    provider_name = "fal.ai"

    def queue_url(self) -> str:
        return (settings.get("FAL_QUEUE_URL") or FAL_QUEUE_URL).rstrip("/")

    def poll_interval(self) -> float:
        return settings.get_float("FAL_POLL_INTERVAL", DEFAULT_POLL_INTERVAL)

    async def run(self, routing_id: str, payload: dict[str, Any]) -> UpstreamResponse:
        api_key = self.get_api_key()
        headers = self.auth_headers(api_key)
        deadline = time.monotonic() + self.generation_timeout()

        async with self.make_client() as client:
            response = await client.post(
                f"{self.queue_url()}/{routing_id}",
                headers={**headers, "Content-Type": "application/json"},
                json=payload,
            )
            self.raise_on_error(response)
            ticket = response.json()
            request_id = ticket.get("request_id")
            if not request_id:
                logger.error("Submit to %s returned no request id: %r", routing_id, ticket)
                raise UpstreamError(f"{self.provider_name} accepted the job without a request id.")
            logger.info("Submitted %s job %s", routing_id, request_id)

            root = f"{self.queue_url()}/{app_root(routing_id)}/requests/{request_id}"
            status_url = ticket.get("status_url") or f"{root}/status"
            response_url = ticket.get("response_url") or root

            logs = await self._wait(client, status_url, headers, request_id, deadline)

            result = await client.get(response_url, headers=headers)
            self.raise_on_error(result)

        logger.info("Job %s completed", request_id)
        return UpstreamResponse(payload=result.json(), request_id=request_id, logs=logs)

    async def _wait(
        self,
        client: httpx.AsyncClient,
        status_url: str,
        headers: dict[str, str],
        request_id: str,
        deadline: float,
    ) -> list[str]:
        logs: list[str] = []
        last_status = ""
        while True:
            response = await client.get(status_url, headers=headers, params={"logs": 1})
            self.raise_on_error(response)
            body = response.json()
            status = body.get("status") or ""

            if status != last_status:
                logger.info("Job %s status: %s", request_id, status)
                last_status = status
            # logs are cumulative; only the new tail is reported
            for entry in (body.get("logs") or [])[len(logs):]:
                message = entry.get("message", "") if isinstance(entry, dict) else str(entry)
                logs.append(message)
                logger.debug("  [%s] %s", request_id, message)

            if status == DONE:
                if body.get("error"):
                    raise UpstreamError(f"{self.provider_name} job failed: {body['error']}")
                return logs
            if status in FAILED_STATES:
                logger.error("Job %s ended with status %s", request_id, status)
                raise UpstreamError(f"{self.provider_name} job {status.lower()}: {body.get('error') or 'no details'}")
            if time.monotonic() >= deadline:
                logger.error("Job %s still %s at the deadline", request_id, status or "pending")
                raise UpstreamError(f"{self.provider_name} job timed out before completing.")
            await asyncio.sleep(self.poll_interval())


# Module-level singleton
_provider = MediaJobProvider()


async def run(*a, **kw): return await _provider.run(*a, **kw)
