"""Single entry point for running a generation against its upstream provider."""

import logging
from dataclasses import dataclass
from typing import Any

from app.catalog import COMPLETION_ROUTER, ModelDescriptor
from app.credits import estimate_cost
from app.gateway import classify_error, media, router
from app.gateway.normalize import normalize
from app.gateway.profiles import build_completion_input, profile_for
from app.util import prompt_preview

logger = logging.getLogger("novi.gateway")


@dataclass
class GenerationResult:
    success: bool
    data: Any = None
    cost: float = 0.0
    request_id: str | None = None
    error: str | None = None
    error_kind: str | None = None


async def generate(
    descriptor: ModelDescriptor,
    prompt: str,
    params: dict[str, Any] | None = None,
) -> GenerationResult:
    """Run one generation.  Never raises; failures come back as ``success=False``."""
    params = params or {}
    try:
        if descriptor.provider_kind == COMPLETION_ROUTER:
            logger.info("Generating text with %s: %r", descriptor.name, prompt_preview(prompt))
            upstream = await router.complete(
                descriptor.routing_id,
                build_completion_input(descriptor, prompt, params),
            )
            data = normalize(descriptor.category, upstream.payload)
        else:
            profile = profile_for(descriptor.routing_id)
            logger.info("Generating with %s (%s): %r", descriptor.name, descriptor.routing_id, prompt_preview(prompt))
            upstream = await media.run(descriptor.routing_id, profile.build_input(prompt, params))
            if profile.extract is not None:
                data = profile.extract(upstream.payload)
            else:
                data = normalize(descriptor.category, upstream.payload)
    except Exception as exc:
        kind, message = classify_error(str(exc), getattr(exc, "upstream_status", None))
        logger.error("Generation with %s failed (%s): %s", descriptor.name, kind, exc)
        return GenerationResult(success=False, error=message, error_kind=kind)

    if not data:
        logger.error("%s returned no usable payload: %r", descriptor.name, upstream.payload)
        return GenerationResult(
            success=False,
            request_id=upstream.request_id,
            error=f"{descriptor.name} returned no {descriptor.category.lower()} result.",
            error_kind="empty",
        )

    return GenerationResult(
        success=True,
        data=data,
        cost=estimate_cost(prompt, descriptor.price_per_unit),
        request_id=upstream.request_id,
    )
