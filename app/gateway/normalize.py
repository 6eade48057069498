"""Map raw upstream payloads onto one response shape per category.

Upstream wrapping differs between endpoints (top-level fields, a ``data``
wrapper, chat-style ``choices``), so each category lists the paths to try in
order.  The first populated path wins.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from app.catalog import IMAGE_CREATION, TEXT_GENERATION, VIDEO_CREATION, VOICE_SYNTHESIS

Path = tuple[str | int, ...]


def probe(payload: Any, path: Path) -> Any:
    """Follow *path* through nested dicts/lists; None if any step is missing."""
    current = payload
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, list) or len(current) <= step:
                return None
            current = current[step]
        else:
            if not isinstance(current, dict) or step not in current:
                return None
            current = current[step]
    return current


def as_ref(value: Any) -> dict[str, Any] | None:
    """A media reference is a dict carrying a ``url``; bare strings are wrapped."""
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, str) and value:
        return {"url": value}
    if isinstance(value, dict) and value.get("url"):
        return dict(value)
    return None


def as_refs(value: Any) -> list[dict[str, Any]] | None:
    items = value if isinstance(value, list) else [value]
    refs = [ref for ref in (as_ref(item) for item in items) if ref]
    return refs or None


def as_text(value: Any) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


@dataclass(frozen=True)
class ExtractionStrategy:
    key: str
    paths: list[Path]
    coerce: Callable[[Any], Any]

    def extract(self, payload: Any) -> dict[str, Any] | None:
        for path in self.paths:
            value = self.coerce(probe(payload, path))
            if value:
                return {self.key: value}
        return None


CATEGORY_STRATEGIES: dict[str, ExtractionStrategy] = {
    TEXT_GENERATION: ExtractionStrategy(
        "text",
        [("output",), ("data", "output"), ("text",), ("data", "text"), ("choices", 0, "message", "content")],
        as_text,
    ),
    IMAGE_CREATION: ExtractionStrategy(
        "images",
        [("images",), ("data", "images"), ("image",), ("data", "image")],
        as_refs,
    ),
    VIDEO_CREATION: ExtractionStrategy(
        "video",
        [("video",), ("data", "video"), ("data", "url")],
        as_ref,
    ),
    VOICE_SYNTHESIS: ExtractionStrategy(
        "audio",
        [("audio",), ("data", "audio"), ("result", "audio")],
        as_ref,
    ),
}


def normalize(category: str, payload: Any) -> Any:
    """Return the normalized payload, or None when nothing usable was found."""
    strategy = CATEGORY_STRATEGIES.get(category)
    if strategy is None:
        if isinstance(payload, dict) and "data" in payload:
            return payload["data"]
        return payload
    return strategy.extract(payload)
