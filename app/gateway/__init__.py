from app.config import settings
from app.errors import UpstreamError

# (upstream status, message substrings, kind, user-facing message); first match wins
ERROR_CLASSES: list[tuple[int, tuple[str, ...], str, str]] = [
    (401, ("Unauthorized", "401"), "auth", "Authentication failed. Please check your Fal AI API key."),
    (403, ("403",), "forbidden", "Access forbidden. Please check your API key permissions."),
    (429, ("429",), "rate_limited", "Rate limit exceeded. Please try again later."),
]


def ensure_api_key() -> str:
    api_key = settings.fal_key()
    if not api_key:
        raise UpstreamError("Unauthorized: fal.ai API key not found in FAL_KEY", upstream_status=401)
    return api_key


def classify_error(message: str, status: int | None = None) -> tuple[str, str]:
    """Map a raw upstream error to (kind, actionable message).

    A known HTTP status decides on its own; message substrings are only
    consulted for errors that carry no status.
    """
    for code, needles, kind, friendly in ERROR_CLASSES:
        if status is not None:
            if status == code:
                return kind, friendly
        elif any(needle in message for needle in needles):
            return kind, friendly
    return "generic", message or "Failed to generate content"


from app.gateway.service import GenerationResult, generate  # noqa: E402

__all__ = ["GenerationResult", "classify_error", "ensure_api_key", "generate"]
