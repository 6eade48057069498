import re
import secrets
import string
import time
from datetime import datetime, timezone

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email.strip()))


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def extract_bearer_token(header: str | None) -> str | None:
    """Accept both ``Bearer <token>`` and a bare token."""
    if not header:
        return None
    header = header.strip()
    scheme, _, rest = header.partition(" ")
    if scheme.lower() == "bearer":
        header = rest.strip()
    return header or None


def waitlist_entry_id() -> str:
    suffix = "".join(secrets.choice(string.ascii_lowercase + string.digits) for _ in range(9))
    return f"WL-{int(time.time() * 1000)}-{suffix}"


def prompt_preview(prompt: str, limit: int = 50) -> str:
    return prompt if len(prompt) <= limit else prompt[:limit] + "..."
