"""Global configuration singleton for the Novi gateway.

Reads keys from environment variables by default.  Tests or an embedding
host can populate the singleton *before* the first request so that values
don't have to live in the process environment.

    from app.config import settings
    settings.FAL_KEY = "key-..."
"""

import json
import os
from typing import Any, Optional

from app.errors import ConfigurationError


class Settings:
    """Lightweight mutable config, one global instance."""

    FAL_KEY: Optional[str] = None
    JWT_SECRET: Optional[str] = None
    JWT_EXPIRES_DAYS: Optional[int] = None
    INITIAL_CREDITS: Optional[int] = None
    DATA_DIR: Optional[str] = None
    STORAGE_BACKEND: Optional[str] = None
    CREDIT_COSTS: Optional[dict] = None
    DEFAULT_CREDIT_COST: Optional[int] = None
    FAL_RUN_URL: Optional[str] = None
    FAL_QUEUE_URL: Optional[str] = None
    FAL_POLL_INTERVAL: Optional[float] = None
    GENERATION_TIMEOUT: Optional[float] = None
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: Optional[int] = None
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_SECURE: Optional[bool] = None
    MAIL_FROM: Optional[str] = None
    CORS_ORIGINS: Optional[str] = None

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Return the attribute value if set, otherwise fall back to env."""
        value = getattr(self, name, None)
        if value is not None:
            return value if isinstance(value, str) else str(value)
        return os.getenv(name, default)

    def get_int(self, name: str, default: int) -> int:
        value = self.get(name)
        return int(value) if value else default

    def get_float(self, name: str, default: float) -> float:
        value = self.get(name)
        return float(value) if value else default

    def get_bool(self, name: str, default: bool = False) -> bool:
        value = self.get(name)
        if value is None or value == "":
            return default
        return value.strip().lower() in ("1", "true", "yes", "on")

    def get_json(self, name: str) -> Any:
        """Return a dict/list setting; env values are parsed as JSON."""
        value = getattr(self, name, None)
        if value is not None:
            return value
        raw = os.getenv(name)
        if not raw:
            return None
        try:
            return json.loads(raw)
        except ValueError as exc:
            raise ConfigurationError(f"Setting {name} is not valid JSON") from exc

    def fal_key(self) -> Optional[str]:
        # fal's own client reads FAL_KEY; older deployments used FAL_API_KEY
        return self.get("FAL_KEY") or self.get("FAL_API_KEY")

    def reset(self) -> None:
        """Clear every override set on the instance."""
        for name in list(vars(self)):
            delattr(self, name)


settings = Settings()
