"""Stateless session tokens (HS256 JWT) and the request-auth dependency."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from fastapi import Depends, Header

from app.config import settings
from app.errors import AuthError
from app.ledger import Account, Ledger, get_ledger
from app.util import extract_bearer_token

logger = logging.getLogger("novi.session")

DEFAULT_SECRET = "your-super-secret-key-change-in-production"
DEFAULT_EXPIRES_DAYS = 7


class SessionTokens:
    """Issues and verifies signed session tokens.

    Secret and lifetime are read from config on every call so that tests and
    embedding hosts can change them at runtime.
    """

    algorithm = "HS256"

    def __init__(self, secret: str | None = None, expires_days: int | None = None) -> None:
        self._secret = secret
        self._expires_days = expires_days

    @property
    def secret(self) -> str:
        return self._secret or settings.get("JWT_SECRET") or DEFAULT_SECRET

    @property
    def expires_days(self) -> int:
        if self._expires_days is not None:
            return self._expires_days
        return settings.get_int("JWT_EXPIRES_DAYS", DEFAULT_EXPIRES_DAYS)

    def issue(self, account_id: str, email: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "userId": account_id,
            "email": email,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(days=self.expires_days)).timestamp()),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> dict[str, Any]:
        """Decode *token* or raise AuthError."""
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise AuthError("Invalid or expired token. Please login again.")
        except jwt.InvalidTokenError as exc:
            logger.debug("Token rejected: %s", exc)
            raise AuthError("Invalid or expired token. Please login again.")
        if not payload.get("userId"):
            raise AuthError("Invalid or expired token. Please login again.")
        return payload

    def authenticate(self, authorization: str | None, ledger: Ledger) -> Account:
        """Resolve the header to a live account; deleted accounts fail."""
        token = extract_bearer_token(authorization)
        if not token:
            raise AuthError("Authentication required. Please provide a valid token.")
        payload = self.verify(token)
        account = ledger.get(payload["userId"])
        if account is None:
            raise AuthError("User not found. Please login again.")
        return account


# Module-level singleton
tokens = SessionTokens()


def get_tokens() -> SessionTokens:
    return tokens


async def current_account(
    authorization: str | None = Header(default=None),
    ledger: Ledger = Depends(get_ledger),
    session_tokens: SessionTokens = Depends(get_tokens),
) -> Account:
    return session_tokens.authenticate(authorization, ledger)
