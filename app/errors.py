"""Error taxonomy shared by the pipeline and the HTTP layer.

Every error carries the HTTP status it maps to and a message that is safe to
show to the user.  ``extra()`` adds structured fields to the JSON body.
"""


class GatewayError(Exception):
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def extra(self) -> dict:
        return {}


class ValidationError(GatewayError):
    status_code = 400


class AuthError(GatewayError):
    status_code = 401


class InsufficientCreditsError(GatewayError):
    status_code = 402

    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        super().__init__(f"Insufficient credits. Required: {required}, Available: {available}")

    def extra(self) -> dict:
        return {"required": self.required, "available": self.available}


class NotFoundError(GatewayError):
    status_code = 404


class AccountNotFoundError(NotFoundError):
    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__("User not found")


class UpstreamError(GatewayError):
    """Raised by provider clients; ``kind`` is filled in by classification."""

    status_code = 500

    def __init__(self, message: str, upstream_status: int | None = None, kind: str = "generic"):
        self.upstream_status = upstream_status
        self.kind = kind
        super().__init__(message)


class PersistenceError(GatewayError):
    status_code = 500


class ConfigurationError(GatewayError):
    """A setting is present but unusable."""

    status_code = 500
