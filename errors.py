"""Error kinds raised while provisioning a starter repository.

Every component raises one of these and lets it propagate unchanged; only the
web layer turns them into a user-facing message.
"""
from typing import Any, Optional


class ProvisioningError(Exception):
    """Base class; ``status_code`` is the HTTP status the web layer answers with."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidSelectionError(ProvisioningError):
    status_code = 400


class InvalidStateError(ProvisioningError):
    status_code = 400


class AuthError(ProvisioningError):
    status_code = 401


class ConflictError(ProvisioningError):
    status_code = 409


class RateLimitError(ProvisioningError):
    status_code = 429


class TokenExchangeError(ProvisioningError):
    status_code = 502


class NetworkError(ProvisioningError):
    status_code = 504


class ProviderError(ProvisioningError):
    """GitHub answered with a failure that is not otherwise classified."""

    status_code = 502

    def __init__(self, message: str, status: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.status = status
        self.body = body
