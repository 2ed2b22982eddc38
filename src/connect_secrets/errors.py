"""
Error taxonomy for secret resolution.

Every failure the pipeline can raise derives from ConnectSecretsError so the
entry point can report it without knowing the concrete type.
"""

from typing import Optional


class ConnectSecretsError(Exception):
    """Base class for all connect-secrets errors."""
    pass


class ConfigurationError(ConnectSecretsError):
    """Raised when action inputs are missing or invalid."""
    pass


class MalformedRequestError(ConnectSecretsError):
    """Raised when a secret-path line cannot be parsed."""

    def __init__(self, line: str, reason: str, line_number: Optional[int] = None):
        self.line = line
        self.reason = reason
        self.line_number = line_number
        where = f"line {line_number}" if line_number is not None else "line"
        super().__init__(f"Malformed secret request on {where} '{line}': {reason}")


class VaultNotFoundError(ConnectSecretsError):
    """Raised when no vault matches the requested name."""

    def __init__(self, vault: str):
        self.vault = vault
        super().__init__(f"🛑 No vault matched name '{vault}'")


class SecretNotFoundError(ConnectSecretsError):
    """Raised when an item yields no value for the requested field."""

    def __init__(self, item: str, field: str):
        self.item = item
        self.field = field
        super().__init__(f"🛑 No secret matched '{item}' with field '{field}'")


class TransportError(ConnectSecretsError):
    """
    Raised when the Connect server cannot be reached or answers non-2xx.

    Attributes:
        status: HTTP status code, or None for connection-level failures
    """

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)


class RetriesExhaustedError(ConnectSecretsError):
    """Raised when every attempt of the retry loop has failed."""

    def __init__(self, attempts: int, last_error: Optional[BaseException] = None):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"🛑 Too many retries ({attempts} attempts)")
