"""
connect-secrets

Loads secrets from a 1Password Connect server into GitHub Actions step
outputs and environment variables.
"""

from connect_secrets.errors import (
    ConnectSecretsError,
    ConfigurationError,
    MalformedRequestError,
    VaultNotFoundError,
    SecretNotFoundError,
    TransportError,
    RetriesExhaustedError,
)
from connect_secrets.models import ItemRequest, VaultMap, SecretField, Item, ResolvedOutput
from connect_secrets.parsing import parse_item_request, parse_item_requests

__version__ = "0.1.0"

__all__ = [
    'ConnectSecretsError',
    'ConfigurationError',
    'MalformedRequestError',
    'VaultNotFoundError',
    'SecretNotFoundError',
    'TransportError',
    'RetriesExhaustedError',
    'ItemRequest',
    'VaultMap',
    'SecretField',
    'Item',
    'ResolvedOutput',
    'parse_item_request',
    'parse_item_requests',
]
