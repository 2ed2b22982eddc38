"""
Action configuration management.

Inputs are read the way the Actions runner passes them: as ``INPUT_<NAME>``
environment variables with the input name upper-cased and spaces replaced
by underscores.
"""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field, SecretStr, ValidationError, field_validator

from connect_secrets.errors import ConfigurationError


def get_input(name: str, environ: Optional[Mapping[str, str]] = None) -> str:
    """Read action input ``name``; missing inputs read as an empty string."""
    env = os.environ if environ is None else environ
    key = "INPUT_" + name.replace(" ", "_").upper()
    return env.get(key, "").strip()


class ActionConfig(BaseModel):
    """Configuration for one connect-secrets run."""

    # Connect server
    connect_server_url: str = Field(min_length=1)
    connect_server_token: SecretStr
    timeout: float = Field(default=30.0, gt=0)

    # Requests
    secret_path: str = Field(min_length=1)

    # Policy
    export_env_vars: bool = False
    fail_on_not_found: bool = False
    retry_count: int = Field(default=5, ge=1)

    # Logging
    log_level: str = "INFO"

    @field_validator("connect_server_token")
    @classmethod
    def token_required(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value():
            raise ValueError("connect-server-token is required")
        return value

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "ActionConfig":
        """
        Build the configuration from action inputs.

        Args:
            environ: Environment to read from (defaults to os.environ)
            **overrides: Values that take precedence over inputs (e.g. CLI flags)

        Raises:
            ConfigurationError: If a required input is missing or a value is invalid
        """
        values = {
            "connect_server_url": get_input("connect-server-url", environ),
            "connect_server_token": get_input("connect-server-token", environ),
            "secret_path": get_input("secret-path", environ),
            # only the literal "true" enables a flag
            "export_env_vars": get_input("export-env-vars", environ) == "true",
            "fail_on_not_found": get_input("fail-on-not-found", environ) == "true",
        }

        retry_count = get_input("retry-count", environ)
        if retry_count:
            values["retry_count"] = retry_count
        timeout = get_input("request-timeout", environ)
        if timeout:
            values["timeout"] = timeout
        log_level = get_input("log-level", environ)
        if log_level:
            values["log_level"] = log_level.upper()

        values.update({key: value for key, value in overrides.items() if value is not None})

        try:
            return cls(**values)
        except ValidationError as e:
            fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
            raise ConfigurationError(f"Invalid action inputs: {fields}") from e
