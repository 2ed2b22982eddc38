"""
Output sinks for resolved secrets.

Publishes step outputs and environment variables through the files the
Actions runner provides (``GITHUB_OUTPUT``, ``GITHUB_ENV``), falling back
to the legacy workflow commands when those files are not set.
"""

import logging
import os
import sys
import uuid
from typing import MutableMapping, Optional, TextIO

from connect_secrets.models import ResolvedOutput
from connect_secrets.workflow import format_command

logger = logging.getLogger(__name__)


class ActionsSink:
    """
    Publishes ResolvedOutputs to the Actions runner.

    Every value is masked before it is written anywhere, so it is redacted
    from the job log. Publishing the same output twice is harmless; the
    runner keeps the last value.
    """

    def __init__(
        self,
        export_env_vars: bool = False,
        environ: Optional[MutableMapping[str, str]] = None,
        stream: Optional[TextIO] = None,
    ):
        """
        Args:
            export_env_vars: Also export each output as an environment variable
            environ: Environment to read runner file paths from and export into
            stream: Where workflow commands are written (default: stdout)
        """
        self.export_env_vars = export_env_vars
        self.environ = os.environ if environ is None else environ
        self.stream = stream or sys.stdout
        self.exit_code = 0

    def _issue(self, command: str, message: str = "", **properties: str) -> None:
        print(format_command(command, message, properties), file=self.stream, flush=True)

    def _append_file_command(self, env_var: str, name: str, value: str) -> bool:
        path = self.environ.get(env_var)
        if not path:
            return False

        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        if delimiter in name or delimiter in value:
            raise ValueError(f"Unexpected input: value contains the delimiter {delimiter}")

        with open(path, "a", encoding="utf-8") as f:
            f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
        return True

    def mask(self, value: str) -> None:
        self._issue("add-mask", value)

    def set_output(self, name: str, value: str) -> None:
        self.mask(value)
        if not self._append_file_command("GITHUB_OUTPUT", name, value):
            self._issue("set-output", value, name=name)
        logger.info(f"Secret ready for use: {name}")

    def export_variable(self, name: str, value: str) -> None:
        self.mask(value)
        self.environ[name] = value
        if not self._append_file_command("GITHUB_ENV", name, value):
            self._issue("set-env", value, name=name)
        logger.info(f"Environmental variable globally ready for use in pipeline: '{name}'")

    def emit(self, output: ResolvedOutput) -> None:
        """Publish one output, and its environment variable when enabled."""
        self.set_output(output.output_name, output.value)
        if self.export_env_vars:
            self.export_variable(output.output_name, output.value)

    def set_failed(self, message: str) -> None:
        """Report a run failure; the entry point exits with ``exit_code``."""
        self.exit_code = 1
        self._issue("error", message)
