"""
GitHub Actions Workflow Commands

Formatting of ``::command::`` lines and a logging handler that turns log
records into runner annotations.
"""

import logging
import sys
from typing import Dict, Optional, TextIO


def escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


def format_command(
    command: str,
    message: str = "",
    properties: Optional[Dict[str, str]] = None,
) -> str:
    """
    Format a workflow command.

    Example:
        >>> format_command("set-output", "v", {"name": "db_password"})
        '::set-output name=db_password::v'
    """
    line = f"::{command}"
    if properties:
        line += " " + ",".join(
            f"{key}={escape_property(str(value))}" for key, value in properties.items()
        )
    return f"{line}::{escape_data(message)}"


class ActionsLogHandler(logging.StreamHandler):
    """
    Log handler for the Actions runner.

    DEBUG records become ``::debug::`` (shown only with step debugging),
    WARNING ``::warning::`` and ERROR and above ``::error::``. INFO is
    written as plain text.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        super().__init__(stream or sys.stdout)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if record.levelno >= logging.ERROR:
            return format_command("error", message)
        if record.levelno >= logging.WARNING:
            return format_command("warning", message)
        if record.levelno <= logging.DEBUG:
            return format_command("debug", message)
        return message
