"""
Secret Path Parser

Turns the ``secret-path`` input into an ordered list of ItemRequest.

Each non-blank line has the form::

    <vault>/<item>[/<field>] [<output-name>[!]]

A trailing ``!`` publishes the field under the literal output name (no
``_<label>`` suffix). When no output name is given, the ``!`` may follow
the path itself and the name is derived from the item title.
"""

import logging
from typing import List, Optional

from connect_secrets.errors import MalformedRequestError
from connect_secrets.models import ItemRequest

logger = logging.getLogger(__name__)

OVERRIDE_MARKER = "!"


def parse_item_request(line: str, line_number: Optional[int] = None) -> ItemRequest:
    """
    Parse a single secret-path line.

    Args:
        line: Line to parse (surrounding whitespace is ignored)
        line_number: 1-based position in the input, used in error messages

    Returns:
        The parsed ItemRequest

    Raises:
        MalformedRequestError: If the line does not match the grammar
    """
    text = line.strip()
    tokens = text.split()
    if not tokens:
        raise MalformedRequestError(line, "empty request", line_number)
    if len(tokens) > 2:
        raise MalformedRequestError(
            line, "expected '<vault>/<item>[/<field>] [<output>]'", line_number
        )

    path = tokens[0]
    output_token = tokens[1] if len(tokens) == 2 else ""
    overridden = False

    if output_token:
        if output_token.endswith(OVERRIDE_MARKER):
            overridden = True
            output_token = output_token[:-1]
    elif path.endswith(OVERRIDE_MARKER):
        overridden = True
        path = path[:-1]

    segments = path.split("/")
    if len(segments) < 2:
        raise MalformedRequestError(line, "vault and item are required", line_number)
    if len(segments) > 3:
        raise MalformedRequestError(line, "too many path segments", line_number)
    if any(not segment for segment in segments):
        raise MalformedRequestError(line, "empty path segment", line_number)

    vault, name = segments[0], segments[1]
    field = segments[2] if len(segments) == 3 else ""

    if overridden and not field:
        raise MalformedRequestError(
            line, "output override needs a field to bind to", line_number
        )

    return ItemRequest(
        vault=vault,
        name=name,
        field=field,
        output_name=output_token,
        output_overridden=overridden,
    )


def parse_item_requests(secret_path: str) -> List[ItemRequest]:
    """
    Parse the whole secret-path input.

    Blank lines are skipped; the result keeps input order, which is also
    the order outputs are published in.
    """
    requests = []
    for number, line in enumerate(secret_path.splitlines(), start=1):
        if not line.strip():
            continue
        requests.append(parse_item_request(line, number))

    logger.debug(f"Parsed {len(requests)} item request(s)")
    return requests
