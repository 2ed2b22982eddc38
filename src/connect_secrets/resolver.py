"""
Item field resolution.

Fetches one item per request and publishes its fields following the
request's matching policy: every non-null field when no field is named,
otherwise only the first field whose label matches.
"""

import logging
from typing import List

from connect_secrets.errors import SecretNotFoundError, TransportError
from connect_secrets.models import ItemRequest, ResolvedOutput

logger = logging.getLogger(__name__)


class SecretResolver:
    """Resolves ItemRequests into ResolvedOutputs and publishes them."""

    def __init__(self, client, sink, fail_on_not_found: bool = False):
        """
        Args:
            client: Connect client exposing ``get_item_by_title()``
            sink: Output sink receiving each ResolvedOutput as it is found
            fail_on_not_found: Raise on misses and transport errors instead of skipping
        """
        self.client = client
        self.sink = sink
        self.fail_on_not_found = fail_on_not_found

    async def resolve(self, vault_id: str, request: ItemRequest) -> List[ResolvedOutput]:
        """
        Fetch ``request.name`` from ``vault_id`` and publish matching fields.

        Returns:
            Outputs in the order they were published

        Raises:
            TransportError: On fetch failure when fail_on_not_found is set
            SecretNotFoundError: When nothing matched and fail_on_not_found is set
        """
        try:
            item = await self.client.get_item_by_title(vault_id, request.name)
        except TransportError as e:
            if self.fail_on_not_found:
                logger.error(f"Error for secret: '{request.name}' - '{e}'")
                raise
            logger.warning(
                f"⚠️ Error for secret: '{request.name}' - '{e}'. "
                f"Continuing as fail-on-not-found is disabled."
            )
            return []

        logger.debug(f"Fetched item '{item.title}' ({item.id}) with {len(item.fields)} field(s)")

        outputs: List[ResolvedOutput] = []
        # an empty field asks for everything, so nothing specific can go missing
        found_any = request.field == ""

        for secret_field in item.fields:
            if request.field and secret_field.label != request.field:
                logger.debug(f"Skipping field: {request.field} - {secret_field.label}")
                continue
            if secret_field.value is None:
                logger.debug(f"Skipping field as null: {secret_field.label}")
                continue

            if request.field and request.output_overridden:
                output_name = request.output_name
            else:
                output_name = f"{request.output_name}_{secret_field.label.lower()}"

            output = ResolvedOutput(output_name=output_name, value=secret_field.value)
            self.sink.emit(output)
            outputs.append(output)
            found_any = True

            if request.field:
                break

        if not found_any:
            if self.fail_on_not_found:
                raise SecretNotFoundError(request.name, request.field)
            logger.info(f"⚠️ No secret matched '{request.name}' with field '{request.field}'")

        return outputs
