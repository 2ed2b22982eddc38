"""
Secret loading action.

One attempt refreshes the vault map, parses the secret path and resolves
every request in order. Attempts are wrapped in a RetryOrchestrator.
"""

import logging

from connect_secrets.config import ActionConfig
from connect_secrets.parsing import parse_item_requests
from connect_secrets.resolver import SecretResolver
from connect_secrets.retry import RetryOrchestrator
from connect_secrets.vaults import VaultResolver

logger = logging.getLogger(__name__)


class SecretsAction:
    """Resolves all secret requests of a run and publishes them."""

    def __init__(self, config: ActionConfig, client, sink, sleep=None):
        """
        Args:
            config: Run configuration
            client: Connect client (``list_vaults``, ``get_item_by_title``)
            sink: Output sink (``emit``)
            sleep: Optional awaitable sleep for the backoff (used by tests)
        """
        self.config = config
        self.client = client
        self.sink = sink
        self.vaults = VaultResolver(client, fail_on_not_found=config.fail_on_not_found)
        self.resolver = SecretResolver(client, sink, fail_on_not_found=config.fail_on_not_found)

        retry_kwargs = {"max_tries": config.retry_count}
        if sleep is not None:
            retry_kwargs["sleep"] = sleep
        self.orchestrator = RetryOrchestrator(self.attempt, **retry_kwargs)

    async def attempt(self) -> None:
        """Run one full attempt; any exception aborts it."""
        await self.vaults.refresh()
        logger.debug("Starting 1Password Connect secret resolution")

        requests = parse_item_requests(self.config.secret_path)
        for index, request in enumerate(requests, start=1):
            logger.debug(f"Processing item request {index}/{len(requests)}: {request.to_spec_line()}")

            vault_id = self.vaults.lookup(request.vault)
            if vault_id is None:
                logger.warning(
                    f"⚠️ No vault matched name '{request.vault}', "
                    f"skipping '{request.path}' as fail-on-not-found is disabled."
                )
                continue

            await self.resolver.resolve(vault_id, request)

    async def run(self) -> None:
        """
        Run attempts until one succeeds.

        Raises:
            RetriesExhaustedError: When all attempts failed
        """
        await self.orchestrator.run()
