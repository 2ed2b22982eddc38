"""
Vault name resolution.
"""

import logging
from typing import Optional

from connect_secrets.errors import VaultNotFoundError
from connect_secrets.models import VaultMap

logger = logging.getLogger(__name__)


class VaultResolver:
    """
    Maps vault display names to vault IDs.

    The map is rebuilt by every refresh() so an attempt never sees the vault
    membership observed by a previous, failed one.
    """

    def __init__(self, client, fail_on_not_found: bool = False):
        """
        Args:
            client: Connect client exposing ``list_vaults()``
            fail_on_not_found: Raise on unknown vault names instead of skipping
        """
        self.client = client
        self.fail_on_not_found = fail_on_not_found
        self.vault_map = VaultMap()

    async def refresh(self) -> VaultMap:
        """List vaults and replace the current map. Listing errors propagate."""
        vault_map = VaultMap()
        for vault in await self.client.list_vaults():
            name = vault.get("name") or ""
            vault_id = vault.get("id") or ""
            if name and vault_id:
                vault_map.add(name, vault_id)
            else:
                logger.debug(f"Vault name/ID is empty: id={vault.get('id')!r} name={vault.get('name')!r}")

        logger.debug(f"Vaults list: {vault_map.names()}")
        self.vault_map = vault_map
        return vault_map

    def lookup(self, name: str) -> Optional[str]:
        """
        Return the ID of vault ``name``.

        Raises:
            VaultNotFoundError: If the vault is unknown and fail_on_not_found is set
        """
        vault_id = self.vault_map.lookup(name)
        if vault_id is None and self.fail_on_not_found:
            raise VaultNotFoundError(name)
        return vault_id
