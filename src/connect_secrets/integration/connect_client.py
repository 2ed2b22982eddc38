"""
1Password Connect API Client

Async client for the subset of the Connect REST API used to resolve
secrets: listing vaults and fetching an item by title. A single
``httpx.AsyncClient`` is kept for the whole run so requests reuse a
pooled keep-alive connection.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from connect_secrets.errors import TransportError
from connect_secrets.models import Item

logger = logging.getLogger(__name__)


class ConnectClient:
    """
    1Password Connect API client.

    Example:
        >>> async with ConnectClient("http://localhost:8080", token) as client:
        ...     vaults = await client.list_vaults()
        ...     item = await client.get_item_by_title(vaults[0]["id"], "Database")
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Connect API client.

        Args:
            base_url: Connect server URL (e.g., "http://localhost:8080")
            token: Connect access token
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/json",
            },
        )

    async def __aenter__(self) -> "ConnectClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def _get(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            detail = _error_message(e.response)
            raise TransportError(f"{detail} (HTTP {status})", status=status) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Request to Connect server failed: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                f"Invalid JSON from Connect server for {path}", status=response.status_code
            ) from e

    async def list_vaults(self) -> List[Dict[str, Any]]:
        """
        List vaults visible to the token.

        Returns:
            Raw vault objects (each normally carrying ``id`` and ``name``)
        """
        vaults = await self._get("/v1/vaults")
        logger.debug(f"Connect server returned {len(vaults or [])} vault(s)")
        return vaults or []

    async def get_item_by_title(self, vault_id: str, title: str) -> Item:
        """
        Fetch the full item titled ``title`` from vault ``vault_id``.

        Raises:
            TransportError: On HTTP failure, or when zero or several items match
        """
        escaped = title.replace('"', '\\"')
        summaries = await self._get(
            f"/v1/vaults/{vault_id}/items",
            params={"filter": f'title eq "{escaped}"'},
        ) or []

        if not summaries:
            raise TransportError(f"No item found with title '{title}'", status=404)
        if len(summaries) > 1:
            raise TransportError(
                f"Found {len(summaries)} items with title '{title}'", status=400
            )

        item_id = summaries[0].get("id")
        data = await self._get(f"/v1/vaults/{vault_id}/items/{item_id}")
        return Item.from_api(data)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase
