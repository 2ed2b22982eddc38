"""
Shared fixtures: an in-memory Connect server and a recording sink.
"""

import pytest
from typing import Dict, List, Optional

from connect_secrets.errors import TransportError
from connect_secrets.models import Item, SecretField, ResolvedOutput


class FakeConnectClient:
    """In-memory stand-in for ConnectClient."""

    def __init__(self, vaults: Optional[List[Dict]] = None, items: Optional[Dict] = None):
        self.vaults = vaults or []
        # (vault_id, title) -> Item or Exception
        self.items = items or {}
        self.list_calls = 0
        self.item_calls: List[tuple] = []

    async def list_vaults(self):
        self.list_calls += 1
        return list(self.vaults)

    async def get_item_by_title(self, vault_id, title):
        self.item_calls.append((vault_id, title))
        result = self.items.get((vault_id, title))
        if result is None:
            raise TransportError(f"No item found with title '{title}'", status=404)
        if isinstance(result, Exception):
            raise result
        return result


class RecordingSink:
    """Collects emitted outputs instead of publishing them."""

    def __init__(self):
        self.emitted: List[ResolvedOutput] = []

    def emit(self, output: ResolvedOutput) -> None:
        self.emitted.append(output)


def make_item(title: str, fields: List[tuple]) -> Item:
    return Item(
        id=f"id-{title}",
        title=title,
        fields=[SecretField(label=label, value=value) for label, value in fields],
    )


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def item_factory():
    return make_item


@pytest.fixture
def client_factory():
    return FakeConnectClient
