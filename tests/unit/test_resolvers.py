"""
Unit tests for VaultResolver and SecretResolver.
"""

import io
import logging

import pytest

from connect_secrets.errors import SecretNotFoundError, TransportError, VaultNotFoundError
from connect_secrets.models import ItemRequest, ResolvedOutput
from connect_secrets.resolver import SecretResolver
from connect_secrets.vaults import VaultResolver
from connect_secrets.workflow import ActionsLogHandler


class TestVaultResolver:
    """Tests for vault map refresh and lookup."""

    @pytest.mark.asyncio
    async def test_refresh_builds_map(self, client_factory):
        client = client_factory(vaults=[
            {"id": "v1", "name": "Prod"},
            {"id": "v2", "name": "Dev"},
        ])
        resolver = VaultResolver(client)

        vault_map = await resolver.refresh()

        assert len(vault_map) == 2
        assert resolver.lookup("Prod") == "v1"
        assert resolver.lookup("Dev") == "v2"

    @pytest.mark.asyncio
    async def test_refresh_skips_incomplete_vaults(self, client_factory):
        client = client_factory(vaults=[
            {"id": "v1", "name": "Prod"},
            {"id": "", "name": "NoId"},
            {"name": "MissingId"},
            {"id": "v3"},
        ])
        resolver = VaultResolver(client)

        vault_map = await resolver.refresh()

        assert vault_map.names() == ["Prod"]

    @pytest.mark.asyncio
    async def test_refresh_replaces_previous_map(self, client_factory):
        client = client_factory(vaults=[{"id": "v1", "name": "Prod"}])
        resolver = VaultResolver(client)
        await resolver.refresh()

        client.vaults = [{"id": "v9", "name": "Other"}]
        await resolver.refresh()

        assert client.list_calls == 2
        assert resolver.lookup("Prod") is None
        assert resolver.lookup("Other") == "v9"

    @pytest.mark.asyncio
    async def test_incomplete_vault_cannot_inject_commands(self, client_factory):
        client = client_factory(vaults=[{"name": "::set-output name=x::leak"}])
        stream = io.StringIO()
        handler = ActionsLogHandler(stream)
        vault_logger = logging.getLogger("connect_secrets.vaults")
        vault_logger.addHandler(handler)
        vault_logger.setLevel(logging.DEBUG)
        try:
            await VaultResolver(client).refresh()
        finally:
            vault_logger.removeHandler(handler)
            vault_logger.setLevel(logging.NOTSET)

        lines = stream.getvalue().splitlines()
        assert lines
        assert all(line.startswith("::debug::") for line in lines)

    @pytest.mark.asyncio
    async def test_lookup_miss_without_fail(self, client_factory):
        resolver = VaultResolver(client_factory(vaults=[]), fail_on_not_found=False)
        await resolver.refresh()

        assert resolver.lookup("Missing") is None

    @pytest.mark.asyncio
    async def test_lookup_miss_with_fail(self, client_factory):
        resolver = VaultResolver(client_factory(vaults=[]), fail_on_not_found=True)
        await resolver.refresh()

        with pytest.raises(VaultNotFoundError) as exc_info:
            resolver.lookup("Missing")

        assert exc_info.value.vault == "Missing"

    @pytest.mark.asyncio
    async def test_listing_errors_propagate(self, client_factory):
        client = client_factory()

        async def broken():
            raise TransportError("unauthorized", status=401)

        client.list_vaults = broken
        resolver = VaultResolver(client)

        with pytest.raises(TransportError):
            await resolver.refresh()


class TestSecretResolver:
    """Tests for field matching and output naming."""

    @pytest.fixture
    def credentials(self, item_factory):
        return item_factory("creds", [("username", "u"), ("password", "p")])

    @pytest.mark.asyncio
    async def test_all_fields_emitted_in_order(self, client_factory, sink, credentials):
        client = client_factory(items={("v1", "creds"): credentials})
        resolver = SecretResolver(client, sink)
        request = ItemRequest(vault="Prod", name="creds", output_name="x")

        outputs = await resolver.resolve("v1", request)

        assert outputs == [
            ResolvedOutput(output_name="x_username", value="u"),
            ResolvedOutput(output_name="x_password", value="p"),
        ]
        assert sink.emitted == outputs

    @pytest.mark.asyncio
    async def test_single_field(self, client_factory, sink, credentials):
        client = client_factory(items={("v1", "creds"): credentials})
        resolver = SecretResolver(client, sink)
        request = ItemRequest(vault="Prod", name="creds", field="password", output_name="x")

        outputs = await resolver.resolve("v1", request)

        assert outputs == [ResolvedOutput(output_name="x_password", value="p")]

    @pytest.mark.asyncio
    async def test_first_match_wins(self, client_factory, sink, item_factory):
        item = item_factory("dup", [("password", "p1"), ("password", "p2")])
        client = client_factory(items={("v1", "dup"): item})
        resolver = SecretResolver(client, sink)
        request = ItemRequest(vault="Prod", name="dup", field="password", output_name="x")

        outputs = await resolver.resolve("v1", request)

        assert [o.value for o in outputs] == ["p1"]

    @pytest.mark.asyncio
    async def test_overridden_output_name(self, client_factory, sink, credentials):
        client = client_factory(items={("v1", "creds"): credentials})
        resolver = SecretResolver(client, sink)
        request = ItemRequest(
            vault="Prod", name="creds", field="password",
            output_name="DB_PASSWORD", output_overridden=True,
        )

        outputs = await resolver.resolve("v1", request)

        assert outputs == [ResolvedOutput(output_name="DB_PASSWORD", value="p")]

    @pytest.mark.asyncio
    async def test_label_lowercased_in_output_name(self, client_factory, sink, item_factory):
        item = item_factory("api", [("API Key", "k")])
        client = client_factory(items={("v1", "api"): item})
        resolver = SecretResolver(client, sink)

        outputs = await resolver.resolve("v1", ItemRequest(vault="Prod", name="api"))

        assert outputs[0].output_name == "api_api key"

    @pytest.mark.asyncio
    async def test_null_fields_skipped(self, client_factory, sink, item_factory):
        item = item_factory("mixed", [("notes", None), ("token", "t"), ("password", None)])
        client = client_factory(items={("v1", "mixed"): item})
        resolver = SecretResolver(client, sink)

        outputs = await resolver.resolve("v1", ItemRequest(vault="Prod", name="mixed"))

        assert [o.output_name for o in outputs] == ["mixed_token"]

    @pytest.mark.asyncio
    async def test_null_requested_field_keeps_looking(self, client_factory, sink, item_factory):
        item = item_factory("mixed", [("password", None), ("password", "p2")])
        client = client_factory(items={("v1", "mixed"): item})
        resolver = SecretResolver(client, sink)
        request = ItemRequest(vault="Prod", name="mixed", field="password")

        outputs = await resolver.resolve("v1", request)

        assert [o.value for o in outputs] == ["p2"]

    @pytest.mark.asyncio
    async def test_empty_item_without_field_is_not_a_miss(self, client_factory, sink, item_factory):
        client = client_factory(items={("v1", "empty"): item_factory("empty", [])})
        resolver = SecretResolver(client, sink, fail_on_not_found=True)

        outputs = await resolver.resolve("v1", ItemRequest(vault="Prod", name="empty"))

        assert outputs == []

    @pytest.mark.asyncio
    async def test_missing_field_without_fail(self, client_factory, sink, credentials):
        client = client_factory(items={("v1", "creds"): credentials})
        resolver = SecretResolver(client, sink, fail_on_not_found=False)
        request = ItemRequest(vault="Prod", name="creds", field="otp")

        outputs = await resolver.resolve("v1", request)

        assert outputs == []
        assert sink.emitted == []

    @pytest.mark.asyncio
    async def test_missing_field_with_fail(self, client_factory, sink, credentials):
        client = client_factory(items={("v1", "creds"): credentials})
        resolver = SecretResolver(client, sink, fail_on_not_found=True)
        request = ItemRequest(vault="Prod", name="creds", field="otp")

        with pytest.raises(SecretNotFoundError) as exc_info:
            await resolver.resolve("v1", request)

        assert exc_info.value.item == "creds"
        assert exc_info.value.field == "otp"

    @pytest.mark.asyncio
    async def test_transport_error_skipped_without_fail(self, client_factory, sink):
        client = client_factory(items={("v1", "down"): TransportError("boom", status=500)})
        resolver = SecretResolver(client, sink, fail_on_not_found=False)

        outputs = await resolver.resolve("v1", ItemRequest(vault="Prod", name="down"))

        assert outputs == []

    @pytest.mark.asyncio
    async def test_transport_error_raised_with_fail(self, client_factory, sink):
        client = client_factory(items={("v1", "down"): TransportError("boom", status=500)})
        resolver = SecretResolver(client, sink, fail_on_not_found=True)

        with pytest.raises(TransportError) as exc_info:
            await resolver.resolve("v1", ItemRequest(vault="Prod", name="down"))

        assert exc_info.value.status == 500

    @pytest.mark.asyncio
    async def test_fetched_item_logged_by_title(self, client_factory, sink, credentials, caplog):
        client = client_factory(items={("v1", "creds"): credentials})
        resolver = SecretResolver(client, sink)

        with caplog.at_level(logging.DEBUG, logger="connect_secrets.resolver"):
            await resolver.resolve("v1", ItemRequest(vault="Prod", name="creds"))

        assert "Fetched item 'creds' (id-creds) with 2 field(s)" in caplog.text

    def test_resolved_output_repr_hides_value(self):
        output = ResolvedOutput(output_name="x_password", value="hunter2")

        assert "hunter2" not in repr(output)
