"""
Secret Request Data Models

Value types shared by the parser, the resolvers and the output sinks.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def default_output_name(item_name: str) -> str:
    """Derive an output name from an item title ("My DB" -> "my_db")."""
    return _NON_ALNUM.sub("_", item_name.lower())


@dataclass(frozen=True)
class ItemRequest:
    """
    One parsed line of the secret-path input.

    An empty ``field`` asks for every non-null field of the item; a
    non-empty one asks for the first field whose label matches exactly.
    ``output_overridden`` makes the resolver publish under ``output_name``
    as-is instead of ``<output_name>_<label>``.
    """

    vault: str
    name: str
    field: str = ""
    output_name: str = ""
    output_overridden: bool = False

    def __post_init__(self):
        if not self.vault or not self.name:
            raise ValueError("vault and item name are required")
        if not self.output_name:
            object.__setattr__(self, "output_name", default_output_name(self.name))
        if self.output_overridden and not self.field:
            raise ValueError("output override requires a field")

    @property
    def path(self) -> str:
        parts = [self.vault, self.name]
        if self.field:
            parts.append(self.field)
        return "/".join(parts)

    def to_spec_line(self) -> str:
        """Render the request in secret-path syntax."""
        default = self.output_name == default_output_name(self.name)
        # a bare path ending in "!" would read back as an override
        if default and (self.output_overridden or not self.path.endswith("!")):
            return f"{self.path}!" if self.output_overridden else self.path
        marker = "!" if self.output_overridden else ""
        return f"{self.path} {self.output_name}{marker}"


class VaultMap:
    """Vault display name to vault ID mapping, rebuilt on every attempt."""

    def __init__(self, vaults: Optional[Dict[str, str]] = None):
        self._vaults: Dict[str, str] = dict(vaults or {})

    def add(self, name: str, vault_id: str) -> None:
        self._vaults[name] = vault_id

    def lookup(self, name: str) -> Optional[str]:
        return self._vaults.get(name)

    def names(self) -> List[str]:
        return list(self._vaults)

    def __contains__(self, name: object) -> bool:
        return name in self._vaults

    def __len__(self) -> int:
        return len(self._vaults)


@dataclass(frozen=True)
class SecretField:
    """A labelled field of an item. Fields without a value are never published."""

    label: str
    value: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "SecretField":
        value = data.get("value")
        return cls(
            label=data.get("label") or "",
            value=None if value is None else str(value),
        )


@dataclass
class Item:
    """A full item as returned by the Connect server."""

    id: str
    title: str
    fields: List[SecretField] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Item":
        return cls(
            id=data.get("id", ""),
            title=data.get("title", ""),
            fields=[SecretField.from_api(f) for f in data.get("fields") or []],
        )


@dataclass(frozen=True)
class ResolvedOutput:
    """A named secret value ready to be handed to the output sinks."""

    output_name: str
    value: str = field(repr=False)
