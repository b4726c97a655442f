"""Bidirectional mapping between Terraform and AWS Config resource type names.

The table is loaded once, before any reconciliation starts, and is read-only
afterwards. A table that fails to load raises ``TypeMapError``; callers are
expected to treat that as fatal.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from importlib import resources
from logging import getLogger
from types import MappingProxyType
from typing import TYPE_CHECKING

from iacrecon.config.errors import TypeMapError

if TYPE_CHECKING:
    from pathlib import Path

log = getLogger(__name__)

TYPEMAP_RESOURCE = "typemap.json"


@dataclass(frozen=True, slots=True)
class TypeTranslator:
    """Translate resource types between the declarative and inventory vocabularies."""

    _to_inventory: Mapping[str, str] = field(repr=False)
    _to_declarative: Mapping[str, str] = field(repr=False)

    @classmethod
    def from_mapping(cls, table: object, *, source: str = "<mapping>") -> TypeTranslator:
        """Validate ``table`` and build a translator from it.

        ``table`` maps declarative (Terraform) types to inventory (AWS Config)
        types and must be one-to-one.
        """

        if not isinstance(table, Mapping):
            raise TypeMapError(f"{source}: type map must be a JSON object")

        to_inventory: dict[str, str] = {}
        to_declarative: dict[str, str] = {}
        for declarative_type, inventory_type in table.items():
            if not isinstance(declarative_type, str) or not isinstance(inventory_type, str):
                raise TypeMapError(f"{source}: entries must map strings to strings")
            if not declarative_type.strip() or not inventory_type.strip():
                raise TypeMapError(f"{source}: blank type name in entry {declarative_type!r}")
            existing = to_declarative.get(inventory_type)
            if existing is not None:
                raise TypeMapError(
                    f"{source}: {inventory_type} is mapped from both "
                    f"{existing} and {declarative_type}"
                )
            to_inventory[declarative_type] = inventory_type
            to_declarative[inventory_type] = declarative_type

        log.debug("Loaded %s type mappings from %s", len(to_inventory), source)
        return cls(MappingProxyType(to_inventory), MappingProxyType(to_declarative))

    @classmethod
    def from_json(cls, text: str, *, source: str = "<string>") -> TypeTranslator:
        try:
            table = json.loads(text)
        except json.JSONDecodeError as exc:
            raise TypeMapError(f"{source}: unable to parse type map: {exc}") from exc
        return cls.from_mapping(table, source=source)

    @classmethod
    def from_path(cls, path: Path) -> TypeTranslator:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise TypeMapError(f"unable to read type map {path}: {exc}") from exc
        return cls.from_json(text, source=str(path))

    @classmethod
    def default(cls) -> TypeTranslator:
        """Build the translator from the table shipped with the package."""

        text = resources.files(__package__).joinpath(TYPEMAP_RESOURCE).read_text(encoding="utf-8")
        return cls.from_json(text, source=TYPEMAP_RESOURCE)

    def to_inventory_type(self, declarative_type: str) -> tuple[str, bool]:
        inventory_type = self._to_inventory.get(declarative_type)
        if inventory_type is None:
            return declarative_type, False
        return inventory_type, True

    def to_declarative_type(self, inventory_type: str) -> tuple[str, bool]:
        declarative_type = self._to_declarative.get(inventory_type)
        if declarative_type is None:
            return inventory_type, False
        return declarative_type, True

    def is_mapped_inventory_type(self, inventory_type: str) -> bool:
        return inventory_type in self._to_declarative

    def is_mapped_declarative_type(self, declarative_type: str) -> bool:
        return declarative_type in self._to_inventory

    def __len__(self) -> int:
        return len(self._to_inventory)

    def items(self) -> tuple[tuple[str, str], ...]:
        return tuple(sorted(self._to_inventory.items()))
