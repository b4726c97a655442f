"""Declarative-state domain records (Terraform state resource instances)."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

MANAGED_MODE = "managed"


def _empty_attributes() -> Mapping[str, object]:
    return MappingProxyType({})


@dataclass(frozen=True, slots=True, kw_only=True)
class DeclarativeInstance:
    """One instance of a resource block in a state document."""

    document: str
    type: str
    name: str = ""
    mode: str = MANAGED_MODE
    module: str = ""
    provider: str = ""
    index_key: str | int | None = None
    attributes: Mapping[str, object] = field(default_factory=_empty_attributes)

    @property
    def is_managed(self) -> bool:
        return self.mode == MANAGED_MODE

    @property
    def address(self) -> str:
        """Terraform-style address, used in diagnostics only."""

        prefix = f"{self.module}." if self.module else ""
        data = "data." if self.mode == "data" else ""
        address = f"{prefix}{data}{self.type}.{self.name}"
        if isinstance(self.index_key, int):
            return f"{address}[{self.index_key}]"
        if self.index_key is not None:
            return f'{address}["{self.index_key}"]'
        return address

    def text(self, name: str) -> str:
        """Return a string attribute, or ``""`` when absent or not a string."""

        value = self.attributes.get(name)
        return value if isinstance(value, str) else ""

    def strings(self, name: str) -> tuple[str, ...]:
        value = self.attributes.get(name)
        if not isinstance(value, list | tuple):
            return ()
        return tuple(item for item in value if isinstance(item, str))


@dataclass(frozen=True, slots=True, kw_only=True)
class DeclarativeDocument:
    """A parsed state document, identified by its file name."""

    identifier: str
    instances: tuple[DeclarativeInstance, ...] = ()
    version: int | None = None
    terraform_version: str = ""
    serial: int | None = None
    lineage: str = ""
