"""Reconciled record: the unit of output of one reconciliation run."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .inventory import InventoryRecord

type RecordHandle = int


class SourceKey(StrEnum):
    """Presence predicates a record can be queried for."""

    CONFIG = "config"
    TERRAFORM = "terraform"
    OWNED = "owned"


@dataclass(slots=True, kw_only=True, eq=False)
class ReconciledRecord:
    """Where a resource was seen, and which record owns it.

    Records live in an arena and refer to their parent by handle, never by
    object reference.
    """

    handle: RecordHandle
    resource_type: str
    key: str
    resource_id: str = ""
    resource_name: str = ""
    arn: str = ""
    region: str = ""
    account_id: str = ""
    inventory: InventoryRecord | None = None
    in_inventory: bool = False
    in_declarative_state: bool = False
    parent: RecordHandle | None = None
    type_is_mapped: bool = False

    @property
    def owned(self) -> bool:
        return self.in_declarative_state or self.parent is not None

    @property
    def ephemeral(self) -> bool:
        return not self.in_inventory and not self.in_declarative_state

    def source(self, key: str) -> bool:
        match key.lower():
            case SourceKey.CONFIG:
                return self.in_inventory
            case SourceKey.TERRAFORM:
                return self.in_declarative_state
            case SourceKey.OWNED:
                return self.owned
            case _:
                return False
