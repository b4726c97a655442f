"""Ownership inference over indexed inventory items.

Each rule is an independent object that claims one or more resource types and
assigns parents to records it can prove are owned by another record. Rules
run in a fixed order after the whole snapshot has been indexed; a record
keeps the first parent it is given.

A rule that finds no candidate does nothing. Missing ownership information is
expected and never an error.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from iacrecon.domain.model import InventoryRecord, ReconciledRecord

    from .index import IdentityIndex

log = getLogger(__name__)


class OwnershipRule(Protocol):
    """Infer the parent of records of the types a rule claims."""

    @property
    def name(self) -> str: ...

    def matches(self, resource_type: str) -> bool: ...

    def infer(
        self,
        item: InventoryRecord,
        record: ReconciledRecord,
        index: IdentityIndex,
    ) -> None: ...


def infer_ownership(
    items: Iterable[InventoryRecord],
    index: IdentityIndex,
    *,
    rules: Sequence[OwnershipRule],
) -> int:
    """Run ``rules`` in order over ``items``; return the number of parents assigned."""

    located = _locate(items, index)
    before = _count_parents(index)
    for rule in rules:
        applied = 0
        for item, record in located:
            if not rule.matches(item.resource_type):
                continue
            rule.infer(item, record, index)
            applied += 1
        log.debug("Ownership rule %s inspected %s items", rule.name, applied)
    assigned = _count_parents(index) - before
    log.info("Ownership inference assigned %s parents", assigned)
    return assigned


def _locate(
    items: Iterable[InventoryRecord],
    index: IdentityIndex,
) -> list[tuple[InventoryRecord, ReconciledRecord]]:
    located: list[tuple[InventoryRecord, ReconciledRecord]] = []
    for item in items:
        if not item.resource_type:
            continue
        record = index.get(item.resource_type, item.key)
        if record is None:
            log.warning("Found unknown resource: %s %s", item.resource_type, item.key)
            continue
        located.append((item, record))
    return located


def _count_parents(index: IdentityIndex) -> int:
    return sum(1 for record in index if record.parent is not None)
