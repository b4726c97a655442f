"""Orchestrator for one reconciliation run.

Stages run strictly in order on a fresh identity index:

1) index the inventory snapshot (synthesizing route table associations)
2) run the ownership rules over the indexed items
3) correlate the declarative state documents

The engine holds no state between runs; independent runs may execute in
parallel as long as each uses its own engine call.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from iacrecon.domain.model import InventorySnapshot

from . import constants as c
from .correlate import DeclarativeCorrelator
from .index import IdentityIndex
from .ownership import OwnershipRule, infer_ownership
from .rules import DEFAULT_RULES
from .structural import StructuralMatcher, default_matchers

if TYPE_CHECKING:
    from collections.abc import Iterable

    from iacrecon.domain.model import DeclarativeDocument, InventoryRecord, ReconciledRecord

    from .contracts import Correlation
    from .typemap import TypeTranslator

log = getLogger(__name__)

type RecordKey = tuple[str, str]
type RecordState = tuple[bool, bool, RecordKey | None, bool]


@dataclass(slots=True)
class ReconciliationResult:
    """Flattened output of one run, plus per-instance correlation diagnostics."""

    index: IdentityIndex = field(repr=False)
    correlations: tuple[Correlation, ...] = ()
    document_count: int = 0

    @property
    def records(self) -> tuple[ReconciledRecord, ...]:
        return self.index.records()

    def visible_records(self) -> tuple[ReconciledRecord, ...]:
        """Records seen in at least one source; ephemeral placeholders are excluded."""

        return tuple(record for record in self.index if not record.ephemeral)

    def parent_of(self, record: ReconciledRecord) -> ReconciledRecord | None:
        return self.index.parent_of(record)

    def find(self, resource_type: str, key: str) -> ReconciledRecord | None:
        return self.index.lookup(resource_type, key)

    def key_map(self) -> dict[RecordKey, RecordState]:
        """Map ``(type, key)`` to presence, parent and mapping state for comparison across runs."""

        states: dict[RecordKey, RecordState] = {}
        for record in self.index:
            parent = self.index.parent_of(record)
            parent_key = None if parent is None else (parent.resource_type, parent.key)
            states[(record.resource_type, record.key)] = (
                record.in_inventory,
                record.in_declarative_state,
                parent_key,
                record.type_is_mapped,
            )
        return states


@dataclass(slots=True)
class ReconciliationEngine:
    """Reconcile an inventory snapshot with declarative state documents."""

    translator: TypeTranslator
    rules: Sequence[OwnershipRule] = DEFAULT_RULES
    matchers: Mapping[str, StructuralMatcher] = field(default_factory=default_matchers)

    def reconcile(
        self,
        snapshot: InventorySnapshot | Iterable[InventoryRecord],
        documents: Iterable[DeclarativeDocument] = (),
    ) -> ReconciliationResult:
        items = snapshot.items if isinstance(snapshot, InventorySnapshot) else tuple(snapshot)
        documents = tuple(documents)

        index = IdentityIndex()
        indexed = self.index_inventory(items, index)
        log.info("Indexed %s of %s inventory items", len(indexed), len(items))

        infer_ownership(indexed, index, rules=self.rules)

        correlator = DeclarativeCorrelator(self.translator, index, self.matchers)
        correlations = correlator.correlate(documents)
        return ReconciliationResult(
            index=index,
            correlations=correlations,
            document_count=len(documents),
        )

    def index_inventory(
        self,
        items: Iterable[InventoryRecord],
        index: IdentityIndex,
    ) -> list[InventoryRecord]:
        """Index ``items`` and return those that made it into the index."""

        indexed: list[InventoryRecord] = []
        for item in items:
            if item.resource_type == c.CONFIG_COMPLIANCE:
                continue
            if not item.resource_type:
                log.warning("Empty resource type for item %s", item.arn or item.resource_id)
                continue
            if not item.key:
                log.warning("Empty resource id and ARN for item of type %s", item.resource_type)
                continue
            mapped = self.translator.is_mapped_inventory_type(item.resource_type)
            record = index.add_inventory(item, mapped=mapped)
            indexed.append(item)
            if item.resource_type == c.ROUTE_TABLE:
                _synthesize_associations(item, record, index)
        return indexed


def _synthesize_associations(
    item: InventoryRecord,
    route_table: ReconciledRecord,
    index: IdentityIndex,
) -> None:
    # AWS Config has no items for associations; each entry of the table's
    # association list stands in for one.
    for association in item.configuration.associations:
        if not association.association_id:
            continue
        record = index.get_or_create(
            c.ROUTE_TABLE_ASSOCIATION,
            association.association_id,
            mapped=True,
        )
        record.in_inventory = True
        record.type_is_mapped = True
        record.region = record.region or item.region
        record.account_id = record.account_id or item.account_id
        index.assign_parent(record, route_table)
