"""Identity index: the arena of reconciled records and its lookup structures.

Records are stored once, in creation order, and addressed by integer handle.
Three structures map ``resource type -> secondary key -> handle``:

- by id-or-arn: the record's resource id, else its ARN
- by name: the resource name, for tools that reference resources by name
- by arn: the ARN, for callers that hold an ARN where the canonical key is an id

All three point at the same record. Registering a record registers every
non-empty identity field it carries.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from iacrecon.domain.model import ReconciledRecord

if TYPE_CHECKING:
    from collections.abc import Iterator

    from iacrecon.domain.model import InventoryRecord, RecordHandle

log = getLogger(__name__)

type KeyIndex = defaultdict[str, dict[str, RecordHandle]]


def _new_key_index() -> KeyIndex:
    return defaultdict(dict)


@dataclass(slots=True)
class IdentityIndex:
    """Keyed storage of reconciled records for one reconciliation run."""

    _records: list[ReconciledRecord] = field(default_factory=list["ReconciledRecord"], repr=False)
    _by_key: KeyIndex = field(default_factory=_new_key_index, repr=False)
    _by_name: KeyIndex = field(default_factory=_new_key_index, repr=False)
    _by_arn: KeyIndex = field(default_factory=_new_key_index, repr=False)

    def __len__(self) -> int:
        return len(self._records)

    def add_inventory(self, item: InventoryRecord, *, mapped: bool) -> ReconciledRecord:
        """Index one inventory item, collapsing repeats of the same key."""

        record = self.get_or_create(
            item.resource_type,
            item.key,
            resource_id=item.resource_id,
            arn=item.arn,
            resource_name=item.resource_name,
            mapped=mapped,
        )
        if record.inventory is None:
            record.inventory = item
            record.resource_id = record.resource_id or item.resource_id
            record.resource_name = record.resource_name or item.resource_name
            record.arn = record.arn or item.arn
            record.region = item.region
            record.account_id = item.account_id
            record.type_is_mapped = mapped
        record.in_inventory = True
        self._register(record)
        return record

    def get_or_create(
        self,
        resource_type: str,
        key: str,
        *,
        resource_id: str | None = None,
        arn: str = "",
        resource_name: str = "",
        mapped: bool = False,
    ) -> ReconciledRecord:
        """Return the record for ``(resource_type, key)``, creating a placeholder if absent.

        A created record carries only what the caller knows; it is present in
        neither source until a flag is set on it.
        """

        existing = self.get(resource_type, key)
        if existing is not None:
            return existing
        record = ReconciledRecord(
            handle=len(self._records),
            resource_type=resource_type,
            key=key,
            resource_id=key if resource_id is None else resource_id,
            resource_name=resource_name,
            arn=arn,
            type_is_mapped=mapped,
        )
        self._records.append(record)
        self._by_key[resource_type][key] = record.handle
        self._register(record)
        return record

    def get(self, resource_type: str, key: str) -> ReconciledRecord | None:
        """Pure lookup by id-or-arn key; never creates a record."""

        return self._resolve(self._by_key, resource_type, key)

    def get_by_name(self, resource_type: str, name: str) -> ReconciledRecord | None:
        return self._resolve(self._by_name, resource_type, name)

    def get_by_arn(self, resource_type: str, arn: str) -> ReconciledRecord | None:
        return self._resolve(self._by_arn, resource_type, arn)

    def lookup(self, resource_type: str, key: str) -> ReconciledRecord | None:
        """Look ``key`` up as an id first, falling back to a name."""

        return self.get(resource_type, key) or self.get_by_name(resource_type, key)

    def record(self, handle: RecordHandle) -> ReconciledRecord:
        return self._records[handle]

    def parent_of(self, record: ReconciledRecord) -> ReconciledRecord | None:
        if record.parent is None:
            return None
        return self._records[record.parent]

    def assign_parent(self, child: ReconciledRecord, parent: ReconciledRecord) -> bool:
        """Set ``child``'s parent unless one is already assigned.

        Returns whether the assignment took place.
        """

        if child.handle == parent.handle:
            log.debug("Refusing self-ownership for %s %s", child.resource_type, child.resource_id)
            return False
        if child.parent is not None:
            if child.parent != parent.handle:
                current = self._records[child.parent]
                log.debug(
                    "Keeping parent %s %s of %s %s; ignoring %s %s",
                    current.resource_type,
                    current.resource_id,
                    child.resource_type,
                    child.resource_id,
                    parent.resource_type,
                    parent.resource_id,
                )
            return False
        child.parent = parent.handle
        return True

    def records(self) -> tuple[ReconciledRecord, ...]:
        return tuple(self._records)

    def types(self) -> tuple[str, ...]:
        return tuple(sorted(self._by_key))

    def __iter__(self) -> Iterator[ReconciledRecord]:
        return iter(self._records)

    def _register(self, record: ReconciledRecord) -> None:
        if record.resource_id:
            self._by_key[record.resource_type].setdefault(record.resource_id, record.handle)
        elif record.arn:
            self._by_key[record.resource_type].setdefault(record.arn, record.handle)
        if record.arn:
            self._by_arn[record.resource_type].setdefault(record.arn, record.handle)
        if record.resource_name:
            self._by_name[record.resource_type].setdefault(record.resource_name, record.handle)

    def _resolve(self, index: KeyIndex, resource_type: str, key: str) -> ReconciledRecord | None:
        if not key:
            return None
        by_type = index.get(resource_type)
        if by_type is None:
            return None
        handle = by_type.get(key)
        return None if handle is None else self._records[handle]
