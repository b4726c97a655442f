"""Counts of reconciled records by source and by resource type."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from iacrecon.domain.model import SourceKey

if TYPE_CHECKING:
    from collections.abc import Iterable

    from iacrecon.domain.model import ReconciledRecord

SOURCE_KEYS: tuple[str, ...] = tuple(key.value for key in SourceKey)


def _new_source_counts() -> dict[str, int]:
    return dict.fromkeys(SOURCE_KEYS, 0)


@dataclass(slots=True, kw_only=True)
class SourceSummary:
    """Totals for one source; ``only`` splits into mapped and unmapped types."""

    name: str
    total: int = 0
    only: int = 0
    only_mapped: int = 0
    only_unmapped: int = 0


@dataclass(slots=True, kw_only=True)
class TypeSummary:
    resource_type: str
    count: int = 0
    single_only: int = 0
    both: int = 0
    sources: dict[str, int] = field(default_factory=_new_source_counts)


@dataclass(slots=True, kw_only=True)
class Summary:
    config_count: int = 0
    terraform_count: int = 0
    both_count: int = 0
    sources: tuple[SourceSummary, ...] = ()
    by_type: list[TypeSummary] = field(default_factory=list["TypeSummary"])

    def source(self, name: str) -> SourceSummary | None:
        return next((source for source in self.sources if source.name == name), None)


def summarize(records: Iterable[ReconciledRecord]) -> Summary:
    """Aggregate ``records``; ephemeral placeholders are never counted."""

    config = SourceSummary(name=SourceKey.CONFIG.value)
    terraform = SourceSummary(name=SourceKey.TERRAFORM.value)
    by_type: defaultdict[str, TypeSummary] = defaultdict(lambda: TypeSummary(resource_type=""))
    both_count = 0

    for record in records:
        if record.ephemeral:
            continue
        type_summary = by_type[record.resource_type]
        type_summary.resource_type = record.resource_type
        type_summary.count += 1
        for key in SOURCE_KEYS:
            if record.source(key):
                type_summary.sources[key] += 1

        if record.in_inventory and record.in_declarative_state:
            both_count += 1
            type_summary.both += 1
            config.total += 1
            terraform.total += 1
            continue

        type_summary.single_only += 1
        single = config if record.in_inventory else terraform
        single.total += 1
        single.only += 1
        if record.type_is_mapped:
            single.only_mapped += 1
        else:
            single.only_unmapped += 1

    return Summary(
        config_count=config.total,
        terraform_count=terraform.total,
        both_count=both_count,
        sources=(config, terraform),
        by_type=[by_type[resource_type] for resource_type in sorted(by_type)],
    )
