"""Shared outcome types of the declarative-state correlation stage."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from iacrecon.domain.model import RecordHandle


class CorrelationStatus(StrEnum):
    """How one declarative instance was accounted for."""

    MATCHED = "matched"
    STRUCTURAL = "structural"
    CREATED = "created"
    SKIPPED = "skipped"


class StructuralStatus(StrEnum):
    FOUND = "found"
    MISSING = "missing"
    INVALID = "invalid"


@dataclass(frozen=True, slots=True, kw_only=True)
class StructuralMatch:
    """Result of matching an identity-less sub-resource against its owner."""

    status: StructuralStatus
    parent: RecordHandle | None = None
    reason: str | None = None

    @property
    def found(self) -> bool:
        return self.status is StructuralStatus.FOUND


@dataclass(frozen=True, slots=True, kw_only=True)
class Correlation:
    """Diagnostic record of one declarative instance's correlation."""

    document: str
    address: str
    declared_type: str
    canonical_type: str
    status: CorrelationStatus
    key: str = ""
    record: RecordHandle | None = None
    parent: RecordHandle | None = None
    reason: str | None = None

    @property
    def parent_found(self) -> bool:
        return self.status is CorrelationStatus.STRUCTURAL
