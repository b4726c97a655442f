"""Domain records shared by adapters and the reconciliation engine."""

from __future__ import annotations

from .declarative import MANAGED_MODE, DeclarativeDocument, DeclarativeInstance
from .inventory import (
    Dimension,
    GroupPair,
    InventoryRecord,
    InventorySnapshot,
    IpPermission,
    IpRange,
    NetworkAclEntry,
    Relationship,
    ResourceConfiguration,
    Route,
    RouteTableAssociation,
    SupplementaryConfiguration,
    UnsupportedResource,
)
from .record import ReconciledRecord, RecordHandle, SourceKey

__all__ = [
    "MANAGED_MODE",
    "DeclarativeDocument",
    "DeclarativeInstance",
    "Dimension",
    "GroupPair",
    "InventoryRecord",
    "InventorySnapshot",
    "IpPermission",
    "IpRange",
    "NetworkAclEntry",
    "ReconciledRecord",
    "RecordHandle",
    "Relationship",
    "ResourceConfiguration",
    "Route",
    "RouteTableAssociation",
    "SourceKey",
    "SupplementaryConfiguration",
    "UnsupportedResource",
]
