"""Inventory-side domain records as reported by an AWS Config snapshot.

These are plain frozen dataclasses. Adapters build them from validated
payloads; the reconciliation engine only ever reads them.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


def _empty_tags() -> Mapping[str, str]:
    return MappingProxyType({})


@dataclass(frozen=True, slots=True, kw_only=True)
class Relationship:
    """One entry of an inventory item's relationship list."""

    resource_type: str = ""
    resource_id: str = ""
    resource_name: str = ""
    relation_name: str = ""

    @property
    def key(self) -> str:
        """Identity used to look the related resource up: id, else name."""
        return self.resource_id or self.resource_name


@dataclass(frozen=True, slots=True, kw_only=True)
class RouteTableAssociation:
    association_id: str
    subnet_id: str = ""
    main: bool = False


@dataclass(frozen=True, slots=True, kw_only=True)
class Route:
    destination_cidr_block: str = ""
    destination_ipv6_cidr_block: str = ""
    origin: str = ""
    gateway_id: str = ""
    nat_gateway_id: str = ""
    vpc_peering_connection_id: str = ""
    transit_gateway_id: str = ""


@dataclass(frozen=True, slots=True, kw_only=True)
class NetworkAclEntry:
    cidr_block: str = ""
    ipv6_cidr_block: str = ""
    egress: bool = False
    protocol: str = ""
    rule_action: str = ""
    rule_number: int = 0


@dataclass(frozen=True, slots=True, kw_only=True)
class IpRange:
    cidr: str
    description: str = ""


@dataclass(frozen=True, slots=True, kw_only=True)
class GroupPair:
    group_id: str = ""
    user_id: str = ""
    description: str = ""


@dataclass(frozen=True, slots=True, kw_only=True)
class IpPermission:
    """One ingress or egress permission of a security group."""

    ip_protocol: str = ""
    from_port: int = 0
    to_port: int = 0
    group_pairs: tuple[GroupPair, ...] = ()
    ipv4_ranges: tuple[IpRange, ...] = ()
    ipv6_ranges: tuple[IpRange, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class Dimension:
    name: str
    value: str = ""


@dataclass(frozen=True, slots=True, kw_only=True)
class ResourceConfiguration:
    """Type-specific configuration payload.

    Only the parts the reconciliation engine reads are modelled; absent parts
    keep their empty defaults regardless of resource type.
    """

    # route tables
    associations: tuple[RouteTableAssociation, ...] = ()
    routes: tuple[Route, ...] = ()
    # network ACLs
    entries: tuple[NetworkAclEntry, ...] = ()
    # VPC endpoints
    network_interface_ids: tuple[str, ...] = ()
    # network interfaces
    description: str = ""
    interface_type: str = ""
    association_ip_owner_id: str = ""
    attachment_instance_owner_id: str = ""
    # auto scaling groups
    instance_ids: tuple[str, ...] = ()
    target_group_arns: tuple[str, ...] = ()
    # cloudwatch alarms
    namespace: str = ""
    dimensions: tuple[Dimension, ...] = ()
    # EC2 fleets
    launch_template_ids: tuple[str, ...] = ()
    # IAM roles
    path: str = ""
    # RDS cluster snapshots
    db_cluster_identifier: str = ""
    # security groups
    ip_permissions: tuple[IpPermission, ...] = ()
    ip_permissions_egress: tuple[IpPermission, ...] = ()

    def dimension(self, name: str) -> str | None:
        for dimension in self.dimensions:
            if dimension.name == name:
                return dimension.value
        return None


@dataclass(frozen=True, slots=True, kw_only=True)
class UnsupportedResource:
    resource_type: str = ""
    resource_id: str = ""


@dataclass(frozen=True, slots=True, kw_only=True)
class SupplementaryConfiguration:
    unsupported_resources: tuple[UnsupportedResource, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class InventoryRecord:
    """A resource as recorded in the inventory snapshot."""

    resource_type: str
    resource_id: str = ""
    resource_name: str = ""
    arn: str = ""
    region: str = ""
    account_id: str = ""
    availability_zone: str = ""
    status: str = ""
    tags: Mapping[str, str] = field(default_factory=_empty_tags)
    relationships: tuple[Relationship, ...] = ()
    configuration: ResourceConfiguration = field(default_factory=ResourceConfiguration)
    supplementary: SupplementaryConfiguration = field(
        default_factory=SupplementaryConfiguration
    )

    @property
    def key(self) -> str:
        """Primary identity key: the resource id, else the ARN."""
        return self.resource_id or self.arn


@dataclass(frozen=True, slots=True, kw_only=True)
class InventorySnapshot:
    """Ordered snapshot items plus the document's format tags."""

    items: tuple[InventoryRecord, ...] = ()
    file_version: str = ""
    snapshot_id: str = ""
