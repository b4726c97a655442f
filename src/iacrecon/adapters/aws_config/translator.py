"""Translate validated AWS Config snapshot payloads into inventory records."""

from __future__ import annotations

from logging import getLogger
from types import MappingProxyType
from typing import TYPE_CHECKING

from iacrecon.domain.model import (
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

from .schema import SnapshotPayload

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .schema import (
        ConfigurationItemPayload,
        ConfigurationPayload,
        IpPermissionPayload,
        SnapshotPayloadInput,
    )

log = getLogger(__name__)


def _text(value: str | None) -> str:
    return value or ""


def _ensure_snapshot_payload(payload: SnapshotPayload | SnapshotPayloadInput) -> SnapshotPayload:
    if isinstance(payload, SnapshotPayload):
        return payload
    return SnapshotPayload.model_validate(payload)


def parse_snapshot(payload: SnapshotPayload | SnapshotPayloadInput) -> InventorySnapshot:
    """Build an inventory snapshot, keeping item order as delivered."""

    snapshot = _ensure_snapshot_payload(payload)
    items = tuple(parse_configuration_item(item) for item in snapshot.configuration_items)
    log.debug("Parsed %s configuration items", len(items))
    return InventorySnapshot(
        items=items,
        file_version=_text(snapshot.file_version),
        snapshot_id=_text(snapshot.config_snapshot_id),
    )


def parse_configuration_item(item: ConfigurationItemPayload) -> InventoryRecord:
    return InventoryRecord(
        resource_type=_text(item.resource_type),
        resource_id=_text(item.resource_id),
        resource_name=_text(item.resource_name),
        arn=_text(item.arn),
        region=_text(item.aws_region),
        account_id=_text(item.aws_account_id),
        availability_zone=_text(item.availability_zone),
        status=_text(item.configuration_item_status),
        tags=MappingProxyType(dict(item.tags)),
        relationships=tuple(
            Relationship(
                resource_type=_text(relationship.resource_type),
                resource_id=_text(relationship.resource_id),
                resource_name=_text(relationship.resource_name),
                relation_name=_text(relationship.relationship_name),
            )
            for relationship in item.relationships
        ),
        configuration=_parse_configuration(item.configuration),
        supplementary=SupplementaryConfiguration(
            unsupported_resources=tuple(
                UnsupportedResource(
                    resource_type=_text(resource.resource_type),
                    resource_id=_text(resource.resource_id),
                )
                for resource in item.supplementary_configuration.unsupported_resources
            )
        ),
    )


def _parse_configuration(payload: ConfigurationPayload) -> ResourceConfiguration:
    launch_templates = (
        config.launch_template_specification.launch_template_id
        for config in payload.launch_template_configs
        if config.launch_template_specification is not None
    )
    return ResourceConfiguration(
        associations=tuple(
            RouteTableAssociation(
                association_id=_text(association.route_table_association_id),
                subnet_id=_text(association.subnet_id),
                main=bool(association.main),
            )
            for association in payload.associations
            if association.route_table_association_id
        ),
        routes=tuple(
            Route(
                destination_cidr_block=_text(route.destination_cidr_block),
                destination_ipv6_cidr_block=_text(route.destination_ipv6_cidr_block),
                origin=_text(route.origin),
                gateway_id=_text(route.gateway_id),
                nat_gateway_id=_text(route.nat_gateway_id),
                vpc_peering_connection_id=_text(route.vpc_peering_connection_id),
                transit_gateway_id=_text(route.transit_gateway_id),
            )
            for route in payload.routes
        ),
        entries=tuple(
            NetworkAclEntry(
                cidr_block=_text(entry.cidr_block),
                ipv6_cidr_block=_text(entry.ipv6_cidr_block),
                egress=bool(entry.egress),
                protocol=_text(entry.protocol),
                rule_action=_text(entry.rule_action),
                rule_number=entry.rule_number if entry.rule_number is not None else 0,
            )
            for entry in payload.entries
        ),
        network_interface_ids=tuple(payload.network_interface_ids),
        description=_text(payload.description),
        interface_type=_text(payload.interface_type),
        association_ip_owner_id=(
            _text(payload.association.ip_owner_id) if payload.association else ""
        ),
        attachment_instance_owner_id=(
            _text(payload.attachment.instance_owner_id) if payload.attachment else ""
        ),
        instance_ids=_non_blank(instance.instance_id for instance in payload.instances),
        target_group_arns=tuple(payload.target_group_arns),
        namespace=_text(payload.namespace),
        dimensions=tuple(
            Dimension(name=dimension.name, value=_text(dimension.value))
            for dimension in payload.dimensions
        ),
        launch_template_ids=_non_blank(launch_templates),
        path=_text(payload.path),
        db_cluster_identifier=_text(payload.db_cluster_identifier),
        ip_permissions=tuple(_parse_permission(p) for p in payload.ip_permissions),
        ip_permissions_egress=tuple(_parse_permission(p) for p in payload.ip_permissions_egress),
    )


def _parse_permission(payload: IpPermissionPayload) -> IpPermission:
    return IpPermission(
        ip_protocol=_text(payload.ip_protocol),
        from_port=payload.from_port if payload.from_port is not None else 0,
        to_port=payload.to_port if payload.to_port is not None else 0,
        group_pairs=tuple(
            GroupPair(
                group_id=_text(pair.group_id),
                user_id=_text(pair.user_id),
                description=_text(pair.description),
            )
            for pair in payload.user_id_group_pairs
        ),
        ipv4_ranges=tuple(
            IpRange(cidr=ip_range.cidr_ip, description=_text(ip_range.description))
            for ip_range in payload.ipv4_ranges
        ),
        ipv6_ranges=tuple(
            IpRange(cidr=ip_range.cidr_ipv6, description=_text(ip_range.description))
            for ip_range in payload.ipv6_ranges
        ),
    )


def _non_blank(values: Iterable[str | None]) -> tuple[str, ...]:
    return tuple(value for value in values if value)
