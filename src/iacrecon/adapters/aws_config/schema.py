"""Pydantic models describing an AWS Config snapshot document.

Only the fields the reconciliation reads are modelled; everything else in the
(very wide) configuration item payloads is ignored. Configuration and
supplementary configuration may arrive either as objects or as JSON encoded
strings, depending on how the snapshot was delivered.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from logging import getLogger
from typing import cast

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

log = getLogger(__name__)

type SnapshotPayloadInput = Mapping[str, object]


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _decode_json_object(value: object) -> object:
    if value is None:
        return {}
    if isinstance(value, str):
        if not value.strip():
            return {}
        try:
            decoded = json.loads(value)
        except json.JSONDecodeError:
            log.debug("Ignoring configuration payload that is not JSON: %.60s", value)
            return {}
        return decoded if isinstance(decoded, Mapping) else {}
    return value


def _none_to_list(value: object) -> object:
    return [] if value is None else value


def _protocol_text(value: object) -> object:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


class AwsConfigBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class RelationshipPayload(AwsConfigBaseModel):
    resource_type: str | None = Field(default=None, alias="resourceType")
    resource_id: str | None = Field(default=None, alias="resourceId")
    resource_name: str | None = Field(default=None, alias="resourceName")
    relationship_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("relationshipName", "name"),
    )

    _normalize_text = field_validator(
        "resource_type", "resource_id", "resource_name", mode="before"
    )(_blank_to_none)


class AssociationPayload(AwsConfigBaseModel):
    route_table_association_id: str | None = Field(default=None, alias="routeTableAssociationId")
    subnet_id: str | None = Field(default=None, alias="subnetId")
    main: bool | None = None


class RoutePayload(AwsConfigBaseModel):
    destination_cidr_block: str | None = Field(default=None, alias="destinationCidrBlock")
    destination_ipv6_cidr_block: str | None = Field(
        default=None, alias="destinationIpv6CidrBlock"
    )
    origin: str | None = None
    gateway_id: str | None = Field(default=None, alias="gatewayId")
    nat_gateway_id: str | None = Field(default=None, alias="natGatewayId")
    vpc_peering_connection_id: str | None = Field(default=None, alias="vpcPeeringConnectionId")
    transit_gateway_id: str | None = Field(default=None, alias="transitGatewayId")


class NetworkAclEntryPayload(AwsConfigBaseModel):
    cidr_block: str | None = Field(default=None, alias="cidrBlock")
    ipv6_cidr_block: str | None = Field(default=None, alias="ipv6CidrBlock")
    egress: bool | None = None
    protocol: str | None = None
    rule_action: str | None = Field(default=None, alias="ruleAction")
    rule_number: int | None = Field(default=None, alias="ruleNumber")

    _normalize_protocol = field_validator("protocol", mode="before")(_protocol_text)


class NetworkInterfaceAssociationPayload(AwsConfigBaseModel):
    ip_owner_id: str | None = Field(default=None, alias="ipOwnerId")


class NetworkInterfaceAttachmentPayload(AwsConfigBaseModel):
    instance_owner_id: str | None = Field(default=None, alias="instanceOwnerId")


class AutoScalingInstancePayload(AwsConfigBaseModel):
    instance_id: str | None = Field(default=None, alias="instanceId")


class DimensionPayload(AwsConfigBaseModel):
    name: str
    value: str | None = None


class LaunchTemplateSpecificationPayload(AwsConfigBaseModel):
    launch_template_id: str | None = Field(default=None, alias="launchTemplateId")


class LaunchTemplateConfigPayload(AwsConfigBaseModel):
    launch_template_specification: LaunchTemplateSpecificationPayload | None = Field(
        default=None, alias="launchTemplateSpecification"
    )


class UserIdGroupPairPayload(AwsConfigBaseModel):
    group_id: str | None = Field(default=None, alias="groupId")
    user_id: str | None = Field(default=None, alias="userId")
    description: str | None = None


class Ipv4RangePayload(AwsConfigBaseModel):
    cidr_ip: str = Field(alias="cidrIp")
    description: str | None = None


class Ipv6RangePayload(AwsConfigBaseModel):
    cidr_ipv6: str = Field(alias="cidrIpv6")
    description: str | None = None


class IpPermissionPayload(AwsConfigBaseModel):
    ip_protocol: str | None = Field(default=None, alias="ipProtocol")
    from_port: int | None = Field(default=None, alias="fromPort")
    to_port: int | None = Field(default=None, alias="toPort")
    user_id_group_pairs: list[UserIdGroupPairPayload] = Field(
        default_factory=list["UserIdGroupPairPayload"], alias="userIdGroupPairs"
    )
    ipv4_ranges: list[Ipv4RangePayload] = Field(
        default_factory=list["Ipv4RangePayload"], alias="ipv4Ranges"
    )
    ipv6_ranges: list[Ipv6RangePayload] = Field(
        default_factory=list["Ipv6RangePayload"], alias="ipv6Ranges"
    )

    _normalize_protocol = field_validator("ip_protocol", mode="before")(_protocol_text)
    _normalize_lists = field_validator(
        "user_id_group_pairs", "ipv4_ranges", "ipv6_ranges", mode="before"
    )(_none_to_list)


class ConfigurationPayload(AwsConfigBaseModel):
    """Union of the type-specific configuration parts the reconciliation reads."""

    associations: list[AssociationPayload] = Field(default_factory=list["AssociationPayload"])
    routes: list[RoutePayload] = Field(default_factory=list["RoutePayload"])
    entries: list[NetworkAclEntryPayload] = Field(default_factory=list["NetworkAclEntryPayload"])
    network_interface_ids: list[str] = Field(
        default_factory=list[str], alias="networkInterfaceIds"
    )
    description: str | None = None
    interface_type: str | None = Field(default=None, alias="interfaceType")
    association: NetworkInterfaceAssociationPayload | None = None
    attachment: NetworkInterfaceAttachmentPayload | None = None
    instances: list[AutoScalingInstancePayload] = Field(
        default_factory=list["AutoScalingInstancePayload"]
    )
    target_group_arns: list[str] = Field(
        default_factory=list[str],
        validation_alias=AliasChoices("targetGroupARNs", "targetGroupArns"),
    )
    namespace: str | None = None
    dimensions: list[DimensionPayload] = Field(default_factory=list["DimensionPayload"])
    launch_template_configs: list[LaunchTemplateConfigPayload] = Field(
        default_factory=list["LaunchTemplateConfigPayload"], alias="launchTemplateConfigs"
    )
    path: str | None = None
    db_cluster_identifier: str | None = Field(
        default=None,
        validation_alias=AliasChoices("dBClusterIdentifier", "dbClusterIdentifier"),
    )
    ip_permissions: list[IpPermissionPayload] = Field(
        default_factory=list["IpPermissionPayload"], alias="ipPermissions"
    )
    ip_permissions_egress: list[IpPermissionPayload] = Field(
        default_factory=list["IpPermissionPayload"], alias="ipPermissionsEgress"
    )

    _normalize_lists = field_validator(
        "associations",
        "routes",
        "entries",
        "network_interface_ids",
        "instances",
        "target_group_arns",
        "dimensions",
        "launch_template_configs",
        "ip_permissions",
        "ip_permissions_egress",
        mode="before",
    )(_none_to_list)


class UnsupportedResourcePayload(AwsConfigBaseModel):
    resource_type: str | None = Field(default=None, alias="resourceType")
    resource_id: str | None = Field(default=None, alias="resourceId")


class SupplementaryConfigurationPayload(AwsConfigBaseModel):
    unsupported_resources: list[UnsupportedResourcePayload] = Field(
        default_factory=list["UnsupportedResourcePayload"], alias="unsupportedResources"
    )

    @field_validator("unsupported_resources", mode="before")
    @classmethod
    def _decode_resources(cls, value: object) -> object:
        if isinstance(value, str):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                return []
        return _none_to_list(value)


class ConfigurationItemPayload(AwsConfigBaseModel):
    resource_type: str | None = Field(default=None, alias="resourceType")
    resource_id: str | None = Field(default=None, alias="resourceId")
    resource_name: str | None = Field(default=None, alias="resourceName")
    arn: str | None = Field(default=None, alias="ARN")
    aws_region: str | None = Field(default=None, alias="awsRegion")
    aws_account_id: str | None = Field(default=None, alias="awsAccountId")
    availability_zone: str | None = Field(default=None, alias="availabilityZone")
    configuration_item_status: str | None = Field(default=None, alias="configurationItemStatus")
    tags: dict[str, str] = Field(default_factory=dict[str, str])
    relationships: list[RelationshipPayload] = Field(default_factory=list["RelationshipPayload"])
    configuration: ConfigurationPayload = Field(default_factory=ConfigurationPayload)
    supplementary_configuration: SupplementaryConfigurationPayload = Field(
        default_factory=SupplementaryConfigurationPayload, alias="supplementaryConfiguration"
    )

    _normalize_text = field_validator(
        "resource_type",
        "resource_id",
        "resource_name",
        "arn",
        "aws_region",
        "aws_account_id",
        "availability_zone",
        mode="before",
    )(_blank_to_none)
    _normalize_lists = field_validator("relationships", mode="before")(_none_to_list)
    _decode_payloads = field_validator(
        "configuration", "supplementary_configuration", mode="before"
    )(_decode_json_object)

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value: object) -> object:
        if value is None:
            return {}
        if isinstance(value, Mapping):
            tags = cast(Mapping[object, object], value)
            return {str(key): "" if item is None else str(item) for key, item in tags.items()}
        return value


class SnapshotPayload(AwsConfigBaseModel):
    file_version: str | None = Field(default=None, alias="fileVersion")
    config_snapshot_id: str | None = Field(default=None, alias="configSnapshotId")
    configuration_items: list[ConfigurationItemPayload] = Field(
        default_factory=list["ConfigurationItemPayload"], alias="configurationItems"
    )

    _normalize_items = field_validator("configuration_items", mode="before")(_none_to_list)
