"""Structural matching for declared sub-resources without an identity of their own.

Security group rules, network ACL rules, routes, policy attachments and ASG
attachments exist in the inventory only as entries inside their owner's
configuration. They are found by resolving the owner and scanning its entries
for one whose fields match the declaration.

Security group rules require *full* coverage of the declared CIDR ranges: a
rule whose ranges are only partly present on the inventory side is not
found. This is a policy choice, kept strict on purpose.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Final

from . import constants as c
from .contracts import StructuralMatch, StructuralStatus

if TYPE_CHECKING:
    from iacrecon.domain.model import DeclarativeInstance, IpPermission, ReconciledRecord

    from .index import IdentityIndex


type StructuralMatcher = Callable[[DeclarativeInstance, IdentityIndex], StructuralMatch]

_PROTOCOL_NAMES: Final[dict[str, str]] = {
    "6": "tcp",
    "17": "udp",
    "1": "icmp",
    "58": "icmpv6",
    "all": "-1",
}


def normalize_protocol(value: object) -> str:
    """Canonical protocol name: ``tcp``, ``udp``, ``icmp``, ``-1`` (all), or as given."""

    text = str(value).strip().lower() if value is not None else ""
    return _PROTOCOL_NAMES.get(text, text)


def _as_int(value: object, default: int = 0) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return default
    return default


def _as_bool(value: object) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


def _found(parent: ReconciledRecord | None, reason: str) -> StructuralMatch:
    return StructuralMatch(
        status=StructuralStatus.FOUND,
        parent=None if parent is None else parent.handle,
        reason=reason,
    )


def _missing(reason: str) -> StructuralMatch:
    return StructuralMatch(status=StructuralStatus.MISSING, reason=reason)


def _owner(index: IdentityIndex, resource_type: str, key: str) -> ReconciledRecord | None:
    if not key:
        return None
    owner = index.lookup(resource_type, key)
    if owner is None or owner.inventory is None:
        return None
    return owner


def match_security_group_rule(
    instance: DeclarativeInstance, index: IdentityIndex
) -> StructuralMatch:
    group = _owner(index, c.SECURITY_GROUP, instance.text("security_group_id"))
    if group is None or group.inventory is None:
        return _missing("security_group_not_found")

    direction = instance.text("type")
    configuration = group.inventory.configuration
    if direction == c.INGRESS:
        permissions = configuration.ip_permissions
    elif direction == c.EGRESS:
        permissions = configuration.ip_permissions_egress
    else:
        return StructuralMatch(
            status=StructuralStatus.INVALID,
            reason=f"unknown security group rule type {direction!r}",
        )

    from_port = _as_int(instance.attributes.get("from_port"))
    to_port = _as_int(instance.attributes.get("to_port"))
    protocol = normalize_protocol(instance.attributes.get("protocol"))
    for permission in permissions:
        if (
            permission.from_port != from_port
            or permission.to_port != to_port
            or normalize_protocol(permission.ip_protocol) != protocol
        ):
            continue
        if _peer_covered(permission, instance):
            return _found(group, "security_group_permission")
    return _missing("no_matching_permission")


def _peer_covered(permission: IpPermission, instance: DeclarativeInstance) -> bool:
    description = instance.text("description")
    source_group = instance.text("source_security_group_id")
    if source_group:
        return any(
            pair.group_id == source_group and pair.description == description
            for pair in permission.group_pairs
        )

    ipv4 = set(instance.strings("cidr_blocks"))
    ipv6 = set(instance.strings("ipv6_cidr_blocks"))
    if not ipv4 and not ipv6:
        # self-referencing and prefix-list rules: ports and protocol decide
        return True
    covered_ipv4 = {r.cidr for r in permission.ipv4_ranges if r.description == description}
    covered_ipv6 = {r.cidr for r in permission.ipv6_ranges if r.description == description}
    return ipv4 <= covered_ipv4 and ipv6 <= covered_ipv6


def match_network_acl_rule(instance: DeclarativeInstance, index: IdentityIndex) -> StructuralMatch:
    acl = _owner(index, c.NETWORK_ACL, instance.text("network_acl_id"))
    if acl is None or acl.inventory is None:
        return _missing("network_acl_not_found")

    declared = (
        instance.text("cidr_block"),
        instance.text("ipv6_cidr_block"),
        _as_bool(instance.attributes.get("egress")),
        normalize_protocol(instance.attributes.get("protocol")),
        instance.text("rule_action").lower(),
        _as_int(instance.attributes.get("rule_number"), default=-1),
    )
    for entry in acl.inventory.configuration.entries:
        observed = (
            entry.cidr_block,
            entry.ipv6_cidr_block,
            entry.egress,
            normalize_protocol(entry.protocol),
            entry.rule_action.lower(),
            entry.rule_number,
        )
        if observed == declared:
            return _found(acl, "network_acl_entry")
    return _missing("no_matching_entry")


def match_route(instance: DeclarativeInstance, index: IdentityIndex) -> StructuralMatch:
    table = _owner(index, c.ROUTE_TABLE, instance.text("route_table_id"))
    if table is None or table.inventory is None:
        return _missing("route_table_not_found")

    declared = (
        instance.text("destination_cidr_block"),
        instance.text("origin"),
        instance.text("vpc_peering_connection_id"),
        instance.text("gateway_id"),
        instance.text("nat_gateway_id"),
    )
    for route in table.inventory.configuration.routes:
        observed = (
            route.destination_cidr_block,
            route.origin,
            route.vpc_peering_connection_id,
            route.gateway_id,
            route.nat_gateway_id,
        )
        if observed == declared:
            return _found(table, "route")
    return _missing("no_matching_route")


def match_role_policy_attachment(
    instance: DeclarativeInstance, index: IdentityIndex
) -> StructuralMatch:
    role_key = instance.text("role")
    role = _owner(index, c.IAM_ROLE, role_key)
    policy_arn = instance.text("policy_arn")
    policy = index.get_by_arn(c.IAM_POLICY, policy_arn) if policy_arn else None
    if role is None or policy is None or policy.inventory is None:
        return _missing("role_or_policy_not_found")

    role_ids = {role_key, role.resource_id} - {""}
    for relationship in policy.inventory.relationships:
        if (
            relationship.resource_type == c.IAM_ROLE
            and relationship.relation_name.strip() == c.RELATION_ROLE_ATTACHED
            and relationship.resource_id in role_ids
        ):
            return _found(role, "policy_attached_to_role")
    return _missing("policy_not_attached")


def match_autoscaling_attachment(
    instance: DeclarativeInstance, index: IdentityIndex
) -> StructuralMatch:
    group = _owner(index, c.AUTO_SCALING_GROUP, instance.text("autoscaling_group_name"))
    if group is None or group.inventory is None:
        return _missing("auto_scaling_group_not_found")

    declared = {instance.text("alb_target_group_arn"), instance.text("lb_target_group_arn")} - {""}
    if declared & set(group.inventory.configuration.target_group_arns):
        return _found(group, "target_group_attached")
    return _missing("target_group_not_attached")


def match_route53_record(_instance: DeclarativeInstance, _index: IdentityIndex) -> StructuralMatch:
    # AWS Config does not record record sets at all
    return _found(None, "untracked_by_inventory")


STRUCTURAL_MATCHERS: Final[dict[str, StructuralMatcher]] = {
    c.TF_SECURITY_GROUP_RULE: match_security_group_rule,
    c.TF_NETWORK_ACL_RULE: match_network_acl_rule,
    c.TF_ROUTE: match_route,
    c.TF_ROLE_POLICY_ATTACHMENT: match_role_policy_attachment,
    c.TF_ASG_ATTACHMENT: match_autoscaling_attachment,
    c.TF_ROUTE53_RECORD: match_route53_record,
}


def default_matchers() -> dict[str, StructuralMatcher]:
    return dict(STRUCTURAL_MATCHERS)
