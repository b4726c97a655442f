"""Per-resource-type ownership rules and their default evaluation order."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, ClassVar

from . import constants as c

if TYPE_CHECKING:
    from collections.abc import Mapping

    from iacrecon.domain.model import InventoryRecord, ReconciledRecord

    from .index import IdentityIndex
    from .ownership import OwnershipRule

log = getLogger(__name__)

_UUID_SIZE = len(str(uuid.UUID(int=0)))


def cluster_owner(tags: Mapping[str, str]) -> str | None:
    """Return the EKS cluster named by a ``kubernetes.io/cluster/<name>=owned`` tag."""

    for tag_name, tag_value in sorted(tags.items()):
        if tag_name.startswith(c.EKS_CLUSTER_OWNER_TAG_PREFIX) and tag_value == c.EKS_CLUSTER_OWNED:
            cluster = tag_name.removeprefix(c.EKS_CLUSTER_OWNER_TAG_PREFIX)
            if cluster:
                return cluster
    return None


def strip_uuid_suffix(value: str) -> str:
    """Drop a trailing UUID, and the separator before it, if ``value`` ends with one."""

    if len(value) <= _UUID_SIZE:
        return value
    try:
        uuid.UUID(value[-_UUID_SIZE:])
    except ValueError:
        return value
    return value[:-_UUID_SIZE].removesuffix("-")


def _adopt(index: IdentityIndex, child: ReconciledRecord, parent: ReconciledRecord | None) -> None:
    if parent is None:
        return
    if index.assign_parent(child, parent):
        log.debug(
            "%s %s is owned by %s %s",
            child.resource_type,
            child.resource_id or child.arn,
            parent.resource_type,
            parent.resource_id or parent.arn,
        )


class TypedRule:
    """Base for rules that claim a fixed set of resource types."""

    name: ClassVar[str]
    resource_types: ClassVar[frozenset[str]]

    def matches(self, resource_type: str) -> bool:
        return resource_type in self.resource_types


class ContainerStackRule(TypedRule):
    """CloudFormation stacks and Beanstalk applications own what they contain.

    Contained resources the snapshot never listed get a placeholder record so
    a later declarative match can still see the owner.
    """

    name = "container-stack"
    resource_types = frozenset({c.CLOUDFORMATION_STACK, c.ELASTIC_BEANSTALK_APPLICATION})

    def infer(self, item: InventoryRecord, record: ReconciledRecord, index: IdentityIndex) -> None:
        for relationship in item.relationships:
            if not relationship.resource_type:
                log.warning(
                    "Empty resource type in relationship of %s %s", item.resource_type, item.key
                )
                continue
            if relationship.relation_name.strip() != c.RELATION_CONTAINS:
                continue
            key = relationship.key
            if not key:
                log.warning(
                    "Empty resource id in relationship of %s %s", item.resource_type, item.key
                )
                continue
            child = index.lookup(relationship.resource_type, key) or index.get_or_create(
                relationship.resource_type,
                key,
                resource_id=relationship.resource_id,
                resource_name=relationship.resource_name,
            )
            _adopt(index, child, record)

        for resource in item.supplementary.unsupported_resources:
            if not resource.resource_type:
                log.warning("Empty resource type for unsupported resource %s", resource.resource_id)
                continue
            if not resource.resource_id:
                log.warning("Empty resource id for unsupported resource %s", resource.resource_type)
                continue
            child = index.lookup(resource.resource_type, resource.resource_id)
            if child is None:
                child = index.get_or_create(resource.resource_type, resource.resource_id)
            _adopt(index, child, record)


class EksNetworkInterfaceRule(TypedRule):
    """ENIs created by the EKS VPC resource controller belong to their cluster."""

    name = "eks-network-interface"
    resource_types = frozenset({c.NETWORK_INTERFACE})

    def infer(self, item: InventoryRecord, record: ReconciledRecord, index: IdentityIndex) -> None:
        if item.tags.get(c.EKS_ENI_OWNER_TAG) != c.EKS_ENI_OWNER_VALUE:
            return
        cluster = cluster_owner(item.tags)
        if cluster is None:
            return
        _adopt(index, record, index.lookup(c.EKS_CLUSTER, cluster))


class EksOwnedResourceRule(TypedRule):
    """Security groups, volumes and classic ELBs tagged as owned by an EKS cluster."""

    name = "eks-owned-resource"
    resource_types = frozenset({c.SECURITY_GROUP, c.EBS_VOLUME, c.ELB})

    def infer(self, item: InventoryRecord, record: ReconciledRecord, index: IdentityIndex) -> None:
        cluster = cluster_owner(item.tags)
        if cluster is None:
            return
        _adopt(index, record, index.lookup(c.EKS_CLUSTER, cluster))


class EksLoadBalancerV2Rule(TypedRule):
    name = "eks-load-balancer-v2"
    resource_types = frozenset({c.ELBV2})

    def infer(self, item: InventoryRecord, record: ReconciledRecord, index: IdentityIndex) -> None:
        cluster = item.tags.get(c.EKS_ELBV2_CLUSTER_TAG) or cluster_owner(item.tags)
        if not cluster:
            return
        _adopt(index, record, index.lookup(c.EKS_CLUSTER, cluster))


class VpcEndpointInterfacesRule(TypedRule):
    """A VPC endpoint owns every interface in its configured interface list."""

    name = "vpc-endpoint-interfaces"
    resource_types = frozenset({c.VPC_ENDPOINT})

    def infer(self, item: InventoryRecord, record: ReconciledRecord, index: IdentityIndex) -> None:
        for interface_id in item.configuration.network_interface_ids:
            interface = index.get(c.NETWORK_INTERFACE, interface_id)
            if interface is None:
                log.warning("Found unknown resource: %s %s", c.NETWORK_INTERFACE, interface_id)
                continue
            _adopt(index, interface, record)


class RdsNetworkInterfaceRule(TypedRule):
    """RDS interfaces carry a fixed description and nothing that names the instance.

    They are attributed to one shared placeholder RDS instance.
    """

    name = "rds-network-interface"
    resource_types = frozenset({c.NETWORK_INTERFACE})

    def infer(self, item: InventoryRecord, record: ReconciledRecord, index: IdentityIndex) -> None:
        if item.configuration.description != c.RDS_ENI_DESCRIPTION:
            return
        placeholder = index.get_or_create(c.RDS_INSTANCE, c.RDS_ENI_DESCRIPTION, resource_id="")
        _adopt(index, record, placeholder)


class LoadBalancerInterfaceRule(TypedRule):
    """Interfaces of classic and network load balancers.

    The description only carries the balancer name, so the classic ELB is
    tried first and the v2 ARN is rebuilt from the interface's own region and
    account otherwise.
    """

    name = "load-balancer-interface"
    resource_types = frozenset({c.NETWORK_INTERFACE})

    def infer(self, item: InventoryRecord, record: ReconciledRecord, index: IdentityIndex) -> None:
        config = item.configuration
        if not config.description.startswith(c.ELB_DESCRIPTION_PREFIX):
            return
        if not (
            config.association_ip_owner_id == c.ELB_OWNER
            or config.attachment_instance_owner_id == c.ELB_OWNER
            or config.interface_type == c.NLB_INTERFACE_TYPE
        ):
            return
        balancer = config.description.removeprefix(c.ELB_DESCRIPTION_PREFIX)
        parent = index.lookup(c.ELB, balancer)
        if parent is None and item.region and item.account_id:
            arn = f"{c.ELBV2_ARN_PREFIX}:{item.region}:{item.account_id}:loadbalancer/{balancer}"
            parent = index.get(c.ELBV2, arn) or index.get_by_arn(c.ELBV2, arn)
        _adopt(index, record, parent)


class LambdaInterfaceRule(TypedRule):
    name = "lambda-interface"
    resource_types = frozenset({c.NETWORK_INTERFACE})

    def infer(self, item: InventoryRecord, record: ReconciledRecord, index: IdentityIndex) -> None:
        description = item.configuration.description
        if not description.startswith(c.LAMBDA_DESCRIPTION_PREFIX):
            return
        function = strip_uuid_suffix(description.removeprefix(c.LAMBDA_DESCRIPTION_PREFIX))
        _adopt(index, record, index.lookup(c.LAMBDA_FUNCTION, function))


@dataclass(frozen=True, slots=True)
class DescriptionPrefixRule:
    """Interfaces whose description is ``<prefix><parent id or name>``."""

    name: str
    prefix: str
    parent_type: str

    resource_types: ClassVar[frozenset[str]] = frozenset({c.NETWORK_INTERFACE})

    def matches(self, resource_type: str) -> bool:
        return resource_type in self.resource_types

    def infer(self, item: InventoryRecord, record: ReconciledRecord, index: IdentityIndex) -> None:
        description = item.configuration.description
        if not description.startswith(self.prefix):
            return
        _adopt(index, record, index.lookup(self.parent_type, description.removeprefix(self.prefix)))


class NodeInterfaceRule(TypedRule):
    """Interfaces tagged with the Kubernetes node they were created for."""

    name = "node-interface"
    resource_types = frozenset({c.NETWORK_INTERFACE})

    def infer(self, item: InventoryRecord, record: ReconciledRecord, index: IdentityIndex) -> None:
        node = item.tags.get(c.K8S_INSTANCE_TAG)
        if not node:
            return
        _adopt(index, record, index.get(c.EC2_INSTANCE, node))


class InstanceInterfacesRule(TypedRule):
    """An instance owns the interfaces listed in its relationships."""

    name = "instance-interfaces"
    resource_types = frozenset({c.EC2_INSTANCE})

    def infer(self, item: InventoryRecord, record: ReconciledRecord, index: IdentityIndex) -> None:
        for relationship in item.relationships:
            if relationship.resource_type != c.NETWORK_INTERFACE:
                continue
            interface = index.get(c.NETWORK_INTERFACE, relationship.resource_id)
            if interface is not None:
                _adopt(index, interface, record)


class VolumeAttachmentRule(TypedRule):
    """Volumes are owned by the instance they are attached to.

    A cluster ownership tag takes precedence, even when the cluster itself is
    missing from the inventory.
    """

    name = "volume-attachment"
    resource_types = frozenset({c.EBS_VOLUME})

    def infer(self, item: InventoryRecord, record: ReconciledRecord, index: IdentityIndex) -> None:
        if cluster_owner(item.tags) is not None:
            return
        for relationship in item.relationships:
            if not relationship.resource_type:
                log.warning(
                    "Empty resource type in relationship of %s %s", item.resource_type, item.key
                )
                continue
            if relationship.relation_name.strip() != c.RELATION_ATTACHED_TO_INSTANCE:
                continue
            parent = index.lookup(relationship.resource_type, relationship.key)
            if parent is None:
                log.warning(
                    "Found unknown resource: %s %s", relationship.resource_type, relationship.key
                )
                continue
            _adopt(index, record, parent)
            return


class AutoScalingInstancesRule(TypedRule):
    name = "auto-scaling-instances"
    resource_types = frozenset({c.AUTO_SCALING_GROUP})

    def infer(self, item: InventoryRecord, record: ReconciledRecord, index: IdentityIndex) -> None:
        for instance_id in item.configuration.instance_ids:
            instance = index.get(c.EC2_INSTANCE, instance_id)
            if instance is None:
                log.warning("Found unknown resource: %s %s", c.EC2_INSTANCE, instance_id)
                continue
            _adopt(index, instance, record)


class LoadBalancerAlarmRule(TypedRule):
    """CloudWatch alarms in the ELB namespace belong to the balancer they watch."""

    name = "load-balancer-alarm"
    resource_types = frozenset({c.CLOUDWATCH_ALARM})

    def infer(self, item: InventoryRecord, record: ReconciledRecord, index: IdentityIndex) -> None:
        if item.configuration.namespace != c.CLOUDWATCH_NAMESPACE_ELB:
            return
        balancer = item.configuration.dimension(c.DIMENSION_LOAD_BALANCER_NAME)
        if not balancer:
            return
        _adopt(index, record, index.lookup(c.ELB, balancer))


class FleetLaunchTemplateRule(TypedRule):
    name = "fleet-launch-template"
    resource_types = frozenset({c.EC2_FLEET})

    def infer(self, item: InventoryRecord, record: ReconciledRecord, index: IdentityIndex) -> None:
        for template_id in item.configuration.launch_template_ids:
            template = index.get(c.LAUNCH_TEMPLATE, template_id)
            if template is not None:
                _adopt(index, record, template)
                return


class ServiceLinkedRoleRule(TypedRule):
    """Service-linked roles hang off one synthetic node per AWS service."""

    name = "service-linked-role"
    resource_types = frozenset({c.IAM_ROLE})

    def infer(self, item: InventoryRecord, record: ReconciledRecord, index: IdentityIndex) -> None:
        path = item.configuration.path
        if not path.startswith(c.SERVICE_LINKED_ROLE_PATH_PREFIX):
            return
        service = path.removeprefix(c.SERVICE_LINKED_ROLE_PATH_PREFIX).removesuffix("/")
        if not service:
            return
        _adopt(index, record, index.get_or_create(c.SERVICE, service))


class ClusterSnapshotRule(TypedRule):
    name = "rds-cluster-snapshot"
    resource_types = frozenset({c.RDS_CLUSTER_SNAPSHOT})

    def infer(self, item: InventoryRecord, record: ReconciledRecord, index: IdentityIndex) -> None:
        cluster = item.configuration.db_cluster_identifier
        if not cluster:
            return
        _adopt(index, record, index.lookup(c.RDS_CLUSTER, cluster))


DEFAULT_RULES: tuple[OwnershipRule, ...] = (
    ContainerStackRule(),
    EksNetworkInterfaceRule(),
    EksOwnedResourceRule(),
    EksLoadBalancerV2Rule(),
    VpcEndpointInterfacesRule(),
    RdsNetworkInterfaceRule(),
    LoadBalancerInterfaceRule(),
    LambdaInterfaceRule(),
    DescriptionPrefixRule(
        name="nat-gateway-interface",
        prefix=c.NAT_GATEWAY_DESCRIPTION_PREFIX,
        parent_type=c.NAT_GATEWAY,
    ),
    DescriptionPrefixRule(
        name="transit-gateway-interface",
        prefix=c.TRANSIT_GATEWAY_DESCRIPTION_PREFIX,
        parent_type=c.TRANSIT_GATEWAY_ATTACHMENT,
    ),
    DescriptionPrefixRule(
        name="elasticache-interface",
        prefix=c.ELASTICACHE_DESCRIPTION_PREFIX,
        parent_type=c.ELASTICACHE_CLUSTER,
    ),
    NodeInterfaceRule(),
    InstanceInterfacesRule(),
    VolumeAttachmentRule(),
    AutoScalingInstancesRule(),
    LoadBalancerAlarmRule(),
    FleetLaunchTemplateRule(),
    ServiceLinkedRoleRule(),
    ClusterSnapshotRule(),
)
