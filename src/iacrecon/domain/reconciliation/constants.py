"""Resource type names, tag names and sentinels used while reconciling."""

from __future__ import annotations

from typing import Final

# AWS Config resource types
CONFIG_COMPLIANCE: Final = "AWS::Config::ResourceCompliance"
AUTO_SCALING_GROUP: Final = "AWS::AutoScaling::AutoScalingGroup"
CLOUDFORMATION_STACK: Final = "AWS::CloudFormation::Stack"
CLOUDWATCH_ALARM: Final = "AWS::CloudWatch::Alarm"
EBS_VOLUME: Final = "AWS::EC2::Volume"
EC2_FLEET: Final = "AWS::EC2::EC2Fleet"
EC2_INSTANCE: Final = "AWS::EC2::Instance"
EKS_CLUSTER: Final = "AWS::EKS::Cluster"
ELASTICACHE_CLUSTER: Final = "AWS::ElastiCache::CacheCluster"
ELASTIC_BEANSTALK_APPLICATION: Final = "AWS::ElasticBeanstalk::Application"
ELB: Final = "AWS::ElasticLoadBalancing::LoadBalancer"
ELBV2: Final = "AWS::ElasticLoadBalancingV2::LoadBalancer"
IAM_POLICY: Final = "AWS::IAM::Policy"
IAM_ROLE: Final = "AWS::IAM::Role"
LAMBDA_FUNCTION: Final = "AWS::Lambda::Function"
LAUNCH_TEMPLATE: Final = "AWS::EC2::LaunchTemplate"
NAT_GATEWAY: Final = "AWS::EC2::NatGateway"
NETWORK_ACL: Final = "AWS::EC2::NetworkAcl"
NETWORK_INTERFACE: Final = "AWS::EC2::NetworkInterface"
RDS_CLUSTER: Final = "AWS::RDS::DBCluster"
RDS_CLUSTER_SNAPSHOT: Final = "AWS::RDS::DBClusterSnapshot"
RDS_INSTANCE: Final = "AWS::RDS::DBInstance"
ROUTE_TABLE: Final = "AWS::EC2::RouteTable"
ROUTE_TABLE_ASSOCIATION: Final = "AWS::EC2::SubnetRouteTableAssociation"
SECURITY_GROUP: Final = "AWS::EC2::SecurityGroup"
TRANSIT_GATEWAY_ATTACHMENT: Final = "AWS::EC2::TransitGatewayAttachment"
VPC_ENDPOINT: Final = "AWS::EC2::VPCEndpoint"
# synthetic parent of service-linked roles; never reported by AWS Config
SERVICE: Final = "AWS::IAM::ServiceLinkedRoleService"

# Terraform resource types without an identity of their own
TF_SECURITY_GROUP_RULE: Final = "aws_security_group_rule"
TF_NETWORK_ACL_RULE: Final = "aws_network_acl_rule"
TF_ROUTE: Final = "aws_route"
TF_ROLE_POLICY_ATTACHMENT: Final = "aws_iam_role_policy_attachment"
TF_ASG_ATTACHMENT: Final = "aws_autoscaling_attachment"
TF_ROUTE53_RECORD: Final = "aws_route53_record"

# Terraform providers
TF_AWS_PROVIDER: Final = "provider.aws"
TF_AWS_REGISTRY_PROVIDER: Final = 'provider["registry.terraform.io/hashicorp/aws"]'

# relationship names
RELATION_CONTAINS: Final = "Contains"
RELATION_ATTACHED_TO_INSTANCE: Final = "Is attached to Instance"
RELATION_ROLE_ATTACHED: Final = "Is attached to Role"

# tags
EKS_CLUSTER_OWNER_TAG_PREFIX: Final = "kubernetes.io/cluster/"
EKS_CLUSTER_OWNED: Final = "owned"
EKS_ENI_OWNER_TAG: Final = "eks:eni:owner"
EKS_ENI_OWNER_VALUE: Final = "eks-vpc-resource-controller"
EKS_ELBV2_CLUSTER_TAG: Final = "elbv2.k8s.aws/cluster"
K8S_INSTANCE_TAG: Final = "node.k8s.amazonaws.com/instance_id"

# network interface descriptions and owners
RDS_ENI_DESCRIPTION: Final = "RDSNetworkInterface"
ELB_DESCRIPTION_PREFIX: Final = "ELB "
ELB_OWNER: Final = "amazon-elb"
NLB_INTERFACE_TYPE: Final = "network_load_balancer"
ELBV2_ARN_PREFIX: Final = "arn:aws:elasticloadbalancing"
LAMBDA_DESCRIPTION_PREFIX: Final = "AWS Lambda VPC ENI-"
NAT_GATEWAY_DESCRIPTION_PREFIX: Final = "Interface for NAT Gateway "
TRANSIT_GATEWAY_DESCRIPTION_PREFIX: Final = "Network Interface for Transit Gateway Attachment "
ELASTICACHE_DESCRIPTION_PREFIX: Final = "ElastiCache "

# cloudwatch
CLOUDWATCH_NAMESPACE_ELB: Final = "AWS/ELB"
DIMENSION_LOAD_BALANCER_NAME: Final = "LoadBalancerName"

# IAM
SERVICE_LINKED_ROLE_PATH_PREFIX: Final = "/aws-service-role/"

# security group rule directions
INGRESS: Final = "ingress"
EGRESS: Final = "egress"
