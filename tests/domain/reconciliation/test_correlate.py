from __future__ import annotations

import pytest

from iacrecon.domain.model import IpPermission, ResourceConfiguration
from iacrecon.domain.reconciliation import (
    CorrelationStatus,
    DeclarativeCorrelator,
    TypeTranslator,
    is_aws_provider,
)
from iacrecon.domain.reconciliation import constants as c
from tests.helpers.inventory import index_items, make_document, make_instance, make_item

VPC_ARN = "arn:aws:ec2:us-east-1:123456789012:vpc/vpc-1"


@pytest.mark.parametrize(
    "provider",
    [
        "provider.aws",
        "provider.aws.west",
        "module.app.provider.aws",
        'provider["registry.terraform.io/hashicorp/aws"]',
        'provider["registry.terraform.io/hashicorp/aws"].west',
        'module.app.provider["registry.terraform.io/hashicorp/aws"]',
    ],
)
def test_aws_provider_forms(provider: str) -> None:
    assert is_aws_provider(provider)


@pytest.mark.parametrize(
    "provider",
    [
        'provider["registry.terraform.io/hashicorp/google"]',
        "provider.awsx",
        "",
    ],
)
def test_other_providers(provider: str) -> None:
    assert not is_aws_provider(provider)


def test_instance_matches_inventory_by_id(translator: TypeTranslator) -> None:
    index = index_items(make_item(c.EC2_INSTANCE, "i-1"))
    correlator = DeclarativeCorrelator(translator, index)

    (correlation,) = correlator.correlate(
        [make_document("main.tfstate", make_instance("aws_instance", {"id": "i-1"}))]
    )

    record = index.get(c.EC2_INSTANCE, "i-1")
    assert record is not None
    assert correlation.status is CorrelationStatus.MATCHED
    assert correlation.record == record.handle
    assert correlation.canonical_type == c.EC2_INSTANCE
    assert record.in_inventory
    assert record.in_declarative_state
    assert len(index) == 1


def test_instance_matches_inventory_by_arn(translator: TypeTranslator) -> None:
    index = index_items(make_item("AWS::EC2::VPC", "vpc-1", arn=VPC_ARN))
    correlator = DeclarativeCorrelator(translator, index)

    (correlation,) = correlator.correlate(
        [make_document("main.tfstate", make_instance("aws_vpc", {"arn": VPC_ARN, "id": "vpc-1"}))]
    )

    assert correlation.status is CorrelationStatus.MATCHED
    assert correlation.key == VPC_ARN
    assert len(index) == 1


def test_instance_matches_inventory_by_name(translator: TypeTranslator) -> None:
    index = index_items(make_item(c.IAM_ROLE, "AROA1", name="deploy"))
    correlator = DeclarativeCorrelator(translator, index)
    declared = make_instance(
        "aws_iam_role",
        {"arn": "arn:aws:iam::123456789012:role/deploy", "id": "deploy", "name": "deploy"},
    )

    (correlation,) = correlator.correlate([make_document("iam.tfstate", declared)])

    assert correlation.status is CorrelationStatus.MATCHED
    assert correlation.record == index.get(c.IAM_ROLE, "AROA1").handle  # type: ignore[union-attr]


def test_arn_wins_over_a_shared_name(translator: TypeTranslator) -> None:
    first_arn = "arn:aws:ec2:us-east-1:123456789012:security-group/sg-1"
    second_arn = "arn:aws:ec2:us-east-1:123456789012:security-group/sg-2"
    index = index_items(
        make_item(c.SECURITY_GROUP, "sg-1", arn=first_arn, name="default"),
        make_item(c.SECURITY_GROUP, "sg-2", arn=second_arn, name="default"),
    )
    correlator = DeclarativeCorrelator(translator, index)
    declared = make_instance(
        "aws_security_group", {"arn": second_arn, "id": "sg-2", "name": "default"}
    )

    (correlation,) = correlator.correlate([make_document("main.tfstate", declared)])

    first = index.get(c.SECURITY_GROUP, "sg-1")
    second = index.get(c.SECURITY_GROUP, "sg-2")
    assert first is not None
    assert second is not None
    assert correlation.status is CorrelationStatus.MATCHED
    assert correlation.record == second.handle
    assert second.in_declarative_state
    assert not first.in_declarative_state
    assert len(index) == 2


def test_id_wins_over_a_shared_name_when_inventory_lacks_the_arn(
    translator: TypeTranslator,
) -> None:
    index = index_items(
        make_item(c.SECURITY_GROUP, "sg-1", name="default"),
        make_item(c.SECURITY_GROUP, "sg-2", name="default"),
    )
    correlator = DeclarativeCorrelator(translator, index)
    declared = make_instance(
        "aws_security_group",
        {
            "arn": "arn:aws:ec2:us-east-1:123456789012:security-group/sg-2",
            "id": "sg-2",
            "name": "default",
        },
    )

    (correlation,) = correlator.correlate([make_document("main.tfstate", declared)])

    second = index.get(c.SECURITY_GROUP, "sg-2")
    assert second is not None
    assert correlation.record == second.handle
    assert not index.get(c.SECURITY_GROUP, "sg-1").in_declarative_state  # type: ignore[union-attr]


def test_unknown_instance_creates_declarative_only_record(translator: TypeTranslator) -> None:
    index = index_items()
    correlator = DeclarativeCorrelator(translator, index)

    correlations = correlator.correlate(
        [
            make_document(
                "main.tfstate",
                make_instance("aws_s3_bucket", {"id": "bucket"}),
                make_instance("aws_thing", {"id": "thing-1"}),
            )
        ]
    )

    assert [corr.status for corr in correlations] == [CorrelationStatus.CREATED] * 2
    bucket = index.get("AWS::S3::Bucket", "bucket")
    thing = index.get("aws_thing", "thing-1")
    assert bucket is not None
    assert thing is not None
    assert bucket.in_declarative_state
    assert not bucket.in_inventory
    assert bucket.type_is_mapped
    assert not thing.type_is_mapped


def test_instance_without_identity_is_skipped(translator: TypeTranslator) -> None:
    index = index_items()
    correlator = DeclarativeCorrelator(translator, index)

    (correlation,) = correlator.correlate(
        [make_document("main.tfstate", make_instance("aws_instance", {"ami": "ami-1"}))]
    )

    assert correlation.status is CorrelationStatus.SKIPPED
    assert correlation.reason == "missing_identity"
    assert len(index) == 0


def test_data_sources_and_other_providers_are_ignored(translator: TypeTranslator) -> None:
    index = index_items()
    correlator = DeclarativeCorrelator(translator, index)

    correlations = correlator.correlate(
        [
            make_document(
                "main.tfstate",
                make_instance("aws_ami", {"id": "ami-1"}, mode="data"),
                make_instance(
                    "google_storage_bucket",
                    {"id": "bucket"},
                    provider='provider["registry.terraform.io/hashicorp/google"]',
                ),
            )
        ]
    )

    assert correlations == ()
    assert len(index) == 0


def test_documents_are_processed_in_identifier_order(translator: TypeTranslator) -> None:
    index = index_items()
    correlator = DeclarativeCorrelator(translator, index)
    bucket = make_instance("aws_s3_bucket", {"id": "shared"})

    correlations = correlator.correlate(
        [make_document("b.tfstate", bucket), make_document("a.tfstate", bucket)]
    )

    assert [(corr.document, corr.status) for corr in correlations] == [
        ("a.tfstate", CorrelationStatus.CREATED),
        ("b.tfstate", CorrelationStatus.MATCHED),
    ]
    assert len(index) == 1


def test_structural_match_records_owner_only(translator: TypeTranslator) -> None:
    group = make_item(
        c.SECURITY_GROUP,
        "sg-1",
        configuration=ResourceConfiguration(
            ip_permissions=(IpPermission(ip_protocol="tcp", from_port=22, to_port=22),)
        ),
    )
    index = index_items(group)
    correlator = DeclarativeCorrelator(translator, index)
    rule = make_instance(
        c.TF_SECURITY_GROUP_RULE,
        {
            "id": "sgrule-1",
            "security_group_id": "sg-1",
            "type": "ingress",
            "protocol": "6",
            "from_port": 22,
            "to_port": 22,
        },
    )

    (correlation,) = correlator.correlate([make_document("main.tfstate", rule)])

    assert correlation.status is CorrelationStatus.STRUCTURAL
    assert correlation.parent_found
    assert correlation.record is None
    owner = index.get(c.SECURITY_GROUP, "sg-1")
    assert owner is not None
    assert correlation.parent == owner.handle
    assert len(index) == 1


def test_structural_miss_creates_unmapped_record(translator: TypeTranslator) -> None:
    index = index_items()
    correlator = DeclarativeCorrelator(translator, index)
    rule = make_instance(
        c.TF_SECURITY_GROUP_RULE,
        {"id": "sgrule-2", "security_group_id": "sg-404", "type": "ingress"},
    )

    (correlation,) = correlator.correlate([make_document("main.tfstate", rule)])

    record = index.get(c.TF_SECURITY_GROUP_RULE, "sgrule-2")
    assert correlation.status is CorrelationStatus.CREATED
    assert record is not None
    assert record.in_declarative_state
    assert not record.type_is_mapped


def test_invalid_structural_instance_is_skipped(translator: TypeTranslator) -> None:
    index = index_items(make_item(c.SECURITY_GROUP, "sg-1"))
    correlator = DeclarativeCorrelator(translator, index)
    rule = make_instance(
        c.TF_SECURITY_GROUP_RULE,
        {"id": "sgrule-3", "security_group_id": "sg-1", "type": "sideways"},
    )

    (correlation,) = correlator.correlate([make_document("main.tfstate", rule)])

    assert correlation.status is CorrelationStatus.SKIPPED
    assert index.get(c.TF_SECURITY_GROUP_RULE, "sgrule-3") is None


def test_custom_matchers_replace_defaults(translator: TypeTranslator) -> None:
    index = index_items()
    correlator = DeclarativeCorrelator(translator, index, matchers={})
    declared = make_instance(c.TF_ROUTE53_RECORD, {"id": "Z1_www_A"})

    (correlation,) = correlator.correlate([make_document("dns.tfstate", declared)])

    assert correlation.status is CorrelationStatus.CREATED
