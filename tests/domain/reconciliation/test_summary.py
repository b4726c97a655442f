from __future__ import annotations

from typing import TYPE_CHECKING

from iacrecon.adapters.files import load_snapshot, load_states
from iacrecon.domain.model import ReconciledRecord
from iacrecon.domain.reconciliation import SOURCE_KEYS, ReconciliationEngine, summarize
from iacrecon.domain.reconciliation import constants as c

if TYPE_CHECKING:
    from pathlib import Path

    from iacrecon.domain.reconciliation import TypeTranslator


def make_record(
    handle: int,
    resource_type: str = c.EC2_INSTANCE,
    *,
    config: bool = False,
    terraform: bool = False,
    mapped: bool = True,
    parent: int | None = None,
) -> ReconciledRecord:
    return ReconciledRecord(
        handle=handle,
        resource_type=resource_type,
        key=f"key-{handle}",
        in_inventory=config,
        in_declarative_state=terraform,
        type_is_mapped=mapped,
        parent=parent,
    )


def test_source_keys_are_stable() -> None:
    assert SOURCE_KEYS == ("config", "terraform", "owned")


def test_counts_split_by_source() -> None:
    summary = summarize(
        [
            make_record(0, config=True, terraform=True),
            make_record(1, config=True),
            make_record(2, c.SECURITY_GROUP, config=True, mapped=False),
            make_record(3, "aws_security_group_rule", terraform=True, mapped=False),
            make_record(4, "AWS::S3::Bucket", terraform=True),
        ]
    )

    config = summary.source("config")
    terraform = summary.source("terraform")
    assert config is not None
    assert terraform is not None
    assert summary.both_count == 1
    assert (summary.config_count, summary.terraform_count) == (3, 3)
    assert (config.total, config.only, config.only_mapped, config.only_unmapped) == (3, 2, 1, 1)
    assert (terraform.total, terraform.only, terraform.only_mapped, terraform.only_unmapped) == (
        3,
        2,
        1,
        1,
    )
    assert summary.source("owned") is None


def test_ephemeral_records_are_never_counted() -> None:
    summary = summarize([make_record(0, c.SERVICE), make_record(1, config=True, parent=0)])

    assert [row.resource_type for row in summary.by_type] == [c.EC2_INSTANCE]
    assert summary.config_count == 1


def test_type_rows_are_sorted_and_count_owned_records() -> None:
    summary = summarize(
        [
            make_record(0, c.SECURITY_GROUP, config=True),
            make_record(1, c.EC2_INSTANCE, config=True, terraform=True),
            make_record(2, c.EBS_VOLUME, config=True, parent=1),
            make_record(3, c.EBS_VOLUME, config=True),
        ]
    )

    assert [row.resource_type for row in summary.by_type] == [
        c.EC2_INSTANCE,
        c.SECURITY_GROUP,
        c.EBS_VOLUME,
    ]
    volumes = summary.by_type[2]
    assert (volumes.count, volumes.single_only, volumes.both) == (2, 2, 0)
    assert volumes.sources == {"config": 2, "terraform": 0, "owned": 1}


def test_summary_of_fixture_run(
    translator: TypeTranslator, snapshot_path: Path, states_dir: Path
) -> None:
    result = ReconciliationEngine(translator).reconcile(
        load_snapshot(snapshot_path), load_states(states_dir, recursive=True)
    )

    summary = summarize(result.records)

    config = summary.source("config")
    terraform = summary.source("terraform")
    assert config is not None
    assert terraform is not None
    assert summary.both_count == 3
    assert (config.total, config.only, config.only_mapped, config.only_unmapped) == (9, 6, 6, 0)
    assert (terraform.total, terraform.only, terraform.only_mapped, terraform.only_unmapped) == (
        6,
        3,
        2,
        1,
    )
    assert sum(row.count for row in summary.by_type) == 12
    assert sum(row.sources["owned"] for row in summary.by_type) == 9
