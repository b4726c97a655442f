from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from iacrecon.adapters.files import DocumentLoadError
from iacrecon.app import build_translator, reconcile_sources
from iacrecon.config import SourceConfig, TypeMapError
from iacrecon.domain.reconciliation import TypeTranslator

if TYPE_CHECKING:
    from pathlib import Path


def test_reconcile_sources_with_recursive_states(
    caplog: pytest.LogCaptureFixture, snapshot_path: Path, states_dir: Path
) -> None:
    config = SourceConfig(
        snapshot_path=snapshot_path,
        terraform_path=states_dir,
        terraform_recursive=True,
    )

    with caplog.at_level(logging.INFO, logger="iacrecon.app"):
        report = reconcile_sources(config)

    assert report.document_count == 2
    assert report.summary.both_count == 3
    assert (report.summary.config_count, report.summary.terraform_count) == (9, 6)
    (finished,) = [
        record for record in caplog.records if record.msg.startswith("Finished reconciliation")
    ]
    assert finished.args == (9, 6, 3)
    assert finished.getMessage() == "Finished reconciliation: config=9, terraform=6, both=3"


def test_reconcile_sources_snapshot_only(snapshot_path: Path) -> None:
    report = reconcile_sources(SourceConfig(snapshot_path=snapshot_path))

    assert report.document_count == 0
    assert report.summary.terraform_count == 0
    assert report.result.correlations == ()


def test_reconcile_sources_uses_given_translator(snapshot_path: Path, states_dir: Path) -> None:
    translator = TypeTranslator.from_mapping({"aws_vpc": "AWS::EC2::VPC"}, source="test")
    config = SourceConfig(
        snapshot_path=snapshot_path, terraform_path=states_dir / "network.tfstate"
    )

    report = reconcile_sources(config, translator=translator)

    config_source = report.summary.source("config")
    assert config_source is not None
    assert report.summary.both_count == 1
    # only the synthesized route table association keeps a mapped type
    assert config_source.only_mapped == 1
    assert config_source.only_unmapped == config_source.only - 1


def test_reconcile_sources_keeps_an_empty_translator(
    snapshot_path: Path, states_dir: Path
) -> None:
    translator = TypeTranslator.from_mapping({}, source="test")
    config = SourceConfig(
        snapshot_path=snapshot_path, terraform_path=states_dir / "network.tfstate"
    )

    report = reconcile_sources(config, translator=translator)

    config_source = report.summary.source("config")
    assert len(translator) == 0
    assert config_source is not None
    assert report.summary.both_count == 0
    assert config_source.only_mapped == 1


def test_reconcile_sources_propagates_load_errors(tmp_path: Path) -> None:
    with pytest.raises(DocumentLoadError):
        reconcile_sources(SourceConfig(snapshot_path=tmp_path / "absent.json"))


def test_build_translator(tmp_path: Path) -> None:
    typemap = tmp_path / "typemap.json"
    typemap.write_text('{"aws_vpc": "AWS::EC2::VPC"}', encoding="utf-8")

    assert len(build_translator(typemap)) == 1
    assert len(build_translator()) == len(TypeTranslator.default())
    with pytest.raises(TypeMapError):
        build_translator(tmp_path / "absent.json")
