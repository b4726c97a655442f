from __future__ import annotations

from pathlib import Path

import pytest

from iacrecon.config import (
    AWS_CONFIG_ENV,
    TERRAFORM_ENV,
    TF_RECURSIVE_ENV,
    TYPEMAP_ENV,
    ConfigurationError,
    MissingConfigurationError,
    SourceConfig,
    get_source_config,
)


def test_explicit_values(tmp_path: Path) -> None:
    config = get_source_config(
        aws_config=str(tmp_path / "snapshot.json"),
        terraform=str(tmp_path / "states"),
        tf_recursive=True,
        typemap=str(tmp_path / "typemap.json"),
    )

    assert config == SourceConfig(
        snapshot_path=tmp_path / "snapshot.json",
        terraform_path=tmp_path / "states",
        terraform_recursive=True,
        typemap_path=tmp_path / "typemap.json",
    )


def test_snapshot_is_the_only_required_source() -> None:
    config = get_source_config(aws_config="snapshot.json")

    assert config.snapshot_path == Path("snapshot.json")
    assert config.terraform_path is None
    assert config.terraform_recursive is False
    assert config.typemap_path is None


def test_missing_snapshot_names_the_variable() -> None:
    with pytest.raises(MissingConfigurationError) as exc:
        get_source_config(terraform="main.tfstate")

    assert AWS_CONFIG_ENV in str(exc.value)


def test_environment_fallback(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(AWS_CONFIG_ENV, "env-snapshot.json")
    monkeypatch.setenv(TERRAFORM_ENV, "env-states")
    monkeypatch.setenv(TF_RECURSIVE_ENV, "true")
    monkeypatch.setenv(TYPEMAP_ENV, "env-typemap.json")

    config = get_source_config()

    assert config.snapshot_path == Path("env-snapshot.json")
    assert config.terraform_path == Path("env-states")
    assert config.terraform_recursive is True
    assert config.typemap_path == Path("env-typemap.json")


def test_explicit_values_win_over_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(AWS_CONFIG_ENV, "env-snapshot.json")
    monkeypatch.setenv(TERRAFORM_ENV, "env-states")
    monkeypatch.setenv(TF_RECURSIVE_ENV, "true")

    config = get_source_config(aws_config="cli.json", terraform="cli.tfstate", tf_recursive=False)

    assert config.snapshot_path == Path("cli.json")
    assert config.terraform_path == Path("cli.tfstate")
    assert config.terraform_recursive is False


def test_recursive_requires_terraform_path() -> None:
    with pytest.raises(ConfigurationError):
        get_source_config(aws_config="snapshot.json", tf_recursive=True)


def test_home_is_expanded(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))

    config = get_source_config(aws_config="~/snapshot.json")

    assert config.snapshot_path == tmp_path / "snapshot.json"
