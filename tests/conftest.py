from __future__ import annotations

import json
from pathlib import Path

import pytest

from iacrecon.config import AWS_CONFIG_ENV, TERRAFORM_ENV, TF_RECURSIVE_ENV, TYPEMAP_ENV
from iacrecon.domain.reconciliation import TypeTranslator

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (AWS_CONFIG_ENV, TERRAFORM_ENV, TF_RECURSIVE_ENV, TYPEMAP_ENV):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(scope="session")
def translator() -> TypeTranslator:
    return TypeTranslator.default()


@pytest.fixture(scope="session")
def data_dir() -> Path:
    return DATA_DIR


@pytest.fixture
def snapshot_path() -> Path:
    return DATA_DIR / "aws_config_snapshot.json"


@pytest.fixture
def states_dir() -> Path:
    return DATA_DIR / "states"


@pytest.fixture
def snapshot_payload(snapshot_path: Path) -> dict[str, object]:
    with snapshot_path.open(encoding="utf-8") as handle:
        return json.load(handle)
