from __future__ import annotations

import logging

import pytest

from iacrecon.common import logging as logging_module
from iacrecon.common.logging import configure_logging


def test_configure_logging_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_basic_config(**kwargs: object) -> None:
        captured.update(kwargs)

    monkeypatch.setattr(logging_module.logging, "basicConfig", fake_basic_config)

    configure_logging()

    assert captured["level"] == logging.INFO
    assert captured["format"] == "%(asctime)s %(levelname)s [%(name)s] %(message)s"
    assert captured["force"] is False


def test_configure_logging_passes_level_and_force(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_basic_config(**kwargs: object) -> None:
        captured.update(kwargs)

    monkeypatch.setattr(logging_module.logging, "basicConfig", fake_basic_config)

    configure_logging(level=logging.DEBUG, force=True)

    assert captured["level"] == logging.DEBUG
    assert captured["force"] is True
