from __future__ import annotations

import pytest

from iacrecon.config import (
    ConfigurationError,
    MissingConfigurationError,
    env_flag,
    optional_env_var,
    require_env_vars,
)


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "value")

    result = require_env_vars(["EXAMPLE_VAR"])

    assert result["EXAMPLE_VAR"] == "value"


def test_require_env_vars_lists_every_missing_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_B", raising=False)
    monkeypatch.setenv("MISSING_A", "   ")

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_B", "MISSING_A"])

    assert str(exc.value) == "Missing configuration for: MISSING_A, MISSING_B"


def test_optional_env_var_strips_and_treats_blank_as_unset(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("PADDED_VAR", "  ./state  ")
    monkeypatch.setenv("BLANK_VAR", " ")
    monkeypatch.delenv("UNSET_VAR", raising=False)

    assert optional_env_var("PADDED_VAR") == "./state"
    assert optional_env_var("BLANK_VAR") is None
    assert optional_env_var("UNSET_VAR") is None


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("1", True),
        ("TRUE", True),
        (" yes ", True),
        ("on", True),
        ("0", False),
        ("off", False),
        ("", False),
    ],
)
def test_env_flag_spellings(monkeypatch: pytest.MonkeyPatch, value: str, expected: bool) -> None:
    monkeypatch.setenv("FLAG_VAR", value)

    assert env_flag("FLAG_VAR") is expected


def test_env_flag_default_when_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FLAG_VAR", raising=False)

    assert env_flag("FLAG_VAR") is False
    assert env_flag("FLAG_VAR", default=True) is True


def test_env_flag_rejects_unknown_spelling(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLAG_VAR", "maybe")

    with pytest.raises(ConfigurationError) as exc:
        env_flag("FLAG_VAR")

    assert "FLAG_VAR" in str(exc.value)
