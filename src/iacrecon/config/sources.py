"""Input source configuration: snapshot, state files and type map override."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import env_flag, optional_env_var, require_env_vars
from .errors import ConfigurationError

AWS_CONFIG_ENV: Final[str] = "IACRECON_AWS_CONFIG"
TERRAFORM_ENV: Final[str] = "IACRECON_TERRAFORM"
TF_RECURSIVE_ENV: Final[str] = "IACRECON_TF_RECURSIVE"
TYPEMAP_ENV: Final[str] = "IACRECON_TYPEMAP"


@dataclass(frozen=True, slots=True)
class SourceConfig:
    snapshot_path: Path
    terraform_path: Path | None = None
    terraform_recursive: bool = False
    typemap_path: Path | None = None


def get_source_config(
    *,
    aws_config: str | None = None,
    terraform: str | None = None,
    tf_recursive: bool | None = None,
    typemap: str | None = None,
) -> SourceConfig:
    """Resolve sources from explicit values, falling back to the environment.

    Explicit values always win. Only the snapshot is required.
    """

    snapshot = aws_config or require_env_vars([AWS_CONFIG_ENV])[AWS_CONFIG_ENV]
    terraform = terraform or optional_env_var(TERRAFORM_ENV)
    recursive = env_flag(TF_RECURSIVE_ENV) if tf_recursive is None else tf_recursive
    typemap = typemap or optional_env_var(TYPEMAP_ENV)

    if recursive and terraform is None:
        raise ConfigurationError("Recursive state discovery requires a Terraform path")

    return SourceConfig(
        snapshot_path=Path(snapshot).expanduser(),
        terraform_path=None if terraform is None else Path(terraform).expanduser(),
        terraform_recursive=recursive,
        typemap_path=None if typemap is None else Path(typemap).expanduser(),
    )
