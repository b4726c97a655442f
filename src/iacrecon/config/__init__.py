"""Application configuration helpers."""

from __future__ import annotations

from iacrecon.common.logging import configure_logging

from .env import env_flag, optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError, TypeMapError
from .sources import (
    AWS_CONFIG_ENV,
    TERRAFORM_ENV,
    TF_RECURSIVE_ENV,
    TYPEMAP_ENV,
    SourceConfig,
    get_source_config,
)

__all__ = [
    "AWS_CONFIG_ENV",
    "TERRAFORM_ENV",
    "TF_RECURSIVE_ENV",
    "TYPEMAP_ENV",
    "ConfigurationError",
    "MissingConfigurationError",
    "SourceConfig",
    "TypeMapError",
    "configure_logging",
    "env_flag",
    "get_source_config",
    "optional_env_var",
    "require_env_vars",
]
