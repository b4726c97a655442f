"""Pydantic models describing Terraform state documents (format version 4)."""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

type StatePayloadInput = Mapping[str, object]


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _none_to_empty(value: object) -> object:
    return {} if value is None else value


def _none_to_list(value: object) -> object:
    return [] if value is None else value


class TerraformBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class InstancePayload(TerraformBaseModel):
    schema_version: int | None = None
    index_key: str | int | None = None
    attributes: dict[str, object] = Field(default_factory=dict[str, object])

    _normalize_attributes = field_validator("attributes", mode="before")(_none_to_empty)


class ResourcePayload(TerraformBaseModel):
    module: str | None = None
    mode: str = "managed"
    type: str
    name: str
    provider: str | None = None
    instances: list[InstancePayload] = Field(default_factory=list["InstancePayload"])

    _normalize_module = field_validator("module", "provider", mode="before")(_blank_to_none)
    _normalize_instances = field_validator("instances", mode="before")(_none_to_list)


class StatePayload(TerraformBaseModel):
    version: int | None = None
    terraform_version: str | None = None
    serial: int | None = None
    lineage: str | None = None
    resources: list[ResourcePayload] = Field(default_factory=list["ResourcePayload"])

    _normalize_resources = field_validator("resources", mode="before")(_none_to_list)
