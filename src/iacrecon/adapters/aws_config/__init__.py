"""Public interface for the AWS Config snapshot adapter."""

from __future__ import annotations

from .schema import ConfigurationItemPayload, SnapshotPayload, SnapshotPayloadInput
from .translator import parse_configuration_item, parse_snapshot

__all__ = [
    "ConfigurationItemPayload",
    "SnapshotPayload",
    "SnapshotPayloadInput",
    "parse_configuration_item",
    "parse_snapshot",
]
