"""Public interface for the Terraform state adapter."""

from __future__ import annotations

from .schema import StatePayload, StatePayloadInput
from .translator import parse_state

__all__ = [
    "StatePayload",
    "StatePayloadInput",
    "parse_state",
]
