"""Translate validated Terraform state payloads into declarative documents."""

from __future__ import annotations

from logging import getLogger
from types import MappingProxyType
from typing import TYPE_CHECKING

from iacrecon.domain.model import DeclarativeDocument, DeclarativeInstance

from .schema import StatePayload

if TYPE_CHECKING:
    from .schema import StatePayloadInput

log = getLogger(__name__)


def _ensure_state_payload(payload: StatePayload | StatePayloadInput) -> StatePayload:
    if isinstance(payload, StatePayload):
        return payload
    return StatePayload.model_validate(payload)


def parse_state(identifier: str, payload: StatePayload | StatePayloadInput) -> DeclarativeDocument:
    """Flatten every resource block of a state document into its instances.

    ``identifier`` names the document in diagnostics and fixes the processing
    order across documents.
    """

    state = _ensure_state_payload(payload)
    instances = tuple(
        DeclarativeInstance(
            document=identifier,
            type=resource.type,
            name=resource.name,
            mode=resource.mode,
            module=resource.module or "",
            provider=resource.provider or "",
            index_key=instance.index_key,
            attributes=MappingProxyType(dict(instance.attributes)),
        )
        for resource in state.resources
        for instance in resource.instances
    )
    if state.version is not None and state.version != 4:
        log.warning(
            "State document %s has unexpected format version %s", identifier, state.version
        )
    log.debug("Parsed %s resource instances from %s", len(instances), identifier)
    return DeclarativeDocument(
        identifier=identifier,
        instances=instances,
        version=state.version,
        terraform_version=state.terraform_version or "",
        serial=state.serial,
        lineage=state.lineage or "",
    )
