"""Correlate declarative state documents with the indexed inventory.

Every managed AWS resource instance either resolves to an existing record,
is accounted for structurally by its owner's configuration, or produces a
new declarative-only record. Documents are processed in sorted identifier
order so the first match for an instance never depends on how the caller
collected the documents.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from . import constants as c
from .contracts import Correlation, CorrelationStatus, StructuralStatus
from .structural import default_matchers

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from iacrecon.domain.model import (
        DeclarativeDocument,
        DeclarativeInstance,
        ReconciledRecord,
        RecordHandle,
    )

    from .index import IdentityIndex
    from .structural import StructuralMatcher
    from .typemap import TypeTranslator

log = getLogger(__name__)

AWS_PROVIDERS = (c.TF_AWS_PROVIDER, c.TF_AWS_REGISTRY_PROVIDER)


def is_aws_provider(provider: str) -> bool:
    """Whether ``provider`` names the AWS provider, including module-scoped and aliased forms."""

    base = provider.strip()
    if base.endswith("]") or "]." not in base:
        candidate = base
    else:
        # provider["registry.terraform.io/hashicorp/aws"].west
        candidate = base.rsplit("].", 1)[0] + "]"
    if candidate.startswith(c.TF_AWS_PROVIDER + "."):
        candidate = c.TF_AWS_PROVIDER
    return any(candidate == known or candidate.endswith(known) for known in AWS_PROVIDERS)


@dataclass(slots=True)
class DeclarativeCorrelator:
    """Attach declarative presence to records of one identity index."""

    translator: TypeTranslator
    index: IdentityIndex
    matchers: Mapping[str, StructuralMatcher] = field(default_factory=default_matchers)

    def correlate(self, documents: Iterable[DeclarativeDocument]) -> tuple[Correlation, ...]:
        correlations: list[Correlation] = []
        for document in sorted(documents, key=lambda document: document.identifier):
            considered = 0
            for instance in document.instances:
                if not instance.is_managed or not is_aws_provider(instance.provider):
                    continue
                considered += 1
                correlations.append(self.correlate_instance(instance))
            log.info(
                "Correlated %s managed AWS instances from %s", considered, document.identifier
            )
        return tuple(correlations)

    def correlate_instance(self, instance: DeclarativeInstance) -> Correlation:
        canonical_type, mapped = self.translator.to_inventory_type(instance.type)
        arn = instance.text("arn")
        resource_id = instance.text("id")
        name = instance.text("name")
        key = arn or resource_id

        def outcome(
            status: CorrelationStatus,
            *,
            record: RecordHandle | None = None,
            parent: RecordHandle | None = None,
            reason: str | None = None,
        ) -> Correlation:
            return Correlation(
                document=instance.document,
                address=instance.address,
                declared_type=instance.type,
                canonical_type=canonical_type,
                status=status,
                key=key,
                record=record,
                parent=parent,
                reason=reason,
            )

        if not key:
            log.warning(
                "Unable to find resource ID or ARN for %s in file %s",
                instance.address,
                instance.document,
            )
            return outcome(CorrelationStatus.SKIPPED, reason="missing_identity")

        record: ReconciledRecord | None = None
        matcher = self.matchers.get(instance.type)
        if matcher is not None:
            match = matcher(instance, self.index)
            if match.status is StructuralStatus.INVALID:
                log.warning(
                    "%s for %s in file %s", match.reason, instance.address, instance.document
                )
                return outcome(CorrelationStatus.SKIPPED, reason=match.reason)
            if match.found:
                return outcome(
                    CorrelationStatus.STRUCTURAL, parent=match.parent, reason=match.reason
                )
            log.debug("No structural match for %s: %s", instance.address, match.reason)
        else:
            record = (
                self.index.get(canonical_type, key)
                or self.index.get_by_arn(canonical_type, arn)
                or self.index.get(canonical_type, resource_id)
                or self.index.get_by_name(canonical_type, name)
            )

        status = CorrelationStatus.MATCHED
        if record is None:
            record = self.index.get(canonical_type, key)
        if record is None:
            status = CorrelationStatus.CREATED
            record = self.index.get_or_create(
                canonical_type,
                key,
                resource_id=resource_id,
                arn=arn,
                resource_name=name,
                mapped=mapped,
            )
        if not record.in_inventory:
            record.type_is_mapped = mapped
        record.in_declarative_state = True
        return outcome(status, record=record.handle)
