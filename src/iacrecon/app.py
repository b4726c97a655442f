"""Application orchestration entry points."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from iacrecon.adapters.files import load_snapshot, load_states
from iacrecon.domain.reconciliation import (
    ReconciliationEngine,
    ReconciliationResult,
    Summary,
    TypeTranslator,
    summarize,
)

if TYPE_CHECKING:
    from pathlib import Path

    from iacrecon.config import SourceConfig


log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReconciliationReport:
    result: ReconciliationResult
    summary: Summary

    @property
    def document_count(self) -> int:
        return self.result.document_count


def build_translator(typemap_path: Path | None = None) -> TypeTranslator:
    """Load the override table when given, else the packaged one."""

    if typemap_path is None:
        return TypeTranslator.default()
    log.info("Using type map %s", typemap_path)
    return TypeTranslator.from_path(typemap_path)


def reconcile_sources(
    config: SourceConfig,
    *,
    translator: TypeTranslator | None = None,
) -> ReconciliationReport:
    """Load the configured documents, reconcile them and summarize the outcome."""

    effective_translator = (
        translator if translator is not None else build_translator(config.typemap_path)
    )
    snapshot = load_snapshot(config.snapshot_path)
    documents = (
        []
        if config.terraform_path is None
        else load_states(config.terraform_path, recursive=config.terraform_recursive)
    )
    log.info(
        "Starting reconciliation: items=%s, documents=%s, mappings=%s",
        len(snapshot.items),
        len(documents),
        len(effective_translator),
    )

    result = ReconciliationEngine(effective_translator).reconcile(snapshot, documents)
    summary = summarize(result.records)

    log.info(
        "Finished reconciliation: config=%s, terraform=%s, both=%s",
        summary.config_count,
        summary.terraform_count,
        summary.both_count,
    )
    return ReconciliationReport(result=result, summary=summary)
