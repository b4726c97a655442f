"""Reconciliation core: inventory snapshot versus declarative state.

Layered flow of one run:
1) index inventory items by type and identity (``index``)
2) infer implicit ownership between inventory records (``ownership``, ``rules``)
3) correlate declarative instances with the index (``correlate``, ``structural``)
4) aggregate the flattened records (``summary``)
"""

from __future__ import annotations

from .contracts import Correlation, CorrelationStatus, StructuralMatch, StructuralStatus
from .correlate import DeclarativeCorrelator, is_aws_provider
from .engine import ReconciliationEngine, ReconciliationResult
from .index import IdentityIndex
from .ownership import OwnershipRule, infer_ownership
from .rules import DEFAULT_RULES
from .structural import STRUCTURAL_MATCHERS, StructuralMatcher, normalize_protocol
from .summary import SOURCE_KEYS, SourceSummary, Summary, TypeSummary, summarize
from .typemap import TypeTranslator

__all__ = [
    "DEFAULT_RULES",
    "SOURCE_KEYS",
    "STRUCTURAL_MATCHERS",
    "Correlation",
    "CorrelationStatus",
    "DeclarativeCorrelator",
    "IdentityIndex",
    "OwnershipRule",
    "ReconciliationEngine",
    "ReconciliationResult",
    "SourceSummary",
    "StructuralMatch",
    "StructuralMatcher",
    "StructuralStatus",
    "Summary",
    "TypeSummary",
    "TypeTranslator",
    "infer_ownership",
    "is_aws_provider",
    "normalize_protocol",
    "summarize",
]
