"""Read snapshot and state documents from disk."""

from __future__ import annotations

import json
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from .aws_config import parse_snapshot
from .terraform import parse_state

if TYPE_CHECKING:
    from pathlib import Path

    from iacrecon.domain.model import DeclarativeDocument, InventorySnapshot

log = getLogger(__name__)

STATE_SUFFIX = ".tfstate"


class DocumentLoadError(RuntimeError):
    """Raised when an input document cannot be read, decoded or validated."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"unable to load {path}: {reason}")
        self.path = path
        self.reason = reason


def _read_json(path: Path) -> object:
    try:
        with path.open(encoding="utf-8") as handle:
            return json.load(handle)
    except OSError as exc:
        raise DocumentLoadError(path, exc.strerror or str(exc)) from exc
    except json.JSONDecodeError as exc:
        raise DocumentLoadError(path, f"invalid JSON: {exc}") from exc


def _require_object(path: Path, payload: object) -> dict[str, object]:
    if not isinstance(payload, dict):
        raise DocumentLoadError(path, "document must be a JSON object")
    return payload


def load_snapshot(path: Path) -> InventorySnapshot:
    payload = _require_object(path, _read_json(path))
    try:
        snapshot = parse_snapshot(payload)
    except ValidationError as exc:
        raise DocumentLoadError(path, f"invalid snapshot: {exc}") from exc
    log.info("Loaded %s configuration items from %s", len(snapshot.items), path)
    return snapshot


def load_state(path: Path, *, identifier: str | None = None) -> DeclarativeDocument:
    payload = _require_object(path, _read_json(path))
    try:
        return parse_state(identifier or path.name, payload)
    except ValidationError as exc:
        raise DocumentLoadError(path, f"invalid state document: {exc}") from exc


def discover_state_files(root: Path) -> list[Path]:
    """Return every ``.tfstate`` file below ``root``, sorted by path."""

    if not root.is_dir():
        raise DocumentLoadError(root, "not a directory")
    return sorted(path for path in root.rglob(f"*{STATE_SUFFIX}") if path.is_file())


def load_states(path: Path, *, recursive: bool = False) -> list[DeclarativeDocument]:
    """Load one state file, or every state file below a directory.

    Documents found recursively are identified by their path relative to
    ``path``; a single file by its name.
    """

    if not recursive:
        return [load_state(path)]

    documents = [
        load_state(state_path, identifier=state_path.relative_to(path).as_posix())
        for state_path in discover_state_files(path)
    ]
    log.info("Loaded %s state documents below %s", len(documents), path)
    return documents
