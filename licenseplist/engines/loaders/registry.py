"""Loader registry — every dependency source registers one loader here."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

import structlog

from licenseplist.config import RuleSet
from licenseplist.exceptions import LoadError
from licenseplist.models import LibraryDescriptor, SourceKind
from licenseplist.options import Options

log = structlog.get_logger("licenseplist.loaders")


@runtime_checkable
class Loader(Protocol):
    """Interface that every dependency source must satisfy.

    ``load`` is a pure transformation of one manifest's text into
    descriptors, with exclusions and renames already applied. ``None``
    content means the manifest is absent and yields no descriptors.
    ``collect`` locates and reads the manifest(s) for a run.
    """

    source: str
    source_kind: SourceKind
    priority: int

    def load(self, content: str | None, rules: RuleSet) -> list[LibraryDescriptor]: ...

    def collect(self, options: Options, rules: RuleSet) -> list[LibraryDescriptor]: ...


LOADER_REGISTRY: dict[str, Loader] = {}


def register_loader(loader: Loader) -> None:
    """Register a loader instance by its source id."""
    LOADER_REGISTRY[loader.source] = loader


def ordered_loaders() -> list[Loader]:
    """Loaders in precedence order: local, remote, manual; then by priority."""
    return sorted(LOADER_REGISTRY.values(), key=lambda ld: (ld.source_kind, ld.priority))


def read_manifest(path: Path, source: str) -> str | None:
    """Read a manifest file; None when it does not exist."""
    if not path.is_file():
        return None
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise LoadError(source, f"cannot read: {exc}", str(path)) from exc


def load_all(options: Options, rules: RuleSet) -> dict[SourceKind, list[LibraryDescriptor]]:
    """Run every registered loader, grouping descriptors by source kind.

    A failing source is logged and contributes nothing; the other sources
    still load.
    """
    by_kind: dict[SourceKind, list[LibraryDescriptor]] = {kind: [] for kind in SourceKind}
    for loader in ordered_loaders():
        try:
            descriptors = loader.collect(options, rules)
        except LoadError as exc:
            log.error(
                "loader.failed",
                source=exc.source,
                path=exc.path,
                reason=exc.reason,
            )
            continue
        if descriptors:
            log.info("loader.loaded", source=loader.source, count=len(descriptors))
        by_kind[loader.source_kind].extend(descriptors)
    return by_kind
