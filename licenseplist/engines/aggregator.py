"""Aggregator — merge descriptors from every source into one canonical list."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Protocol, TypeVar

import structlog

from licenseplist.config import RuleSet
from licenseplist.models import LibraryDescriptor, LicenseRecord, SourceKind

log = structlog.get_logger("licenseplist.aggregator")


class _Named(Protocol):
    @property
    def canonical_name(self) -> str: ...


T = TypeVar("T", bound=_Named)


def _dedup(items: Iterable[T], display: str) -> list[T]:
    """Last writer wins per canonical name; result sorted case-insensitively."""
    by_name: dict[str, T] = {}
    for item in items:
        key = item.canonical_name
        prev = by_name.get(key)
        if prev is not None:
            log.debug("aggregator.replaced", stage=display, library=key)
        by_name[key] = item
    return sorted(by_name.values(), key=lambda it: it.canonical_name)


def merge(
    lists_by_kind: Mapping[SourceKind, Sequence[LibraryDescriptor]],
    rules: RuleSet,
) -> list[LibraryDescriptor]:
    """Merge descriptor lists in precedence order: local, remote, manual.

    Excluded descriptors never enter the map. On a name collision the later
    descriptor replaces the earlier one entirely.
    """

    def _admitted() -> Iterable[LibraryDescriptor]:
        for kind in SourceKind:
            for descriptor in lists_by_kind.get(kind, ()):
                if rules.is_excluded(descriptor):
                    continue
                yield descriptor

    merged = _dedup(_admitted(), "descriptors")
    log.info("aggregator.merged", libraries=len(merged))
    return merged


def merge_records(records: Iterable[LicenseRecord]) -> list[LicenseRecord]:
    """Final merge of resolved records, given in precedence order."""
    return _dedup(records, "records")
