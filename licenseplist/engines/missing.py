"""Report remote libraries that ended up without a license."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from licenseplist.models import LibraryDescriptor, LicenseRecord

log = structlog.get_logger("licenseplist.missing")


def find_missing(
    remote: Sequence[LibraryDescriptor],
    records: Sequence[LicenseRecord],
) -> list[str]:
    """Display names of remote libraries with no record, sorted."""
    resolved = {r.canonical_name for r in records}
    missing = {d.canonical_name: d.display_name for d in remote if d.canonical_name not in resolved}
    return sorted(missing.values(), key=str.lower)


def report_missing(missing: Sequence[str]) -> None:
    if not missing:
        log.info("missing.none")
        return
    for name in missing:
        log.warning("missing.license", library=name)
