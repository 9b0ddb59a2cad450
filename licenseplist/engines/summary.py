"""Fingerprint of the aggregated result, used to skip unchanged runs."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path

import structlog

from licenseplist.exceptions import PersistenceError
from licenseplist.models import LibraryDescriptor

log = structlog.get_logger("licenseplist.summary")

SEPARATOR = "\n\n"


def compute_fingerprint(
    descriptors: Sequence[LibraryDescriptor],
    flags: Mapping[str, object],
    tool_version: str,
) -> str:
    """Deterministic text form of *descriptors* (already in output order)
    followed by the config flags that affect rendering and the tool version.
    """
    lines = [d.fingerprint_line() for d in descriptors]
    lines.extend(f"{key}: {flags[key]}" for key in sorted(flags))
    lines.append(f"licenseplist version: {tool_version}")
    return SEPARATOR.join(lines)


def should_skip(new: str, previous: str | None, force: bool) -> bool:
    return previous is not None and previous == new and not force


def read_summary(path: Path) -> str | None:
    """Previous run's fingerprint, or None when absent or unreadable."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as exc:
        log.warning("summary.unreadable", path=str(path), error=str(exc))
        return None


def write_summary(path: Path, text: str) -> None:
    """Overwrite the summary file atomically."""
    tmp = path.with_name(f".{path.name}.tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_text(text, encoding="utf-8")
        tmp.replace(path)
    except OSError as exc:
        raise PersistenceError(f"failed to save summary {path}: {exc}") from exc
    log.debug("summary.saved", path=str(path))
