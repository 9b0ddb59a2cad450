"""Markdown reporter."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import structlog

from licenseplist.exceptions import PersistenceError
from licenseplist.models import LicenseRecord

log = structlog.get_logger("licenseplist.reporters")

_HEADER = (
    "# Acknowledgements\n"
    "This application makes use of the following third party libraries:\n"
)


def _fence(body: str) -> str:
    # A fence longer than any backtick run in the body.
    longest = run = 0
    for ch in body:
        run = run + 1 if ch == "`" else 0
        longest = max(longest, run)
    return "`" * max(3, longest + 1)


def render_markdown(records: Sequence[LicenseRecord], *, add_version_numbers: bool = False) -> str:
    parts = [_HEADER]
    for r in records:
        title = r.title(add_version_numbers)
        heading = f"[{title}]({r.source_url})" if r.source_url else title
        fence = _fence(r.body)
        parts.append(f"## {heading}\n{fence}\n{r.body.rstrip()}\n{fence}\n")
    return "\n".join(parts)


def write_markdown(
    records: Sequence[LicenseRecord], path: Path, *, add_version_numbers: bool = False
) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_markdown(records, add_version_numbers=add_version_numbers), encoding="utf-8")
    except OSError as exc:
        raise PersistenceError(f"failed to write markdown {path}: {exc}") from exc
    log.info("markdown.written", path=str(path))
