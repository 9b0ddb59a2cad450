"""HTML reporter."""

from __future__ import annotations

import html
from collections.abc import Sequence
from pathlib import Path

import structlog

from licenseplist.exceptions import PersistenceError
from licenseplist.models import LicenseRecord

log = structlog.get_logger("licenseplist.reporters")

_BODY_STYLE = (
    "font-family: -apple-system, BlinkMacSystemFont,"
    " 'Segoe UI', Roboto, sans-serif;"
    " color: #212121; max-width: 800px; margin: 0 auto;"
)
_PRE_STYLE = "white-space: pre-wrap; background: #f5f5f5; padding: 12px;"


def _esc(text: str) -> str:
    return html.escape(text, quote=True)


def _section(record: LicenseRecord, add_version_numbers: bool) -> str:
    title = _esc(record.title(add_version_numbers))
    if record.source_url:
        title = f'<a href="{_esc(record.source_url)}">{title}</a>'
    return f'<h2>{title}</h2>\n<pre style="{_PRE_STYLE}">{_esc(record.body)}</pre>\n'


def render_html(records: Sequence[LicenseRecord], *, add_version_numbers: bool = False) -> str:
    sections = "".join(_section(r, add_version_numbers) for r in records)
    return f"""\
<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>Acknowledgements</title>
</head>
<body style="{_BODY_STYLE}">
<h1>Acknowledgements</h1>
<p>This application makes use of the following third party libraries:</p>
{sections}</body>
</html>
"""


def write_html(
    records: Sequence[LicenseRecord], path: Path, *, add_version_numbers: bool = False
) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_html(records, add_version_numbers=add_version_numbers), encoding="utf-8")
    except OSError as exc:
        raise PersistenceError(f"failed to write html {path}: {exc}") from exc
    log.info("html.written", path=str(path))
