"""Settings-bundle plist reporter."""

from __future__ import annotations

import plistlib
import re
import shutil
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import structlog

from licenseplist.exceptions import PersistenceError
from licenseplist.models import LicenseRecord

log = structlog.get_logger("licenseplist.reporters")

# Control characters XML 1.0 cannot carry; plistlib refuses them.
_XML_ILLEGAL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def xml_safe(text: str) -> str:
    """Drop XML-illegal control characters; a form feed becomes a line break."""
    return _XML_ILLEGAL_RE.sub(lambda m: "\n" if m.group() == "\x0c" else "", text)


def item_file_name(record: LicenseRecord) -> str:
    """Per-library plist stem; path separators are not allowed in it."""
    return record.name.replace("/", "-").replace("\\", "-")


def root_document(
    records: Sequence[LicenseRecord],
    prefix: str,
    *,
    single_page: bool = False,
    add_version_numbers: bool = False,
) -> dict[str, Any]:
    if single_page:
        specifiers = [
            {
                "Type": "PSGroupSpecifier",
                "Title": xml_safe(r.title(add_version_numbers)),
                "FooterText": xml_safe(r.body),
            }
            for r in records
        ]
    else:
        specifiers = [
            {
                "Type": "PSChildPaneSpecifier",
                "Title": xml_safe(r.title(add_version_numbers)),
                "File": xml_safe(f"{prefix}/{item_file_name(r)}"),
            }
            for r in records
        ]
    return {"PreferenceSpecifiers": specifiers}


def item_document(record: LicenseRecord) -> dict[str, Any]:
    return {
        "PreferenceSpecifiers": [{"Type": "PSGroupSpecifier", "FooterText": xml_safe(record.body)}]
    }


def write_plist(
    records: Sequence[LicenseRecord],
    output_path: Path,
    prefix: str,
    *,
    single_page: bool = False,
    add_version_numbers: bool = False,
) -> Path:
    """Write ``<prefix>.plist`` and the ``<prefix>/`` item directory.

    The item directory is recreated from scratch on every call.
    """
    items_path = output_path / prefix
    root_path = output_path / f"{prefix}.plist"
    try:
        if items_path.exists():
            shutil.rmtree(items_path)
            log.info("plist.deleted_items", path=str(items_path))
        items_path.mkdir(parents=True)

        doc = root_document(
            records, prefix, single_page=single_page, add_version_numbers=add_version_numbers
        )
        root_path.write_bytes(plistlib.dumps(doc))
        if not single_page:
            for record in records:
                item = items_path / f"{xml_safe(item_file_name(record))}.plist"
                item.write_bytes(plistlib.dumps(item_document(record)))
    except (OSError, TypeError, ValueError) as exc:
        raise PersistenceError(f"failed to write plist to {output_path}: {exc}") from exc

    log.info("plist.written", path=str(root_path), licenses=len(records))
    return root_path
