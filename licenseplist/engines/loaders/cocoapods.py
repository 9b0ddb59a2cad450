"""Loader for CocoaPods acknowledgements plists."""

from __future__ import annotations

import plistlib
import re
from collections.abc import Mapping
from xml.parsers.expat import ExpatError

from licenseplist.config import RuleSet
from licenseplist.engines.loaders.registry import read_manifest, register_loader
from licenseplist.exceptions import LoadError
from licenseplist.models import LibraryDescriptor, SourceKind
from licenseplist.options import Options

# "  - Alamofire (4.5.0)" or "  - Firebase/Core (4.0.0):" inside the PODS section
_POD_VERSION_RE = re.compile(r'^  - "?([^\s"(]+)"? \(([^)]+)\)')


def parse_manifest_lock(content: str) -> dict[str, str]:
    """Map pod name → installed version from a ``Manifest.lock``.

    Subspecs (``Firebase/Core``) resolve to their root pod.
    """
    versions: dict[str, str] = {}
    in_pods = False
    for line in content.splitlines():
        if not line.startswith(" "):
            in_pods = line.rstrip() == "PODS:"
            continue
        if not in_pods:
            continue
        m = _POD_VERSION_RE.match(line)
        if m:
            root = m.group(1).split("/", 1)[0]
            versions.setdefault(root, m.group(2))
    return versions


class CocoaPodsLoader:
    source = "cocoapods"
    source_kind = SourceKind.LOCAL
    priority = 0

    def load(
        self,
        content: str | None,
        rules: RuleSet,
        *,
        versions: Mapping[str, str] | None = None,
    ) -> list[LibraryDescriptor]:
        if content is None:
            return []
        try:
            data = plistlib.loads(content.encode("utf-8"))
        except (plistlib.InvalidFileException, ExpatError, ValueError) as exc:
            raise LoadError(self.source, f"invalid plist: {exc}") from exc

        specifiers = data.get("PreferenceSpecifiers") if isinstance(data, dict) else None
        if not isinstance(specifiers, list):
            raise LoadError(self.source, "missing PreferenceSpecifiers")

        versions = versions or {}
        descriptors: list[LibraryDescriptor] = []
        # First and last entries are CocoaPods' own header and footer.
        for index, entry in enumerate(specifiers[1:-1], start=1):
            if not isinstance(entry, dict):
                continue
            name = entry.get("Title")
            body = entry.get("FooterText")
            if not name or body is None:
                continue
            if not isinstance(name, str) or not isinstance(body, str):
                raise LoadError(
                    self.source, f"entry #{index}: Title and FooterText must be strings"
                )
            descriptors.append(
                LibraryDescriptor(
                    name=name,
                    version=versions.get(name),
                    source_kind=self.source_kind,
                    source=self.source,
                    license_body=body,
                )
            )
        return rules.apply(descriptors)

    def collect(self, options: Options, rules: RuleSet) -> list[LibraryDescriptor]:
        support_dir = options.pods_path / "Target Support Files"
        plists = sorted(support_dir.glob("*/*-acknowledgements.plist"))
        if not plists:
            return []

        lock = read_manifest(options.pods_path / "Manifest.lock", self.source)
        versions = parse_manifest_lock(lock) if lock else {}

        descriptors: list[LibraryDescriptor] = []
        for path in plists:
            try:
                descriptors.extend(
                    self.load(read_manifest(path, self.source), rules, versions=versions)
                )
            except LoadError as exc:
                raise LoadError(self.source, exc.reason, str(path)) from exc
        return descriptors


register_loader(CocoaPodsLoader())
