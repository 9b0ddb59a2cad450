"""Loader for Swift Package Manager ``Package.resolved`` files."""

from __future__ import annotations

import json
from typing import Any

from licenseplist.config import RuleSet
from licenseplist.core.github import parse_github_url
from licenseplist.engines.loaders.registry import read_manifest, register_loader
from licenseplist.exceptions import LoadError
from licenseplist.models import LibraryDescriptor, SourceKind
from licenseplist.options import Options


def _pins(data: Any) -> list[dict[str, Any]]:
    """Return the pin list for format version 1 (``object.pins``) or 2/3 (``pins``)."""
    if not isinstance(data, dict):
        raise ValueError("top level must be an object")
    if data.get("version") == 1:
        container = data.get("object")
        pins = container.get("pins") if isinstance(container, dict) else None
    else:
        pins = data.get("pins")
    if not isinstance(pins, list):
        raise ValueError("missing pins")
    return [p for p in pins if isinstance(p, dict)]


def _text(mapping: dict[str, Any], key: str) -> str | None:
    value = mapping.get(key)
    if value is None or isinstance(value, str):
        return value or None
    raise ValueError(f"{key!r} must be a string, got {type(value).__name__}")


def _version(pin: dict[str, Any]) -> str | None:
    """Version, else branch, else the short revision."""
    state = pin.get("state")
    if state is None:
        return None
    if not isinstance(state, dict):
        raise ValueError(f"'state' must be an object, got {type(state).__name__}")
    version = _text(state, "version") or _text(state, "branch")
    if version:
        return version
    revision = _text(state, "revision")
    return revision[:7] if revision else None


class SwiftPackageLoader:
    source = "swift-package"
    source_kind = SourceKind.REMOTE
    priority = 2

    def load(self, content: str | None, rules: RuleSet) -> list[LibraryDescriptor]:
        if content is None:
            return []
        try:
            pins = _pins(json.loads(content))
        except ValueError as exc:
            raise LoadError(self.source, f"invalid Package.resolved: {exc}") from exc

        descriptors: list[LibraryDescriptor] = []
        for index, pin in enumerate(pins):
            try:
                url = _text(pin, "repositoryURL") or _text(pin, "location") or ""
                ref = parse_github_url(url)
                if ref is None:
                    continue
                owner, repo = ref
                name = _text(pin, "package") or repo
                version = _version(pin)
            except ValueError as exc:
                raise LoadError(self.source, f"invalid pin #{index}: {exc}") from exc
            descriptors.append(
                LibraryDescriptor(
                    name=name,
                    version=version,
                    source_kind=self.source_kind,
                    source=self.source,
                    owner=owner,
                    repo=repo,
                )
            )
        return rules.apply(descriptors)

    def collect(self, options: Options, rules: RuleSet) -> list[LibraryDescriptor]:
        for path in options.package_resolved_candidates:
            content = read_manifest(path, self.source)
            if content is None:
                continue
            try:
                return self.load(content, rules)
            except LoadError as exc:
                raise LoadError(self.source, exc.reason, str(path)) from exc
        return []


register_loader(SwiftPackageLoader())
