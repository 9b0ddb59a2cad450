"""Loader for Carthage ``Cartfile.resolved`` files."""

from __future__ import annotations

import re

from licenseplist.config import RuleSet
from licenseplist.core.github import parse_github_url, split_owner_repo
from licenseplist.engines.loaders.registry import read_manifest, register_loader
from licenseplist.exceptions import LoadError
from licenseplist.models import LibraryDescriptor, SourceKind
from licenseplist.options import Options

# github "ReactiveX/RxSwift" "6.5.0"
# git "https://github.com/owner/repo.git" "1.0.0"
_LINE_RE = re.compile(r'^(github|git|binary)\s+"([^"]+)"\s+"([^"]*)"')


class CarthageLoader:
    source = "carthage"
    source_kind = SourceKind.REMOTE
    priority = 0

    def load(self, content: str | None, rules: RuleSet) -> list[LibraryDescriptor]:
        if content is None:
            return []
        descriptors: list[LibraryDescriptor] = []
        for lineno, raw_line in enumerate(content.splitlines(), start=1):
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue
            m = _LINE_RE.match(line)
            if not m:
                raise LoadError(self.source, f"line {lineno}: unrecognised entry {line!r}")
            origin, location, version = m.groups()
            if origin == "github":
                ref = split_owner_repo(location)
            elif origin == "git":
                ref = parse_github_url(location)
            else:
                ref = None
            if ref is None:
                continue
            owner, repo = ref
            descriptors.append(
                LibraryDescriptor(
                    name=repo,
                    version=version or None,
                    source_kind=self.source_kind,
                    source=self.source,
                    owner=owner,
                    repo=repo,
                )
            )
        return rules.apply(descriptors)

    def collect(self, options: Options, rules: RuleSet) -> list[LibraryDescriptor]:
        path = options.cartfile_resolved_path
        try:
            return self.load(read_manifest(path, self.source), rules)
        except LoadError as exc:
            raise LoadError(self.source, exc.reason, str(path)) from exc


register_loader(CarthageLoader())
