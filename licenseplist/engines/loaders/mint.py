"""Loader for Mint ``Mintfile`` files."""

from __future__ import annotations

from licenseplist.config import RuleSet
from licenseplist.core.github import parse_github_url, split_owner_repo
from licenseplist.engines.loaders.registry import read_manifest, register_loader
from licenseplist.exceptions import LoadError
from licenseplist.models import LibraryDescriptor, SourceKind
from licenseplist.options import Options


class MintLoader:
    source = "mint"
    source_kind = SourceKind.REMOTE
    priority = 1

    def load(self, content: str | None, rules: RuleSet) -> list[LibraryDescriptor]:
        if content is None:
            return []
        descriptors: list[LibraryDescriptor] = []
        for lineno, raw_line in enumerate(content.splitlines(), start=1):
            line = raw_line.split("#", 1)[0].strip()
            if not line:
                continue
            package, _, version = line.partition("@")
            ref = parse_github_url(package) if "github.com" in package else split_owner_repo(package)
            if ref is None:
                raise LoadError(self.source, f"line {lineno}: expected 'owner/repo@version'")
            owner, repo = ref
            descriptors.append(
                LibraryDescriptor(
                    name=repo,
                    version=version.strip() or None,
                    source_kind=self.source_kind,
                    source=self.source,
                    owner=owner,
                    repo=repo,
                )
            )
        return rules.apply(descriptors)

    def collect(self, options: Options, rules: RuleSet) -> list[LibraryDescriptor]:
        path = options.mintfile_path
        try:
            return self.load(read_manifest(path, self.source), rules)
        except LoadError as exc:
            raise LoadError(self.source, exc.reason, str(path)) from exc


register_loader(MintLoader())
