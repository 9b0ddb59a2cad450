"""Loaders for libraries declared directly in the YAML config.

``github:`` entries are remote libraries loaded after every manifest, so
their versions override what the manifests resolved. ``manual:`` entries
carry their own license text and win over everything else.
"""

from __future__ import annotations

from licenseplist.config import RuleSet
from licenseplist.engines.loaders.registry import register_loader
from licenseplist.exceptions import LoadError
from licenseplist.models import LibraryDescriptor, SourceKind
from licenseplist.options import Options


class ConfigGitHubLoader:
    source = "config-github"
    source_kind = SourceKind.REMOTE
    priority = 99

    def load(self, content: str | None, rules: RuleSet) -> list[LibraryDescriptor]:
        descriptors = [
            LibraryDescriptor(
                name=entry.name,
                version=entry.version,
                source_kind=self.source_kind,
                source=self.source,
                owner=entry.owner,
                repo=entry.name,
                source_url=entry.source,
            )
            for entry in rules.github
        ]
        return rules.apply(descriptors)

    def collect(self, options: Options, rules: RuleSet) -> list[LibraryDescriptor]:
        return self.load(None, rules)


class ManualLoader:
    source = "manual"
    source_kind = SourceKind.MANUAL
    priority = 0

    def load(self, content: str | None, rules: RuleSet) -> list[LibraryDescriptor]:
        descriptors: list[LibraryDescriptor] = []
        for entry in rules.manuals:
            body = entry.body
            if body is None and entry.file:
                path = rules.base_dir / entry.file
                try:
                    body = path.read_text(encoding="utf-8")
                except (OSError, UnicodeDecodeError) as exc:
                    raise LoadError(self.source, f"{entry.name}: cannot read {path}: {exc}") from exc
            if body is None:
                raise LoadError(self.source, f"{entry.name}: needs 'body' or 'file'")
            descriptors.append(
                LibraryDescriptor(
                    name=entry.name,
                    version=entry.version,
                    source_kind=self.source_kind,
                    source=self.source,
                    license_body=body,
                    source_url=entry.source,
                )
            )
        return rules.apply(descriptors)

    def collect(self, options: Options, rules: RuleSet) -> list[LibraryDescriptor]:
        return self.load(None, rules)


register_loader(ConfigGitHubLoader())
register_loader(ManualLoader())
