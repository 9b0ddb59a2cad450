"""Data models shared by the loaders, aggregator, fetcher and reporters."""

from __future__ import annotations

import enum
import hashlib
from dataclasses import dataclass, replace

from licenseplist.core.github import repo_html_url


class SourceKind(enum.IntEnum):
    """Where a library comes from; the value is its merge precedence."""

    LOCAL = 0
    REMOTE = 1
    MANUAL = 2

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass
class LibraryDescriptor:
    """A single dependency parsed from a manifest, before merge."""

    name: str
    version: str | None
    source_kind: SourceKind
    source: str
    owner: str | None = None
    repo: str | None = None
    name_specified: str | None = None
    license_body: str | None = None
    source_url: str | None = None

    @property
    def display_name(self) -> str:
        return self.name_specified or self.name

    @property
    def canonical_name(self) -> str:
        return self.display_name.lower()

    @property
    def remote_ref(self) -> tuple[str, str] | None:
        if self.owner and self.repo:
            return self.owner, self.repo
        return None

    @property
    def link(self) -> str | None:
        if self.source_url:
            return self.source_url
        ref = self.remote_ref
        return repo_html_url(*ref) if ref else None

    def fingerprint_line(self) -> str:
        """Stable one-line form used for change detection."""
        ref = "/".join(self.remote_ref) if self.remote_ref else ""
        body_hash = (
            hashlib.sha256(self.license_body.encode("utf-8")).hexdigest()
            if self.license_body is not None
            else ""
        )
        return "|".join(
            [
                self.source_kind.label,
                self.display_name,
                self.version or "",
                ref,
                body_hash,
            ]
        )

    def renamed(self, name: str, version: str | None = None) -> LibraryDescriptor:
        return replace(
            self,
            name_specified=name,
            version=version if version is not None else self.version,
        )


@dataclass(frozen=True)
class LicenseRecord:
    """A resolved, renderable license: one per canonical name after merge."""

    name: str
    version: str | None
    body: str
    kind: SourceKind
    source_url: str | None = None

    @property
    def canonical_name(self) -> str:
        return self.name.lower()

    def title(self, with_version: bool = False) -> str:
        if with_version and self.version:
            return f"{self.name} ({self.version})"
        return self.name

    @classmethod
    def from_descriptor(cls, descriptor: LibraryDescriptor, body: str) -> LicenseRecord:
        return cls(
            name=descriptor.display_name,
            version=descriptor.version,
            body=body,
            kind=descriptor.source_kind,
            source_url=descriptor.link,
        )
