"""Run options: manifest locations, output targets and credentials."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_PREFIX = "com.mono0926.LicensePlist"
DEFAULT_OUTPUT_PATH = Path(f"{DEFAULT_PREFIX}.Output")
DEFAULT_CONCURRENCY = 10

_TOKEN_ENV_VARS = ("LICENSE_PLIST_GITHUB_TOKEN", "GITHUB_TOKEN")


@dataclass
class Options:
    output_path: Path = DEFAULT_OUTPUT_PATH
    cartfile_path: Path = Path("Cartfile")
    mintfile_path: Path = Path("Mintfile")
    pods_path: Path = Path("Pods")
    package_path: Path = Path("Package.swift")
    xcodeproj_path: Path = Path("*.xcodeproj")
    prefix: str = DEFAULT_PREFIX
    github_token: str | None = None
    html_path: Path | None = None
    markdown_path: Path | None = None
    concurrency: int = DEFAULT_CONCURRENCY

    @property
    def summary_path(self) -> Path:
        return self.output_path / f"{self.prefix}.latest_result.txt"

    @property
    def cartfile_resolved_path(self) -> Path:
        return self.cartfile_path.with_name(f"{self.cartfile_path.name}.resolved")

    @property
    def package_resolved_candidates(self) -> list[Path]:
        """Package.resolved beside Package.swift, then inside matching Xcode projects."""
        candidates = [self.package_path.with_name("Package.resolved")]
        xcodeproj = self.xcodeproj_path
        projects = sorted(xcodeproj.parent.glob(xcodeproj.name)) if "*" in xcodeproj.name else [xcodeproj]
        for project in projects:
            candidates.append(
                project / "project.xcworkspace" / "xcshareddata" / "swiftpm" / "Package.resolved"
            )
        return candidates


def resolve_github_token(explicit: str | None = None) -> str | None:
    """Return the explicit token, else the first token found in the environment."""
    if explicit:
        return explicit
    for key in _TOKEN_ENV_VARS:
        token = os.environ.get(key)
        if token:
            return token
    return None
