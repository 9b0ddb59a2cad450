"""CLI entry point: license-plist.

Usage:
    license-plist                                   # defaults, run from the Xcode project root
    license-plist --output-path App/Settings.bundle
    license-plist --markdown-path Acknowledgements.md --html-path acknowledgements.html
    license-plist --force --fail-if-missing-license
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click
import structlog

from licenseplist import __version__
from licenseplist.config import load_rule_set
from licenseplist.core.logging import setup_logging
from licenseplist.exceptions import ConfigError
from licenseplist.options import (
    DEFAULT_CONCURRENCY,
    DEFAULT_OUTPUT_PATH,
    DEFAULT_PREFIX,
    Options,
    resolve_github_token,
)
from licenseplist.pipeline import EXIT_FAILURE, LicensePlistPipeline

log = structlog.get_logger("licenseplist.cli")

_PATH = click.Path(path_type=Path)


@click.command()
@click.option("--output-path", type=_PATH, default=DEFAULT_OUTPUT_PATH, show_default=True)
@click.option("--cartfile-path", type=_PATH, default=Path("Cartfile"), show_default=True)
@click.option("--mintfile-path", type=_PATH, default=Path("Mintfile"), show_default=True)
@click.option("--pods-path", type=_PATH, default=Path("Pods"), show_default=True)
@click.option("--package-path", type=_PATH, default=Path("Package.swift"), show_default=True)
@click.option("--xcodeproj-path", type=_PATH, default=Path("*.xcodeproj"), show_default=True)
@click.option(
    "--config-path",
    type=_PATH,
    default=None,
    help="YAML config (default: license_plist.yml when present)",
)
@click.option("--prefix", default=DEFAULT_PREFIX, show_default=True)
@click.option(
    "--github-token",
    default=None,
    help="GitHub token (env: LICENSE_PLIST_GITHUB_TOKEN or GITHUB_TOKEN)",
)
@click.option("--html-path", type=_PATH, default=None, help="Also write an HTML report")
@click.option("--markdown-path", type=_PATH, default=None, help="Also write a Markdown report")
@click.option("--force", is_flag=True, help="Regenerate even if nothing changed")
@click.option("--add-version-numbers", is_flag=True, help="Append versions to titles")
@click.option("--single-page", is_flag=True, help="Put every license in the root plist")
@click.option(
    "--fail-if-missing-license", is_flag=True, help="Exit 1 when a remote license is missing"
)
@click.option(
    "--concurrency",
    type=click.IntRange(min=1),
    default=DEFAULT_CONCURRENCY,
    show_default=True,
    help="Concurrent license downloads",
)
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.version_option(__version__, prog_name="license-plist")
def main(
    output_path: Path,
    cartfile_path: Path,
    mintfile_path: Path,
    pods_path: Path,
    package_path: Path,
    xcodeproj_path: Path,
    config_path: Path | None,
    prefix: str,
    github_token: str | None,
    html_path: Path | None,
    markdown_path: Path | None,
    force: bool,
    add_version_numbers: bool,
    single_page: bool,
    fail_if_missing_license: bool,
    concurrency: int,
    verbose: bool,
) -> None:
    """Generate a Settings.bundle plist of third-party licenses."""
    setup_logging(verbose)

    # An explicit --config-path must exist; the default one is optional.
    try:
        rules = load_rule_set(
            config_path or Path("license_plist.yml"), required=config_path is not None
        )
    except ConfigError as exc:
        log.error("config.invalid", path=exc.path, reason=exc.reason)
        sys.exit(EXIT_FAILURE)

    rules = rules.with_flags(
        force=force,
        add_version_numbers=add_version_numbers,
        single_page=single_page,
        fail_if_missing_license=fail_if_missing_license,
    )
    options = Options(
        output_path=output_path,
        cartfile_path=cartfile_path,
        mintfile_path=mintfile_path,
        pods_path=pods_path,
        package_path=package_path,
        xcodeproj_path=xcodeproj_path,
        prefix=prefix,
        github_token=resolve_github_token(github_token),
        html_path=html_path,
        markdown_path=markdown_path,
        concurrency=concurrency,
    )
    if options.github_token is None:
        log.info("github.no_token", message="Anonymous GitHub requests are rate limited")

    outcome = asyncio.run(LicensePlistPipeline(options, rules).run())
    sys.exit(outcome.exit_code)


if __name__ == "__main__":
    main()
