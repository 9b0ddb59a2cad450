"""Pipeline orchestrator: load, aggregate, diff, fetch, render, validate.

Each stage consumes the previous stage's output object, so stages cannot be
run out of order::

    LoadedSources → AggregatedLibraries → Skip | Proceed → ResolvedLicenses → RunOutcome

Only a :class:`Proceed` decision can be fetched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

import structlog

import licenseplist.engines.loaders  # noqa: F401  (registers loaders)
from licenseplist import __version__
from licenseplist.config import RuleSet
from licenseplist.engines import summary
from licenseplist.engines.aggregator import merge, merge_records
from licenseplist.engines.license_fetcher import GitHubClient, GitHubLicenseSource, LicenseSource, fetch
from licenseplist.engines.loaders.registry import load_all
from licenseplist.engines.missing import find_missing, report_missing
from licenseplist.exceptions import LicensePlistError, MissingLicenseError, PersistenceError
from licenseplist.models import LibraryDescriptor, LicenseRecord, SourceKind
from licenseplist.options import Options
from licenseplist.reporters import write_html, write_markdown, write_plist

log = structlog.get_logger("licenseplist.pipeline")

EXIT_OK = 0
EXIT_FAILURE = 1


# ── stage outputs ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class LoadedSources:
    by_kind: dict[SourceKind, list[LibraryDescriptor]]


@dataclass(frozen=True)
class AggregatedLibraries:
    libraries: list[LibraryDescriptor]

    def of_kind(self, kind: SourceKind) -> list[LibraryDescriptor]:
        return [d for d in self.libraries if d.source_kind is kind]


@dataclass(frozen=True)
class Skip:
    """Nothing changed since the last successful run."""

    fingerprint: str


@dataclass(frozen=True)
class Proceed:
    aggregated: AggregatedLibraries
    fingerprint: str


DiffDecision = Union[Skip, Proceed]


@dataclass(frozen=True)
class ResolvedLicenses:
    aggregated: AggregatedLibraries
    fingerprint: str
    records: list[LicenseRecord]


@dataclass
class RunOutcome:
    exit_code: int
    skipped: bool = False
    records: list[LicenseRecord] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    error: LicensePlistError | None = None


# ── orchestrator ─────────────────────────────────────────────────────────


class LicensePlistPipeline:
    """One report-generation run.

    *license_source* defaults to GitHub, using ``options.github_token``.
    """

    def __init__(
        self,
        options: Options,
        rules: RuleSet,
        license_source: LicenseSource | None = None,
    ) -> None:
        self._options = options
        self._rules = rules
        self._license_source = license_source

    def load_sources(self) -> LoadedSources:
        return LoadedSources(by_kind=load_all(self._options, self._rules))

    def aggregate(self, loaded: LoadedSources) -> AggregatedLibraries:
        return AggregatedLibraries(libraries=merge(loaded.by_kind, self._rules))

    def check_diff(self, aggregated: AggregatedLibraries) -> DiffDecision:
        fingerprint = summary.compute_fingerprint(
            aggregated.libraries, self._fingerprint_flags(), __version__
        )
        previous = summary.read_summary(self._options.summary_path)
        if summary.should_skip(fingerprint, previous, self._rules.force):
            return Skip(fingerprint=fingerprint)
        return Proceed(aggregated=aggregated, fingerprint=fingerprint)

    async def fetch_remote(self, decision: Proceed) -> ResolvedLicenses:
        aggregated = decision.aggregated
        remote = aggregated.of_kind(SourceKind.REMOTE)

        if not remote:
            fetched: list[LicenseRecord] = []
        elif self._license_source is not None:
            fetched = await fetch(remote, self._license_source, concurrency=self._options.concurrency)
        else:
            async with GitHubClient(self._options.github_token) as client:
                fetched = await fetch(
                    remote, GitHubLicenseSource(client), concurrency=self._options.concurrency
                )

        local = [
            LicenseRecord.from_descriptor(d, d.license_body)
            for d in aggregated.of_kind(SourceKind.LOCAL)
            if d.license_body is not None
        ]
        manual = [
            LicenseRecord.from_descriptor(d, d.license_body)
            for d in aggregated.of_kind(SourceKind.MANUAL)
            if d.license_body is not None
        ]
        records = merge_records([*local, *fetched, *manual])
        return ResolvedLicenses(aggregated=aggregated, fingerprint=decision.fingerprint, records=records)

    def render(self, resolved: ResolvedLicenses) -> None:
        options, rules = self._options, self._rules
        write_plist(
            resolved.records,
            options.output_path,
            options.prefix,
            single_page=rules.single_page,
            add_version_numbers=rules.add_version_numbers,
        )
        if options.markdown_path is not None:
            write_markdown(
                resolved.records, options.markdown_path, add_version_numbers=rules.add_version_numbers
            )
        if options.html_path is not None:
            write_html(
                resolved.records, options.html_path, add_version_numbers=rules.add_version_numbers
            )

    async def run(self) -> RunOutcome:
        """Execute every stage and return the outcome; never exits the process."""
        loaded = self.load_sources()
        aggregated = self.aggregate(loaded)
        decision = self.check_diff(aggregated)
        if isinstance(decision, Skip):
            log.warning(
                "pipeline.no_diff",
                message="Completed because no diff. Run with --force to regenerate.",
            )
            return RunOutcome(exit_code=EXIT_OK, skipped=True)

        resolved = await self.fetch_remote(decision)
        try:
            self.render(resolved)
        except PersistenceError as exc:
            log.error("pipeline.render_failed", error=str(exc))
            return RunOutcome(exit_code=EXIT_FAILURE, records=resolved.records, error=exc)

        missing = find_missing(aggregated.of_kind(SourceKind.REMOTE), resolved.records)
        report_missing(missing)
        if missing and self._rules.fail_if_missing_license:
            error = MissingLicenseError(missing)
            log.error("pipeline.missing_license", error=str(error))
            return RunOutcome(
                exit_code=EXIT_FAILURE, records=resolved.records, missing=missing, error=error
            )

        try:
            summary.write_summary(self._options.summary_path, resolved.fingerprint)
        except PersistenceError as exc:
            log.error("pipeline.summary_failed", error=str(exc))
            return RunOutcome(
                exit_code=EXIT_FAILURE, records=resolved.records, missing=missing, error=exc
            )

        log.info("pipeline.completed", licenses=len(resolved.records), missing=len(missing))
        return RunOutcome(exit_code=EXIT_OK, records=resolved.records, missing=missing)

    def _fingerprint_flags(self) -> dict[str, object]:
        return {
            "add-version-numbers": self._rules.add_version_numbers,
            "single-page": self._rules.single_page,
            "markdown": _path_flag(self._options.markdown_path),
            "html": _path_flag(self._options.html_path),
        }


def _path_flag(path: Path | None) -> str | None:
    return str(path) if path is not None else None
