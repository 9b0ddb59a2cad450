"""Rule set — exclusions, renames, config-declared libraries and run flags.

Loaded from ``license_plist.yml``::

    github:
      - mono0926/NativePopup
      - owner: ReactiveX
        name: RxSwift
        version: 6.5.0
    manual:
      - name: WebRTC
        version: M61
        source: https://webrtc.org
        file: licenses/webrtc.txt
    exclude:
      - Hero
      - /^Firebase/
      - owner: lkzhao
    rename:
      LicensePlist: License Plist
      WebRTC:
        name: Web RTC
        version: M62
    options:
      addVersionNumbers: true
      failIfMissingLicense: true
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from licenseplist.core.github import split_owner_repo
from licenseplist.exceptions import ConfigError
from licenseplist.models import LibraryDescriptor

log = structlog.get_logger("licenseplist.config")

_REGEX_RE = re.compile(r"^/(.+)/$")


class _ConfigModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class ExcludeRule(_ConfigModel):
    """Exclude by name (exact, case-insensitive, or ``/regex/``) and/or owner."""

    name: str | None = None
    owner: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _from_string(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"name": value}
        return value

    @model_validator(mode="after")
    def _require_key(self) -> ExcludeRule:
        if not self.name and not self.owner:
            raise ValueError("exclude entry needs a name or an owner")
        return self

    def matches(self, descriptor: LibraryDescriptor) -> bool:
        if self.owner is not None and (descriptor.owner or "").lower() != self.owner.lower():
            return False
        if self.name is None:
            return True
        m = _REGEX_RE.match(self.name)
        if m:
            return re.search(m.group(1), descriptor.name) is not None
        return descriptor.name.lower() == self.name.lower()


class RenameRule(_ConfigModel):
    name: str
    version: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _from_string(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"name": value}
        return value


class GitHubEntry(_ConfigModel):
    """A remote library declared in the config; overrides loaded versions."""

    owner: str
    name: str
    version: str | None = None
    source: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _from_string(cls, value: Any) -> Any:
        if isinstance(value, str):
            parsed = split_owner_repo(value)
            if parsed is None:
                raise ValueError(f"expected 'owner/name', got {value!r}")
            return {"owner": parsed[0], "name": parsed[1]}
        return value


class ManualEntry(_ConfigModel):
    name: str
    version: str | None = None
    body: str | None = None
    file: str | None = None
    source: str | None = None


class RuleSet(_ConfigModel):
    """Everything a run needs to know besides manifest paths."""

    excludes: list[ExcludeRule] = Field(default_factory=list, alias="exclude")
    renames: dict[str, RenameRule] = Field(default_factory=dict, alias="rename")
    github: list[GitHubEntry] = Field(default_factory=list)
    manuals: list[ManualEntry] = Field(default_factory=list, alias="manual")
    force: bool = False
    single_page: bool = False
    fail_if_missing_license: bool = False
    add_version_numbers: bool = False
    base_dir: Path = Path(".")

    @model_validator(mode="before")
    @classmethod
    def _flatten_options(cls, value: Any) -> Any:
        if isinstance(value, dict) and "options" in value:
            value = dict(value)
            options = value.pop("options") or {}
            if not isinstance(options, dict):
                raise ValueError("'options' must be a mapping")
            for key, flag in options.items():
                value.setdefault(key, flag)
        return value

    @field_validator("excludes", "github", "manuals", mode="before")
    @classmethod
    def _none_as_empty_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("renames", mode="before")
    @classmethod
    def _none_as_empty_dict(cls, value: Any) -> Any:
        return {} if value is None else value

    # ── rules ────────────────────────────────────────────────────────────

    def is_excluded(self, descriptor: LibraryDescriptor) -> bool:
        return any(rule.matches(descriptor) for rule in self.excludes)

    def rename(self, descriptor: LibraryDescriptor) -> LibraryDescriptor:
        rule = self.renames.get(descriptor.name)
        if rule is None:
            lowered = descriptor.name.lower()
            rule = next((r for k, r in self.renames.items() if k.lower() == lowered), None)
        if rule is None:
            return descriptor
        return descriptor.renamed(rule.name, rule.version)

    def apply(self, descriptors: list[LibraryDescriptor]) -> list[LibraryDescriptor]:
        """Drop excluded descriptors, then rename the rest."""
        kept: list[LibraryDescriptor] = []
        for descriptor in descriptors:
            if self.is_excluded(descriptor):
                log.debug("rules.excluded", library=descriptor.name, source=descriptor.source)
                continue
            kept.append(self.rename(descriptor))
        return kept

    def with_flags(self, **flags: bool) -> RuleSet:
        """Return a copy with the truthy *flags* switched on."""
        enabled = {key: True for key, value in flags.items() if value}
        return self.model_copy(update=enabled) if enabled else self


def load_rule_set(path: Path | None, *, required: bool = False) -> RuleSet:
    """Load the YAML config at *path*.

    A missing file yields an empty rule set unless *required* is set.
    Raises :class:`ConfigError` on unreadable, malformed or invalid YAML.
    """
    if path is None or not path.is_file():
        if required:
            raise ConfigError("config file not found", str(path))
        return RuleSet()

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"cannot read: {exc}", str(path)) from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML: {exc}", str(path)) from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError("top level must be a mapping", str(path))

    try:
        rules = RuleSet.model_validate({**raw, "base_dir": path.parent})
    except ValidationError as exc:
        raise ConfigError(str(exc), str(path)) from exc

    log.info(
        "config.loaded",
        path=str(path),
        excludes=len(rules.excludes),
        renames=len(rules.renames),
        github=len(rules.github),
        manuals=len(rules.manuals),
    )
    return rules
