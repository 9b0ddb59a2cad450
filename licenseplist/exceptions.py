"""Custom exceptions for licenseplist."""

from __future__ import annotations


class LicensePlistError(Exception):
    """Base exception for all licenseplist errors."""


class LoadError(LicensePlistError):
    """Raised when a dependency manifest cannot be read or parsed."""

    def __init__(self, source: str, reason: str, path: str | None = None):
        self.source = source
        self.reason = reason
        self.path = path
        where = f" ({path})" if path else ""
        super().__init__(f"{source}{where}: {reason}")


class ConfigError(LoadError):
    """Raised when the YAML config file is malformed."""

    def __init__(self, reason: str, path: str | None = None):
        super().__init__("config", reason, path)


class FetchError(LicensePlistError):
    """Raised when a remote license cannot be resolved for one library."""

    def __init__(self, library: str, reason: str):
        self.library = library
        self.reason = reason
        super().__init__(f"license for {library!r} unavailable: {reason}")


class MissingLicenseError(LicensePlistError):
    """Raised when remote libraries end up without a license."""

    def __init__(self, names: list[str]):
        self.names = names
        super().__init__(f"missing license for {len(names)} libraries: {', '.join(names)}")


class PersistenceError(LicensePlistError):
    """Raised when the report or the run summary cannot be written."""
