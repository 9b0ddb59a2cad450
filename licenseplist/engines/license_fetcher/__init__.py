"""Resolve license texts of remote libraries."""

from licenseplist.engines.license_fetcher.fetcher import LicenseSource, fetch
from licenseplist.engines.license_fetcher.github_client import GitHubClient, GitHubLicenseSource

__all__ = ["GitHubClient", "GitHubLicenseSource", "LicenseSource", "fetch"]
