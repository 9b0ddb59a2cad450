"""Shared pytest fixtures for licenseplist tests."""

from __future__ import annotations

import asyncio

import pytest

from licenseplist.exceptions import FetchError
from licenseplist.models import LibraryDescriptor


class FakeLicenseSource:
    """Instrumented license capability: records calls and peak concurrency."""

    def __init__(
        self,
        failing: set[str] | None = None,
        delay: float = 0.01,
        bodies: dict[str, str] | None = None,
    ) -> None:
        self.failing = {name.lower() for name in (failing or set())}
        self.bodies = {name.lower(): body for name, body in (bodies or {}).items()}
        self.delay = delay
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch_license(self, descriptor: LibraryDescriptor) -> str:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            self.calls.append(descriptor.display_name)
            if descriptor.canonical_name in self.failing:
                raise FetchError(descriptor.display_name, "not found")
            default = f"{descriptor.display_name} license text"
            return self.bodies.get(descriptor.canonical_name, default)
        finally:
            self.in_flight -= 1


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture
def make_source():
    def _make(
        failing: set[str] | None = None,
        delay: float = 0.01,
        bodies: dict[str, str] | None = None,
    ) -> FakeLicenseSource:
        return FakeLicenseSource(failing=failing, delay=delay, bodies=bodies)

    return _make
