"""Bounded-concurrency license fetch with a fixed worker pool."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

import httpx
import structlog

from licenseplist.exceptions import FetchError
from licenseplist.models import LibraryDescriptor, LicenseRecord
from licenseplist.options import DEFAULT_CONCURRENCY

log = structlog.get_logger("licenseplist.fetcher")


@runtime_checkable
class LicenseSource(Protocol):
    """Capability: resolve the license text of one remote library.

    Raises :class:`FetchError` (or an ``httpx`` error) when unavailable.
    Timeouts are the implementation's concern.
    """

    async def fetch_license(self, descriptor: LibraryDescriptor) -> str: ...


async def fetch(
    descriptors: Sequence[LibraryDescriptor],
    source: LicenseSource,
    *,
    concurrency: int = DEFAULT_CONCURRENCY,
) -> list[LicenseRecord]:
    """Resolve licenses for *descriptors* with at most *concurrency* in flight.

    The pool is *concurrency* asyncio worker tasks on the running event loop,
    not threads: requests overlap while they wait on the network, and the
    bound counts requests in flight rather than CPU cores. A blocking
    :class:`LicenseSource` therefore serializes the pool.

    Failed descriptors are logged and left out. Returns once every
    descriptor has settled; the order of the result is unspecified.
    """
    if concurrency < 1:
        raise ValueError("concurrency must be at least 1")
    if not descriptors:
        return []

    queue: asyncio.Queue[LibraryDescriptor] = asyncio.Queue()
    for descriptor in descriptors:
        queue.put_nowait(descriptor)

    records: list[LicenseRecord] = []

    async def _worker() -> None:
        while True:
            descriptor = await queue.get()
            try:
                body = await source.fetch_license(descriptor)
                records.append(LicenseRecord.from_descriptor(descriptor, body))
                log.debug("fetcher.fetched", library=descriptor.display_name)
            except (FetchError, httpx.HTTPError) as exc:
                log.warning(
                    "fetcher.license_missing",
                    library=descriptor.display_name,
                    error=str(exc),
                )
            except Exception:
                log.error(
                    "fetcher.unexpected_error",
                    library=descriptor.display_name,
                    exc_info=True,
                )
            finally:
                queue.task_done()

    pool_size = min(concurrency, len(descriptors))
    workers = [asyncio.create_task(_worker(), name=f"fetch-{i}") for i in range(pool_size)]
    try:
        await queue.join()
    finally:
        for worker in workers:
            worker.cancel()
        await asyncio.gather(*workers, return_exceptions=True)

    log.info(
        "fetcher.completed",
        requested=len(descriptors),
        resolved=len(records),
        failed=len(descriptors) - len(records),
    )
    return records
