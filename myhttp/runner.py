from __future__ import annotations

import asyncio
import logging
import time
from collections import Counter
from dataclasses import dataclass
from functools import partial

import httpx

from myhttp.config import RunConfig
from myhttp.http_utils import build_client, fetch_bytes
from myhttp.pacer import schedule

LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_DEGRADED = 1
EXIT_ERROR = 2


@dataclass
class RunReport:
    total: int
    counts: Counter
    elapsed_seconds: float

    @property
    def ok_count(self) -> int:
        return int(self.counts.get("OK", 0))

    @property
    def failed_count(self) -> int:
        return int(self.counts.get("FETCH_FAIL", 0))


async def run_once(config: RunConfig, *, transport: httpx.AsyncBaseTransport | None = None) -> RunReport:
    started = time.monotonic()
    counts: Counter = Counter()

    async with build_client(config.timeout_seconds, transport=transport) as client:
        fetch = partial(fetch_bytes, client, total_timeout=config.timeout_seconds)
        async for result in schedule(config.urls, config.parallel, fetch):
            print(result, flush=True)
            counts["OK" if result.ok else "FETCH_FAIL"] += 1

    for key in ("OK", "FETCH_FAIL"):
        counts.setdefault(key, 0)

    report = RunReport(total=len(config.urls), counts=counts, elapsed_seconds=time.monotonic() - started)
    LOGGER.info(
        "fetched %d url(s) with parallel=%d: ok=%d failed=%d in %.2fs",
        report.total,
        config.parallel,
        report.ok_count,
        report.failed_count,
        report.elapsed_seconds,
    )
    return report


def evaluate_exit_code(report: RunReport) -> int:
    """Exit code policy.

    - EXIT_OK: at least one URL was fetched (HTTP errors still count as fetched).
    - EXIT_DEGRADED: every URL failed at the transport level.
    """
    if report.ok_count > 0 or report.total == 0:
        return EXIT_OK
    return EXIT_DEGRADED


def run_sync(config: RunConfig) -> int:
    try:
        report = asyncio.run(run_once(config))
    except Exception as exc:  # noqa: BLE001
        LOGGER.error("fatal error: %s: %s", type(exc).__name__, exc)
        return EXIT_ERROR

    exit_code = evaluate_exit_code(report)
    LOGGER.debug("run finished with exit=%d", exit_code)
    return exit_code
