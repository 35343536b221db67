from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Sequence

from myhttp.http_utils import FetchError
from myhttp.models import PageResult, new_page_result

LOGGER = logging.getLogger(__name__)

Fetch = Callable[[str], Awaitable[bytes]]

_CLOSED = object()


class ResultStream:
    """Single-use async feed of PageResults, in completion order.

    Capacity is one slot per URL plus the close marker, so producers never
    block on a slow consumer and nothing is dropped.
    """

    def __init__(self, expected: int) -> None:
        self._queue: asyncio.Queue[object] = asyncio.Queue(maxsize=expected + 1)
        self._closed = False
        self._finished = False
        self._error: BaseException | None = None
        self.producer: asyncio.Task[None] | None = None

    @property
    def closed(self) -> bool:
        return self._closed

    async def put(self, result: PageResult) -> None:
        if self._closed:
            raise RuntimeError(f"result for {result.url} put on a closed stream")
        await self._queue.put(result)

    def close(self, error: BaseException | None = None) -> None:
        if self._closed:
            raise RuntimeError("stream already closed")
        self._closed = True
        self._error = error
        self._queue.put_nowait(_CLOSED)

    def __aiter__(self) -> ResultStream:
        return self

    async def __anext__(self) -> PageResult:
        if self._finished:
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is _CLOSED:
            self._finished = True
            if self._error is not None:
                raise self._error
            raise StopAsyncIteration
        return item  # type: ignore[return-value]


async def _fetch_one(url: str, fetch: Fetch, permits: asyncio.Semaphore, stream: ResultStream) -> None:
    try:
        try:
            data = await fetch(url)
        except FetchError as exc:
            LOGGER.debug("fetch failed url=%s err=%s", url, exc)
            result = new_page_result(url, None, exc)
        except Exception as exc:  # noqa: BLE001
            LOGGER.error("fetch crashed url=%s err=%s: %s", url, type(exc).__name__, exc)
            result = new_page_result(url, None, exc)
        else:
            result = new_page_result(url, data, None)
        await stream.put(result)
    finally:
        permits.release()


async def _admit(urls: list[str], max_concurrent: int, fetch: Fetch, stream: ResultStream) -> None:
    permits = asyncio.Semaphore(max_concurrent)
    units: list[asyncio.Task[None]] = []
    error: BaseException | None = None
    try:
        for url in urls:
            await permits.acquire()
            units.append(asyncio.create_task(_fetch_one(url, fetch, permits, stream)))

        # Only cancellation escapes a unit; wait for every unit, then report it.
        outcomes = await asyncio.gather(*units, return_exceptions=True)
        for url, outcome in zip(urls, outcomes):
            if isinstance(outcome, BaseException):
                LOGGER.error("fetch unit aborted url=%s err=%r", url, outcome)
                if error is None:
                    error = outcome
    finally:
        stream.close(error)


def schedule(urls: Sequence[str], max_concurrent: int, fetch: Fetch) -> ResultStream:
    """Fetch ``urls`` with at most ``max_concurrent`` requests in flight.

    Must be called from a running event loop. Returns a stream yielding one
    PageResult per URL (duplicates included) as each fetch completes; the
    stream ends once every fetch has delivered its result.
    """

    if max_concurrent < 1:
        raise ValueError(f"max_concurrent must be >= 1, got {max_concurrent}")

    pending = list(urls)
    stream = ResultStream(len(pending))
    if not pending:
        stream.close()
        return stream

    stream.producer = asyncio.get_running_loop().create_task(_admit(pending, max_concurrent, fetch, stream))
    return stream
