from __future__ import annotations

import hashlib
from dataclasses import dataclass

DIGEST_SIZE = 16
ZERO_DIGEST = bytes(DIGEST_SIZE)


@dataclass(frozen=True, slots=True)
class PageResult:
    url: str
    digest: bytes = ZERO_DIGEST
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def hexdigest(self) -> str:
        return self.digest.hex()

    def __str__(self) -> str:
        if self.error is not None:
            return f"{self.url} (Error: {self.error})"
        return f"{self.url} {self.hexdigest}"


def new_page_result(url: str, data: bytes | None, error: Exception | None) -> PageResult:
    """Reduce a fetch outcome to a fixed-size record.

    Only the MD5 of the body is kept so memory stays bounded by the requests
    in flight rather than by the number of URLs.
    """

    if error is not None:
        return PageResult(url=url, error=error)
    return PageResult(url=url, digest=hashlib.md5(data or b"").digest())
