from __future__ import annotations

import dataclasses

import httpx
import pytest

from myhttp.http_utils import FetchError
from myhttp.models import DIGEST_SIZE, ZERO_DIGEST, PageResult, new_page_result


@pytest.mark.parametrize(
    ("url", "body", "expected"),
    [
        ("http://a.example", b"I love pancakes", "http://a.example d201694ad5c7d8babee659b2401cb9ef"),
        ("http://golang.org", b"Response from http://golang.org", "http://golang.org a4dbbd512dcc9d4a9d0be4f36d78d216"),
        ("http://empty.example", b"", "http://empty.example d41d8cd98f00b204e9800998ecf8427e"),
    ],
)
def test_success_renders_md5_hex(url: str, body: bytes, expected: str) -> None:
    result = new_page_result(url, body, None)

    assert result.ok
    assert len(result.digest) == DIGEST_SIZE
    assert str(result) == expected


def test_large_body_is_reduced_to_digest() -> None:
    result = new_page_result("http://big.example", b"x" * (4 * 1024 * 1024), None)

    assert len(result.digest) == DIGEST_SIZE
    assert [f.name for f in dataclasses.fields(result)] == ["url", "digest", "error"]


def test_failure_renders_error_and_keeps_zero_digest() -> None:
    error = FetchError("http://www.globo.com", httpx.ConnectError("some error"))

    result = new_page_result("http://www.globo.com", None, error)

    assert not result.ok
    assert result.digest == ZERO_DIGEST
    assert result.error is error
    assert str(result) == 'http://www.globo.com (Error: Get "http://www.globo.com": some error)'


def test_error_wins_over_data() -> None:
    error = FetchError("http://x.example", "boom")

    result = new_page_result("http://x.example", b"partial", error)

    assert result.digest == ZERO_DIGEST
    assert str(result) == 'http://x.example (Error: Get "http://x.example": boom)'


def test_reduction_is_idempotent() -> None:
    error = FetchError("http://x.example", "boom")

    assert new_page_result("http://a.example", b"abc", None) == new_page_result("http://a.example", b"abc", None)
    assert new_page_result("http://x.example", None, error) == new_page_result("http://x.example", None, error)


def test_page_result_is_immutable() -> None:
    result = PageResult(url="http://a.example")

    with pytest.raises(dataclasses.FrozenInstanceError):
        result.url = "http://b.example"  # type: ignore[misc]
