from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Iterable

from myhttp.http_utils import DEFAULT_TIMEOUT_SECONDS, timeout_from_env
from myhttp.urls import parse_urls

LOGGER = logging.getLogger(__name__)

DEFAULT_PARALLEL = 10
# Rough ceiling on useful concurrent requests per CPU.
REQUESTS_PER_CPU = 8


class ConfigError(ValueError):
    """Invalid run configuration; reported before any fetch starts."""


@dataclass
class RunConfig:
    urls: list[str] = field(default_factory=list)

    # Pacer
    parallel: int = DEFAULT_PARALLEL

    # Fetcher
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS


def max_parallel(cpu_count: int | None = None) -> int:
    cpus = cpu_count if cpu_count is not None else (os.cpu_count() or 1)
    return max(1, cpus) * REQUESTS_PER_CPU


def resolve_parallel(requested: int, ceiling: int) -> int:
    if requested < 1:
        raise ConfigError(f'invalid value "{requested}" for flag --parallel')
    if requested > ceiling:
        LOGGER.warning('value "%d" for flag --parallel is too big, using default max %d', requested, ceiling)
        return ceiling
    return requested


def build_config(raw_urls: Iterable[str], parallel: int, *, ceiling: int | None = None) -> RunConfig:
    resolved = resolve_parallel(parallel, ceiling if ceiling is not None else max_parallel())
    try:
        urls = parse_urls(raw_urls)
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc
    return RunConfig(urls=urls, parallel=resolved, timeout_seconds=timeout_from_env())
