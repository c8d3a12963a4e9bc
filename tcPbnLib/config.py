"""Runtime configuration, passed explicitly to the extractor and caches."""

import os
from dataclasses import dataclass

DEFAULT_USER_AGENT = 'tc-pbn-extractor'
DEFAULT_TIMEOUT = 10.0  # seconds per HTTP request
DEFAULT_PACING_DELAY = 0.1  # seconds between board fetches
DEFAULT_GENERATOR = 'tc-pbn-extractor'

PROCESSING_TTL = 5 * 60
RESULT_TTL = 15 * 60


def _env_float(name, default):
    value = os.getenv(name)
    if value is None or value == '':
        return default
    return float(value)


def _env_int(name, default):
    value = os.getenv(name)
    if value is None or value == '':
        return default
    return int(value)


@dataclass(frozen=True)
class ExtractorConfig:
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = DEFAULT_TIMEOUT
    pacing_delay: float = DEFAULT_PACING_DELAY
    generator: str = DEFAULT_GENERATOR

    @classmethod
    def from_env(cls):
        return cls(
            user_agent=os.getenv('TCPBN_USER_AGENT') or DEFAULT_USER_AGENT,
            timeout=_env_float('TCPBN_TIMEOUT', DEFAULT_TIMEOUT),
            pacing_delay=_env_float('TCPBN_PACING_DELAY', DEFAULT_PACING_DELAY),
            generator=os.getenv('TCPBN_GENERATOR') or DEFAULT_GENERATOR,
        )


@dataclass(frozen=True)
class CacheConfig:
    redis_url: str = ''  # empty means use the in-memory cache
    processing_ttl: int = PROCESSING_TTL
    result_ttl: int = RESULT_TTL

    @classmethod
    def from_env(cls):
        return cls(
            redis_url=os.getenv('TCPBN_REDIS_URL', ''),
            processing_ttl=_env_int('TCPBN_PROCESSING_TTL', PROCESSING_TTL),
            result_ttl=_env_int('TCPBN_RESULT_TTL', RESULT_TTL),
        )
