"""Job results cache.

Maps a job key (ExtractionOptions.hash()) to one of: not found, processing,
or done with a stored ExtractionResult. The cache is the only state shared
between concurrent job submissions.
"""

import threading
import time
from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Callable, Dict, Optional, Tuple

import redis

from tcPbnLib.config import PROCESSING_TTL, RESULT_TTL
from tcPbnLib.logging_config import setup_logger
from tcPbnLib.tcPbnTypes import ExtractionResult

logger = setup_logger(__name__)

PROCESSING = 'processing'


class JobStatus(IntEnum):
    NOT_FOUND = 0
    PROCESSING = 1
    DONE = 2


class ResultsCache(ABC):

    @abstractmethod
    def get_status(self, key: str) -> JobStatus:
        pass

    @abstractmethod
    def get(self, key: str) -> Tuple[JobStatus, Optional[ExtractionResult]]:
        """The result is only meaningful when the status is DONE."""

    @abstractmethod
    def set_processing(self, key: str, replace_done: bool = False) -> bool:
        """
        Atomically mark key as processing with the short TTL.

        Claims the key when it is absent, or when it holds a finished result and
        replace_done is set. Returns False, leaving the key untouched, otherwise.
        """

    @abstractmethod
    def save_result(self, key: str, result: ExtractionResult) -> None:
        """Store result with the long TTL, superseding any processing marker."""


class InMemoryResultsCache(ResultsCache):
    """Process local cache. Expired entries are dropped on read and swept on every write."""

    def __init__(self, processing_ttl: float = PROCESSING_TTL, result_ttl: float = RESULT_TTL, clock: Callable[[], float] = time.monotonic):
        self.processing_ttl = processing_ttl
        self.result_ttl = result_ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[str, Tuple[float, str]] = {}  # key -> (expires_at, value)

    def _read(self, key):
        # caller holds the lock
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def _sweep(self):
        # caller holds the lock
        now = self._clock()
        for key in [k for k, (expires_at, _) in self._entries.items() if now >= expires_at]:
            del self._entries[key]

    def _status(self, value):
        if value is None:
            return JobStatus.NOT_FOUND
        if value == PROCESSING:
            return JobStatus.PROCESSING
        return JobStatus.DONE

    def get_status(self, key):
        with self._lock:
            return self._status(self._read(key))

    def get(self, key):
        with self._lock:
            value = self._read(key)
        status = self._status(value)
        if status != JobStatus.DONE:
            return status, None
        return status, ExtractionResult.model_validate_json(value)

    def set_processing(self, key, replace_done=False):
        with self._lock:
            self._sweep()
            status = self._status(self._read(key))
            if status == JobStatus.PROCESSING or (status == JobStatus.DONE and not replace_done):
                return False
            self._entries[key] = (self._clock() + self.processing_ttl, PROCESSING)
            return True

    def save_result(self, key, result):
        value = result.model_dump_json()
        with self._lock:
            self._sweep()
            self._entries[key] = (self._clock() + self.result_ttl, value)


class RedisResultsCache(ResultsCache):
    """
    Redis backed cache. The processing marker is the literal string 'processing',
    finished jobs hold the result as JSON.
    """

    def __init__(self, client: redis.Redis, processing_ttl: int = PROCESSING_TTL, result_ttl: int = RESULT_TTL):
        self.rdb = client
        self.processing_ttl = processing_ttl
        self.result_ttl = result_ttl

    @classmethod
    def from_url(cls, url, processing_ttl=PROCESSING_TTL, result_ttl=RESULT_TTL, socket_timeout=1.0):
        client = redis.Redis.from_url(url, decode_responses=True, socket_timeout=socket_timeout)
        client.ping()
        logger.info("Connected to redis results cache")
        return cls(client, processing_ttl=processing_ttl, result_ttl=result_ttl)

    @staticmethod
    def _status(value):
        if value is None:
            return JobStatus.NOT_FOUND
        if value == PROCESSING:
            return JobStatus.PROCESSING
        return JobStatus.DONE

    def _get(self, key):
        value = self.rdb.get(key)
        return value.decode("utf-8") if isinstance(value, bytes) else value

    def get_status(self, key):
        return self._status(self._get(key))

    def get(self, key):
        value = self._get(key)
        status = self._status(value)
        if status != JobStatus.DONE:
            return status, None
        return status, ExtractionResult.model_validate_json(value)

    def set_processing(self, key, replace_done=False):
        if not replace_done:
            return bool(self.rdb.set(key, PROCESSING, ex=self.processing_ttl, nx=True))
        # forced refresh: overwrite a finished result but never another worker's marker
        with self.rdb.pipeline() as pipe:
            while True:
                try:
                    pipe.watch(key)
                    if pipe.get(key) in (PROCESSING, PROCESSING.encode()):
                        pipe.unwatch()
                        return False
                    pipe.multi()
                    pipe.set(key, PROCESSING, ex=self.processing_ttl)
                    pipe.execute()
                    return True
                except redis.WatchError:
                    logger.debug(f"Job {key} changed while claiming, retrying")
                    continue

    def save_result(self, key, result):
        self.rdb.set(key, result.model_dump_json(), ex=self.result_ttl)
