"""Extraction orchestration.

ExtractionService.extract() fetches the tournament settings, resolves the boards
selection and streams every requested board through a one slot queue from a producer
thread to the calling thread, which serializes the boards into PBN board sets.

queue_job()/get_job() run extractions in the background and keep their state in
a ResultsCache so identical requests are computed once.
"""

import contextlib
import io
import queue
import threading
import time
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import List, NamedTuple, Optional
from urllib.parse import urlparse

import requests

from tcPbnLib.errors import (
    BoardsRangeError,
    ExtractorError,
    InvalidBaseUrl,
    JobAlreadyProcessing,
    JobNotFound,
    JobStillProcessing,
    NoResultsCache,
)
from tcPbnLib.logging_config import setup_logger
from tcPbnLib.tcPbnCacheLib import JobStatus, ResultsCache
from tcPbnLib.tcPbnEndplayLib import PBN_FILE_HEADER, serialize_board
from tcPbnLib.tcPbnRangesLib import count_boards, get_boards_to_extract, iter_board_numbers
from tcPbnLib.tcPbnTCLib import TCExtractor
from tcPbnLib.tcPbnTypes import CanonicalBoard, ErrorDescriptor, ExtractionOptions, ExtractionResult

logger = setup_logger(__name__)

_END_OF_BOARDS = object()


class BoardOutcome(NamedTuple):
    board_number: int
    boards: List[CanonicalBoard]
    error: Optional[Exception] = None


def error_descriptor(e, board_number=None, prefix=''):
    return ErrorDescriptor(
        board_number=board_number,
        kind=getattr(e, 'kind', type(e).__name__),
        message=f"{prefix}{e}",
    )


def is_valid_base_url(url):
    parsed = urlparse(url or '')
    return parsed.scheme in ('http', 'https') and bool(parsed.netloc)


class ExtractionService:

    def __init__(self, extractor: TCExtractor, cache: ResultsCache = None, executor: Executor = None, serializer=serialize_board, header=PBN_FILE_HEADER):
        self.ex = extractor
        self.pc = cache
        self._owns_executor = executor is None
        self.executor = executor or ThreadPoolExecutor(max_workers=4, thread_name_prefix='tcpbn-job')
        self.serialize = serializer
        self.header = header  # written once at the top of every board set

    @property
    def config(self):
        return self.ex.config

    # ---- synchronous extraction ----

    def _produce(self, base_url, board_ranges, outcomes, cancel_event, stop_event):
        """Producer thread: fetch boards in order, one put per board number."""
        try:
            for i, board_number in enumerate(iter_board_numbers(board_ranges)):
                if stop_event.is_set():
                    break
                if cancel_event is not None and cancel_event.is_set():
                    logger.info(f"Extraction cancelled before board {board_number}")
                    break
                if i > 0 and self.config.pacing_delay > 0:
                    if cancel_event is not None:
                        if cancel_event.wait(self.config.pacing_delay):
                            logger.info(f"Extraction cancelled before board {board_number}")
                            break
                    else:
                        time.sleep(self.config.pacing_delay)
                try:
                    outcome = BoardOutcome(board_number, self.ex.extract_board(base_url, board_number))
                except (requests.RequestException, ValueError, ExtractorError) as e:
                    outcome = BoardOutcome(board_number, [], e)
                except Exception as e:
                    logger.exception(f"Unexpected error translating board {board_number}")
                    outcome = BoardOutcome(board_number, [], e)
                outcomes.put(outcome) # blocks until the consumer took the previous outcome
        finally:
            outcomes.put(_END_OF_BOARDS)

    def extract(self, options: ExtractionOptions, cancel_event: threading.Event = None, progress_class=None) -> ExtractionResult:
        """
        Run one extraction to completion.

        Settings and boards range failures are fatal and return an unsuccessful result
        with a single error. Board failures are recorded and the stream continues.

        Args:
            options: request options.
            cancel_event: when set, no further boards are fetched. Boards already fetched are kept.
            progress_class: optional tqdm like class, instantiated with total=<boards requested>.

        Returns:
            ExtractionResult
        """
        if not is_valid_base_url(options.base_url):
            return ExtractionResult.failed(error_descriptor(InvalidBaseUrl(options.base_url)))

        try:
            settings = self.ex.extract_settings(options.base_url)
        except (requests.RequestException, ValueError, ExtractorError) as e:
            logger.error(f"Failed to extract settings from {options.base_url}: {e}")
            return ExtractionResult.failed(error_descriptor(e, prefix='Failed to extract settings: '))
        logger.info(f"Tournament '{settings.event_name}' boards {settings.start_board_number}-{settings.end_board_number}")

        event_name = options.event_name or settings.event_name

        try:
            board_ranges = get_boards_to_extract(options.boards_range, settings.start_board_number, settings.end_board_number)
        except BoardsRangeError as e:
            logger.error(f"Invalid boards range {options.boards_range!r}: {e}")
            return ExtractionResult.failed(error_descriptor(e))
        logger.info(f"Extracting {count_boards(board_ranges)} boards in ranges {[tuple(r) for r in board_ranges]}")

        outcomes = queue.Queue(maxsize=1)
        stop_event = threading.Event()
        producer = threading.Thread(
            target=self._produce,
            args=(options.base_url, board_ranges, outcomes, cancel_event, stop_event),
            name='tcpbn-producer',
            daemon=True,
        )
        producer.start()

        result = ExtractionResult(event_name=event_name)
        board_set = io.StringIO()
        prev_board_number = None
        end_of_boards = False

        try:
            progress = progress_class(total=count_boards(board_ranges), desc='Extracting boards') if progress_class is not None else contextlib.nullcontext()
            with progress as pbar:
                while True:
                    outcome = outcomes.get()
                    if outcome is _END_OF_BOARDS:
                        end_of_boards = True
                        break
                    if pbar is not None:
                        pbar.update(1)
                    boards = outcome.boards
                    if outcome.error is not None:
                        logger.warning(f"Failed to extract Board {outcome.board_number}: {outcome.error}")
                        result.add_error(error_descriptor(outcome.error, outcome.board_number, prefix=f"Failed to extract Board {outcome.board_number}: "))
                        if not options.fill_missing:
                            continue
                        boards = [CanonicalBoard.placeholder(outcome.board_number)]
                    for board in boards:
                        if options.split_on_discontinuation:
                            if prev_board_number is not None and board.number <= prev_board_number:
                                result.add_board_set(board_set.getvalue())
                                board_set = io.StringIO()
                            prev_board_number = board.number
                        board.event_name = event_name
                        board.generator = self.config.generator
                        try:
                            text = self.serialize(board)
                        except Exception as e:
                            logger.warning(f"Failed to serialize Board {board.number} (number as played): {e}")
                            result.add_error(error_descriptor(e, board.number, prefix=f"Failed to serialize Board {board.number} (number as played): "))
                            continue
                        if board_set.tell() == 0:
                            board_set.write(self.header)
                        board_set.write(text)
                        board_set.write('\n')
                        result.board_count += 1
        finally:
            if not end_of_boards:
                # unblock the producer and let it see the stop before joining
                stop_event.set()
                while outcomes.get() is not _END_OF_BOARDS:
                    pass
            producer.join()

        result.add_board_set(board_set.getvalue())
        result.success = True
        logger.info(f"Extracted {result.board_count} boards successfully. Failed {len(result.errors)} times.")
        return result

    # ---- background jobs ----

    @property
    def job_cache(self) -> ResultsCache:
        if self.pc is None:
            raise NoResultsCache()
        return self.pc

    def _run_job(self, key, options):
        try:
            result = self.extract(options)
        except Exception as e:
            logger.exception(f"Job {key} failed")
            result = ExtractionResult.failed(error_descriptor(e))
        try:
            self.job_cache.save_result(key, result)
        except Exception as e:
            logger.error(f"Job {key} db save failed: {e}")

    def queue_job(self, options: ExtractionOptions) -> str:
        """
        Start an extraction in the background, or reuse a finished one.

        Returns the job key immediately. Poll get_job(key) for the result.

        Raises:
            JobAlreadyProcessing: an identical job is in flight.
            NoResultsCache: the service was built without a cache.
        """
        key = options.hash()
        cache = self.job_cache
        status = cache.get_status(key)
        if status == JobStatus.PROCESSING:
            raise JobAlreadyProcessing(key)
        if status == JobStatus.DONE and not options.force_refresh:
            logger.info(f"Job {key} served from cache")
            return key
        if not cache.set_processing(key, replace_done=options.force_refresh):
            # another submission claimed the key between the two calls
            status = cache.get_status(key)
            if status == JobStatus.DONE and not options.force_refresh:
                return key
            raise JobAlreadyProcessing(key)
        logger.info(f"Job {key} queued for {options.base_url}")
        self.executor.submit(self._run_job, key, options)
        return key

    def get_job(self, key: str) -> ExtractionResult:
        status, result = self.job_cache.get(key)
        if status == JobStatus.NOT_FOUND:
            raise JobNotFound(key)
        if status == JobStatus.PROCESSING:
            raise JobStillProcessing(key)
        return result

    def close(self):
        if self._owns_executor:
            self.executor.shutdown(wait=False)
        self.ex.close()
