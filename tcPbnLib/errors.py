"""Error taxonomy for the TC PBN extractor.

Range resolution and settings errors are fatal to an extraction. Board level
errors are recorded in the result and never abort the stream. Job errors are
raised to callers of the job API.
"""


class TcPbnError(Exception):
    """Base class for all extractor errors."""

    kind = 'error'


# ---- boards range ----

class BoardsRangeError(TcPbnError):
    kind = 'boards_range'


class InvalidBoardsRange(BoardsRangeError):
    kind = 'invalid_boards_range'

    def __init__(self, token=''):
        self.token = token
        super().__init__(f"invalid boards range: {token!r}" if token else "invalid boards range")


class BoardsNotInOrder(BoardsRangeError):
    kind = 'boards_not_in_order'

    def __init__(self, token=''):
        self.token = token
        super().__init__(f"selected boards are not in order: {token!r}" if token else "selected boards are not in order")


class BoardsNotInTournament(BoardsRangeError):
    kind = 'boards_not_in_tournament'

    def __init__(self, board_number, start, end):
        self.board_number = board_number
        self.start = start
        self.end = end
        super().__init__(f"selected boards do not exist in tournament: {board_number} not in {start}-{end}")


# ---- vendor extraction ----

class ExtractorError(TcPbnError):
    kind = 'extractor'


class InvalidBaseUrl(ExtractorError):
    kind = 'invalid_base_url'

    def __init__(self, url):
        self.url = url
        super().__init__(f"invalid base URL: {url!r}")


class UnexpectedStatusCode(ExtractorError):
    kind = 'unexpected_status_code'

    def __init__(self, status_code, url):
        self.status_code = status_code
        self.url = url
        super().__init__(f"unexpected status code {status_code} from {url}")


class InvalidSettings(ExtractorError):
    kind = 'invalid_settings'


class NoDistributionData(ExtractorError):
    kind = 'no_distribution_data'

    def __init__(self, board_number=None):
        self.board_number = board_number
        super().__init__("no distribution data" if board_number is None else f"no distribution data for board {board_number}")


# ---- jobs ----

class JobError(TcPbnError):
    kind = 'job'

    def __init__(self, key):
        self.key = key
        super().__init__(f"{self.message}: {key}")


class JobAlreadyProcessing(JobError):
    kind = 'job_already_processing'
    message = 'job is already being processed'


class JobNotFound(JobError):
    kind = 'job_not_found'
    message = 'job not found'


class JobStillProcessing(JobError):
    kind = 'job_still_processing'
    message = 'job is still being processed'


class NoResultsCache(TcPbnError):
    kind = 'no_results_cache'

    def __init__(self):
        super().__init__("background jobs need a results cache, pass cache= to ExtractionService")
