# tcPbnLib package
from tcPbnLib.tcPbnTypes import (
    NESW,
    SHDC,
    CDHSN,
    iVulToVul_d,
    BoardNumberToDealer,
    BoardRange,
    TournamentSettings,
    Contract,
    OptimumScore,
    CanonicalBoard,
    ExtractionOptions,
    ErrorDescriptor,
    ExtractionResult,
)

from tcPbnLib.tcPbnRangesLib import (
    get_boards_to_extract,
    count_boards,
)

from tcPbnLib.tcPbnTCLib import (
    TCExtractor,
    translate_board_document,
    parse_minimax,
)

from tcPbnLib.tcPbnCacheLib import (
    JobStatus,
    ResultsCache,
    InMemoryResultsCache,
    RedisResultsCache,
)

from tcPbnLib.tcPbnServiceLib import (
    ExtractionService,
)

from tcPbnLib.logging_config import (
    setup_logger,
)

__version__ = '0.3.0'
