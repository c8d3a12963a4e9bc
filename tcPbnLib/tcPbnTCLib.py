"""Tournament Calculator (TC) Scraper Library

Fetches tournament settings and per board protocols published by a TC results
site and translates the vendor JSON into CanonicalBoard records.

Vendor documents:
    <base_url>/settings.json  {"BoardsNumbers": [1, 2, ...], "FullName": "..."}
    <base_url>/p<N>.json      {"ScoringGroups": [{"Distribution": {"_numberAsPlayed": N, "_handRecord": {...}}}]}
"""

from typing import List, Optional
from urllib.parse import urljoin

import requests

from tcPbnLib.config import ExtractorConfig
from tcPbnLib.errors import InvalidSettings, NoDistributionData, UnexpectedStatusCode
from tcPbnLib.logging_config import setup_logger
from tcPbnLib.tcPbnTypes import (
    NESW,
    BoardNumberToDealer,
    CanonicalBoard,
    Contract,
    OptimumScore,
    TournamentSettings,
    iVulToVul_d,
)

logger = setup_logger(__name__)

# vendor json field names
TC_SUIT_TO_SUIT_d = {
    'Spades': 'S',
    'Hearts': 'H',
    'Diamonds': 'D',
    'Clubs': 'C',
}
TC_TRICKS_TO_STRAIN_d = {
    'Clubs': 'C',
    'Diamonds': 'D',
    'Hearts': 'H',
    'Spades': 'S',
    'Nt': 'N',
}
NO_TRUMP_MARKER = 'N'
MINIMAX_STRAIN_d = { # minimax suit codes after 'nt' has been collapsed to NO_TRUMP_MARKER
    'C': 'C',
    'D': 'D',
    'H': 'H',
    'S': 'S',
    NO_TRUMP_MARKER: 'N',
}
MINIMAX_DIRECTION_d = {
    'N': 'N',
    'E': 'E',
    'S': 'S',
    'W': 'W',
}


def parse_cards_string(s: str):
    """'AK10' -> ('A', 'K', 'T'). Only the first '10' is collapsed, a suit holds one ten."""
    return tuple(c.upper() for c in s.replace('10', 'T', 1))


def parse_minimax(raw: str) -> Contract:
    """
    Parse the vendor's compact minimax notation e.g. '4SXS+420', '3NT E -400', '6hN980'.

    Layout after normalization: level, strain, optional 'X', declarer, score.
    Parsing is lenient: missing characters leave fields as None and an
    unparsable score becomes 0.
    """
    s = raw.replace('nt', NO_TRUMP_MARKER, 1).replace('NT', NO_TRUMP_MARKER, 1).replace(' ', '')
    chars = list(s)
    contract = Contract()
    if len(chars) > 0 and chars[0] in '1234567':
        contract.level = int(chars[0])
    if len(chars) > 1:
        contract.strain = MINIMAX_STRAIN_d.get(chars[1].upper())
    direction_index = 2
    if len(chars) > 2 and chars[2] in ('X', 'x'):
        contract.doubled = True
        direction_index = 3
    if len(chars) > direction_index:
        contract.declarer = MINIMAX_DIRECTION_d.get(chars[direction_index].upper())
    try:
        contract.score = int(''.join(chars[direction_index+1:]))
    except ValueError:
        contract.score = 0
    return contract


def minimax_to_optimum(contract: Contract) -> OptimumScore:
    # optimum score is always from the N/S point of view
    score = contract.score
    if contract.declarer in ('E', 'W'):
        score = -score
    return OptimumScore(direction='N', score=score)


def _as_dict(v):
    return v if isinstance(v, dict) else {}


def _as_int(v):
    try:
        return int(v)
    except (TypeError, ValueError):
        return 0


def _hand_is_empty(hand_d):
    return all(not (hand_d.get(suit) or '') for suit in TC_SUIT_TO_SUIT_d)


def translate_scoring_group(group) -> Optional[CanonicalBoard]:
    """Build a fresh CanonicalBoard from one scoring group. None if the group is a placeholder."""
    distribution = _as_dict(_as_dict(group).get('Distribution'))
    hand_record = _as_dict(distribution.get('_handRecord'))

    if _hand_is_empty(_as_dict(hand_record.get('HandN'))):
        return None

    number = _as_int(distribution.get('_numberAsPlayed'))

    hands = {}
    double_dummy_tricks = {}
    for seat in NESW:
        hand_d = _as_dict(hand_record.get(f'Hand{seat}'))
        hands[seat] = {TC_SUIT_TO_SUIT_d[suit]: parse_cards_string(hand_d.get(suit) or '') for suit in TC_SUIT_TO_SUIT_d}
        tricks_d = _as_dict(hand_record.get(f'TricksFrom{seat}'))
        double_dummy_tricks[seat] = {strain: _as_int(tricks_d.get(k)) for k, strain in TC_TRICKS_TO_STRAIN_d.items()}

    board = CanonicalBoard(
        number=number,
        dealer=BoardNumberToDealer(number),
        vulnerability=iVulToVul_d.get(_as_int(hand_record.get('Vulnerability'))),
        hands=hands,
        double_dummy_tricks=double_dummy_tricks,
    )

    minimax = hand_record.get('MiniMax') or ''
    if minimax:
        board.minimax = parse_minimax(minimax)
        board.optimum = minimax_to_optimum(board.minimax)
    return board


def translate_board_document(doc, board_number=None) -> List[CanonicalBoard]:
    """
    Translate one p<N>.json document into one CanonicalBoard per played scoring group.

    Raises:
        NoDistributionData: no scoring group carries a deal.
    """
    groups = _as_dict(doc).get('ScoringGroups') or []
    if not isinstance(groups, list):
        groups = []
    boards = []
    for group in groups:
        board = translate_scoring_group(group)
        if board is None:
            continue # placeholder e.g. a replay with no hand record
        boards.append(board)
    if not boards:
        raise NoDistributionData(board_number)
    return boards


class TCExtractor:
    """
    HTTP client for a TC results site. One requests.Session per extractor, every
    request carries the configured User-Agent and timeout.
    """

    def __init__(self, config: ExtractorConfig = None, session: requests.Session = None):
        self.config = config or ExtractorConfig()
        self.session = session or requests.Session()
        self.session.headers.update({'User-Agent': self.config.user_agent})

    def _get_json(self, base_url: str, name: str):
        url = urljoin(base_url if base_url.endswith('/') else base_url + '/', name)
        logger.debug(f"GET {url}")
        response = self.session.get(url, timeout=self.config.timeout)
        if response.status_code != requests.codes.ok:
            raise UnexpectedStatusCode(response.status_code, url)
        return response.json()

    def extract_settings(self, base_url: str) -> TournamentSettings:
        data = _as_dict(self._get_json(base_url, 'settings.json'))
        boards_numbers = data.get('BoardsNumbers') or []
        if not isinstance(boards_numbers, list) or not boards_numbers:
            raise InvalidSettings("tournament settings list no boards")
        return TournamentSettings(
            start_board_number=_as_int(boards_numbers[0]),
            end_board_number=_as_int(boards_numbers[-1]),
            event_name=data.get('FullName') or '',
        )

    def extract_board(self, base_url: str, board_number: int) -> List[CanonicalBoard]:
        doc = self._get_json(base_url, f'p{board_number}.json')
        return translate_board_document(doc, board_number)

    def close(self):
        self.session.close()
