"""Shared fixtures: vendor documents and a stand-in for TCExtractor."""

import copy

import pytest

from tcPbnLib.config import ExtractorConfig
from tcPbnLib.tcPbnTypes import CanonicalBoard, TournamentSettings


def make_hand_record(minimax='4SXS+420', vulnerability=0):
    return {
        'HandN': {'Spades': 'AKQJ', 'Hearts': 'AKQ', 'Diamonds': 'AKQ', 'Clubs': 'AKQ'},
        'HandE': {'Spades': '10987', 'Hearts': 'J109', 'Diamonds': 'J109', 'Clubs': 'J109'},
        'HandS': {'Spades': '654', 'Hearts': '8765', 'Diamonds': '876', 'Clubs': '876'},
        'HandW': {'Spades': '32', 'Hearts': '432', 'Diamonds': '5432', 'Clubs': '5432'},
        'TricksFromN': {'Clubs': 13, 'Diamonds': 13, 'Hearts': 13, 'Spades': 13, 'Nt': 13},
        'TricksFromE': {'Clubs': 0, 'Diamonds': 0, 'Hearts': 0, 'Spades': 0, 'Nt': 0},
        'TricksFromS': {'Clubs': 13, 'Diamonds': 13, 'Hearts': 13, 'Spades': 13, 'Nt': 13},
        'TricksFromW': {'Clubs': 0, 'Diamonds': 0, 'Hearts': 0, 'Spades': 0, 'Nt': 0},
        'Vulnerability': vulnerability,
        'MiniMax': minimax,
    }


def make_board_document(*numbers_as_played, minimax='4SXS+420', vulnerability=0):
    return {
        'ScoringGroups': [
            {'Distribution': {'_numberAsPlayed': n, '_handRecord': make_hand_record(minimax, vulnerability)}}
            for n in numbers_as_played
        ],
    }


def make_board(number):
    return CanonicalBoard(
        number=number,
        dealer='N',
        vulnerability='None',
        hands={seat: {'S': ('A',), 'H': (), 'D': (), 'C': ()} for seat in 'NESW'},
    )


class FakeExtractor:
    """Answers extract_settings/extract_board from canned values. Exceptions in the tables are raised."""

    def __init__(self, settings=None, boards_d=None, config=None):
        self.config = config or ExtractorConfig(pacing_delay=0)
        self.settings = settings or TournamentSettings(1, 5, 'Spring Pairs')
        self.boards_d = boards_d or {}
        self.settings_calls = 0
        self.board_calls = []
        self.closed = False

    def extract_settings(self, base_url):
        self.settings_calls += 1
        if isinstance(self.settings, Exception):
            raise self.settings
        return self.settings

    def extract_board(self, base_url, board_number):
        self.board_calls.append(board_number)
        boards = self.boards_d.get(board_number)
        if isinstance(boards, Exception):
            raise boards
        if boards is None:
            return [make_board(board_number)]
        return copy.deepcopy(boards)

    def close(self):
        self.closed = True


def fake_serializer(board):
    tag = 'placeholder' if board.is_placeholder else 'board'
    return f"{tag} {board.number} {board.event_name} {board.generator}"


@pytest.fixture
def board_document():
    return make_board_document(1)


@pytest.fixture
def extractor():
    return FakeExtractor()
