# Types shared by the resolver, translator, serializer and job layers.

import hashlib
from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

NESW = 'NESW'
SHDC = 'SHDC'
CDHSN = 'CDHSN'

iVulToVul_d = {
    0: 'None',
    1: 'N_S',
    2: 'E_W',
    3: 'Both',
}


def BoardNumberToDealer(bn):
    return NESW[(bn-1) & 3]


class BoardRange(NamedTuple):
    start: int
    end: int


@dataclass(frozen=True)
class TournamentSettings:
    start_board_number: int
    end_board_number: int
    event_name: str


@dataclass
class Contract:
    level: Optional[int] = None
    strain: Optional[str] = None  # one of CDHSN
    doubled: bool = False
    declarer: Optional[str] = None  # one of NESW
    score: int = 0

    def __str__(self):
        return f"{self.level or ''}{self.strain or ''}{'X' if self.doubled else ''}{self.declarer or ''}{self.score}"


@dataclass
class OptimumScore:
    direction: str = 'N'
    score: int = 0


@dataclass
class CanonicalBoard:
    number: int
    dealer: Optional[str] = None
    vulnerability: Optional[str] = None
    hands: Dict[str, Dict[str, Tuple[str, ...]]] = field(default_factory=dict)  # seat -> suit -> ranks
    double_dummy_tricks: Dict[str, Dict[str, int]] = field(default_factory=dict)  # seat -> strain -> tricks
    minimax: Optional[Contract] = None
    optimum: Optional[OptimumScore] = None
    event_name: str = ''
    generator: str = ''

    @classmethod
    def placeholder(cls, number):
        """Board carrying only its number, rendered as an empty board."""
        return cls(number=number)

    @property
    def is_placeholder(self):
        return not self.hands


class ExtractionOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_url: str
    event_name: str = ''
    boards_range: str = ''
    split_on_discontinuation: bool = False
    force_refresh: bool = False
    fill_missing: bool = False

    def hash(self) -> str:
        # force_refresh is not part of the key, a refresh reuses it.
        def b(v):
            return 'true' if v else 'false'
        s = f"{self.base_url} {self.event_name} {b(self.split_on_discontinuation)} {self.boards_range} {b(self.fill_missing)}"
        return hashlib.md5(s.encode('utf-8')).hexdigest()


class ErrorDescriptor(BaseModel):
    board_number: Optional[int] = None
    kind: str = 'error'
    message: str

    def __str__(self):
        return self.message


class ExtractionResult(BaseModel):
    success: bool = False
    board_sets: List[str] = Field(default_factory=list)
    errors: List[ErrorDescriptor] = Field(default_factory=list)
    event_name: str = ''
    board_count: int = 0

    @classmethod
    def failed(cls, error: ErrorDescriptor) -> 'ExtractionResult':
        return cls(errors=[error])

    def add_board_set(self, board_set: str) -> None:
        self.board_sets.append(board_set)

    def add_error(self, error: ErrorDescriptor) -> None:
        self.errors.append(error)
