# Resolves a user supplied boards spec e.g. '1,2,4-7' into board ranges.

import re
from typing import List

from tcPbnLib.errors import BoardsNotInOrder, BoardsNotInTournament, InvalidBoardsRange
from tcPbnLib.tcPbnTypes import BoardRange


_int_re = re.compile(r'[+-]?[0-9]+')


def _to_int(token, s):
    # int() alone would accept surrounding whitespace and underscores
    if not _int_re.fullmatch(s):
        raise InvalidBoardsRange(token)
    return int(s)


def get_boards_to_extract(boards_spec: str, start: int, end: int) -> List[BoardRange]:
    """
    Parse a comma separated boards spec into ascending, non-overlapping ranges.

    Each token is either a single board number or a hyphenated pair. Numbers must
    strictly increase across the whole selection and lie within [start, end].

    Args:
        boards_spec: e.g. '' (all boards), '3', '1,2,4-7'
        start: first board number of the tournament
        end: last board number of the tournament

    Returns:
        list of BoardRange in the order given. Ranges are not merged.

    Raises:
        InvalidBoardsRange, BoardsNotInOrder, BoardsNotInTournament
    """
    if boards_spec == '':
        return [BoardRange(start, end)]

    boards = []
    current_highest = 0
    for token in boards_spec.split(','):
        if '-' in token:
            parts = token.split('-')
            if len(parts) != 2:
                raise InvalidBoardsRange(token)
            first = _to_int(token, parts[0])
            if first <= current_highest:
                raise BoardsNotInOrder(token)
            current_highest = first
            if first < start:
                raise BoardsNotInTournament(first, start, end)
            last = _to_int(token, parts[1])
            if last <= current_highest:
                raise BoardsNotInOrder(token)
            current_highest = last
            if last > end:
                raise BoardsNotInTournament(last, start, end)
            if first > last: # unreachable after the checks above. keep as a guard.
                raise BoardsNotInOrder(token)
            boards.append(BoardRange(first, last))
        else:
            board = _to_int(token, token)
            if board <= current_highest:
                raise BoardsNotInOrder(token)
            if board < start or board > end:
                raise BoardsNotInTournament(board, start, end)
            current_highest = board
            boards.append(BoardRange(board, board))
    return boards


def count_boards(board_ranges):
    return sum(r.end - r.start + 1 for r in board_ranges)


def iter_board_numbers(board_ranges):
    for r in board_ranges:
        yield from range(r.start, r.end + 1)
