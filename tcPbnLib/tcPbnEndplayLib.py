# Contains functions for:
# 1. converting CanonicalBoard records into endplay Board classes
# 2. serializing them to PBN text using endplay's pbn writer
# 3. reading PBN text back into a polars df for previewing


from collections import defaultdict

import polars as pl
from endplay.parsers import pbn
from endplay.types import Board, Deal, Player, Vul

from tcPbnLib.tcPbnTypes import CDHSN, NESW, SHDC, CanonicalBoard

Vul_to_endplay_d = {
    'None': Vul.none,
    'N_S': Vul.ns,
    'E_W': Vul.ew,
    'Both': Vul.both,
}
endplay_to_Vul_d = {v: k for k, v in Vul_to_endplay_d.items()}

ABILITY_STRAINS = 'NSHDC' # PBN Ability tag lists tricks as nt,s,h,d,c
PBN_FILE_HEADER = '% PBN 2.1\n% EXPORT\n'


def hands_to_pbn(hands):
    # 'N:AKQ.JT9.876.5432 ...' always starting from north.
    return 'N:'+' '.join('.'.join(''.join(hands[seat][suit]) for suit in SHDC) for seat in NESW)


def ability_tag(double_dummy_tricks):
    return ' '.join(
        seat+':'+''.join(format(double_dummy_tricks[seat].get(strain, 0), 'x') for strain in ABILITY_STRAINS)
        for seat in NESW if seat in double_dummy_tricks
    )


def canonical_board_to_endplay(board: CanonicalBoard) -> Board:
    """Convert one CanonicalBoard into an endplay Board. Placeholder boards get an empty deal."""
    deal = Deal() if board.is_placeholder else Deal(hands_to_pbn(board.hands))
    b = Board(
        deal=deal,
        board_num=board.number,
        vul=Vul_to_endplay_d.get(board.vulnerability),
        dealer=Player(NESW.index(board.dealer)) if board.dealer else None,
    )
    if board.event_name:
        b.info['Event'] = board.event_name
    if board.generator:
        b.info['Generator'] = board.generator
    if board.double_dummy_tricks:
        assert set(board.double_dummy_tricks) == set(NESW), board.double_dummy_tricks.keys()
        assert all(set(t) == set(CDHSN) for t in board.double_dummy_tricks.values()), board.double_dummy_tricks
        b.info['Ability'] = ability_tag(board.double_dummy_tricks)
    if board.minimax is not None:
        b.info['Minimax'] = str(board.minimax)
    if board.optimum is not None:
        b.info['OptimumScore'] = f"{'NS' if board.optimum.direction in 'NS' else 'EW'} {board.optimum.score}"
    return b


def strip_file_header(text):
    # pbn.dumps starts every document with "% ..." export lines
    lines = text.splitlines(keepends=True)
    i = 0
    while i < len(lines) and lines[i].startswith('%'):
        i += 1
    return ''.join(lines[i:]).lstrip('\n')


def serialize_board(board: CanonicalBoard) -> str:
    """One board as PBN tag pairs without the file header, see PBN_FILE_HEADER."""
    return strip_file_header(pbn.dumps([canonical_board_to_endplay(board)]))


def pbn_to_df(pbn_text):
    """Parse PBN text with endplay and return one row per board for previewing."""
    board_d = defaultdict(list)
    for b in pbn.loads(pbn_text):
        board_d['Board'].append(b.board_num)
        board_d['Dealer'].append(b.dealer.abbr if b.dealer is not None else None)
        board_d['Vul'].append(endplay_to_Vul_d.get(b.vul))
        board_d['PBN'].append(b.deal.to_pbn())
    schema = {
        'Board': pl.UInt16,
        'Dealer': pl.Utf8,
        'Vul': pl.Utf8,
        'PBN': pl.Utf8,
    }
    return pl.DataFrame(board_d if board_d else None, schema=schema)
