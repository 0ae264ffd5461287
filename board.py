import math
from collections import namedtuple
from functools import lru_cache

from colorama import Fore, Style
from utils import MAPPING, BONUS_CODES, PRINT_LOCK, normalize_word


Tile = namedtuple("Tile", ["letter", "bonus"], defaults=(None,))


class BoardError(ValueError):
    """Raised for structurally malformed boards."""


BONUS_COLORS = {
    'DL': Fore.CYAN,
    'TL': Fore.BLUE,
    'DW': Fore.MAGENTA,
    'TW': Fore.RED,
}


def bonus_code(bonus):
    """Map any accepted bonus spelling to 'DL', 'TL', 'DW', 'TW' or None."""
    if not bonus:
        return None
    code = str(bonus).upper()
    if code in BONUS_CODES:
        return code
    if code in MAPPING:
        return MAPPING[code]
    raise BoardError(f"Unknown bonus code: {bonus!r}")


def make_tile(cell):
    if isinstance(cell, Tile):
        return Tile(cell.letter, bonus_code(cell.bonus))
    if isinstance(cell, str):
        return Tile(cell, None)
    if isinstance(cell, dict):
        return Tile(cell.get("letter") or "", bonus_code(cell.get("bonus")))
    letter, bonus = cell
    return Tile(letter, bonus_code(bonus))


def make_board(cells):
    """Build an immutable row-major board (tuple of Tiles).

    ``cells`` may hold Tiles, ``(letter, bonus)`` pairs, ``{"letter", "bonus"}``
    dicts or bare letter strings. The number of cells must be a perfect square.
    """
    board = tuple(make_tile(cell) for cell in cells)
    board_side(board)
    return board


def board_side(board):
    total = len(board)
    side = math.isqrt(total)
    if side * side != total:
        raise BoardError(f"Board of {total} tiles is not square")
    return side


def tile_label(tile):
    """Normalized letters a tile contributes to a word ('qu' for a Qu tile)."""
    return normalize_word(tile.letter)


def board_labels(board):
    return [tile_label(tile) for tile in board]


def neighbors(index, side):
    """Indices sharing an edge or corner with ``index`` on a side x side grid."""
    if side < 1:
        raise ValueError(f"Grid side must be positive, got {side}")
    if not 0 <= index < side * side:
        raise IndexError(f"Cell {index} outside a {side}x{side} grid")
    r, c = divmod(index, side)
    out = []
    for dr in (-1, 0, 1):
        for dc in (-1, 0, 1):
            if dr == 0 and dc == 0:
                continue
            rr, cc = r + dr, c + dc
            if 0 <= rr < side and 0 <= cc < side:
                out.append(rr * side + cc)
    return out


@lru_cache(maxsize=32)
def adjacency(side):
    """Neighbour tuples for every cell of a side x side grid."""
    return tuple(tuple(neighbors(i, side)) for i in range(side * side))


def is_valid_path(board, path):
    """True if ``path`` uses in-range, distinct, successively adjacent cells."""
    if not path:
        return False
    total = len(board)
    side = board_side(board)
    seen = set()
    prev = None
    for idx in path:
        if not isinstance(idx, int) or isinstance(idx, bool):
            return False
        if not 0 <= idx < total or idx in seen:
            return False
        if prev is not None and idx not in adjacency(side)[prev]:
            return False
        seen.add(idx)
        prev = idx
    return True


def path_word(board, path):
    """The normalized word spelled by ``path``."""
    return "".join(tile_label(board[idx]) for idx in path)


def path_matches_word(board, word, path):
    """True if ``path`` is a valid path on ``board`` spelling exactly ``word``.

    Blank tiles cannot be entered, so a path through one never matches.
    """
    if not word or not is_valid_path(board, path):
        return False
    labels = [tile_label(board[idx]) for idx in path]
    return all(labels) and "".join(labels) == word


def print_board(board, path=None):
    """Thread-safe printing of a board. Tiles are coloured by bonus square;
    cells on ``path`` are highlighted with their position in the path."""
    side = board_side(board)
    order = {idx: n for n, idx in enumerate(path or (), 1)}
    with PRINT_LOCK:
        lines = []
        for r in range(side):
            line = []
            for c in range(side):
                idx = r * side + c
                tile = board[idx]
                text = f"{tile.letter:>2}"
                if idx in order:
                    line.append(Style.BRIGHT + Fore.YELLOW + text + Style.RESET_ALL + f"{order[idx]:<2}")
                else:
                    color = BONUS_COLORS.get(tile.bonus, Fore.GREEN)
                    line.append(color + text + Style.RESET_ALL + Style.DIM + f"{tile.bonus or '':<2}" + Style.RESET_ALL)
            lines.append(' '.join(line))
        print('\n'.join(lines), flush=True)
        print(flush=True)
