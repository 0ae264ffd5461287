import os, sys
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

import pytest
import io

from board import (
    Tile, BoardError, make_board, board_side, tile_label, neighbors, adjacency,
    is_valid_path, path_word, path_matches_word, print_board,
)


def test_make_board_from_strings():
    board = make_board(["A", "B", "C", "Qu"])
    assert board == (Tile("A"), Tile("B"), Tile("C"), Tile("Qu"))
    assert board_side(board) == 2


def test_make_board_bonus_aliases():
    board = make_board([
        {"letter": "A", "bonus": "L2"},
        {"letter": "B", "bonus": "L3"},
        ("C", "M2"),
        Tile("D", "TRIPLE_WORD"),
    ])
    assert [t.bonus for t in board] == ["DL", "TL", "DW", "TW"]
    assert make_board([("A", "W2")])[0].bonus == "DW"


def test_make_board_not_square():
    with pytest.raises(BoardError):
        make_board(["A", "B", "C"])
    with pytest.raises(ValueError):
        make_board(["A"] * 15)


def test_make_board_unknown_bonus():
    with pytest.raises(BoardError):
        make_board([("A", "X9")])


def test_empty_board():
    board = make_board([])
    assert board == ()
    assert board_side(board) == 0


def test_tile_label():
    assert tile_label(Tile("Qu")) == "qu"
    assert tile_label(Tile("É", "DL")) == "e"


def test_neighbors_corners_and_center():
    assert neighbors(0, 4) == [1, 4, 5]
    assert neighbors(3, 4) == [2, 6, 7]
    assert neighbors(15, 4) == [10, 11, 14]
    assert sorted(neighbors(5, 4)) == [0, 1, 2, 4, 6, 8, 9, 10]
    assert neighbors(0, 1) == []


@pytest.mark.parametrize("side", [1, 2, 4, 5])
def test_neighbors_symmetric(side):
    total = side * side
    for i in range(total):
        nbs = neighbors(i, side)
        assert i not in nbs
        assert len(nbs) == len(set(nbs)) <= 8
        for j in range(total):
            assert (j in nbs) == (i in neighbors(j, side))


def test_neighbors_rejects_bad_input():
    with pytest.raises(IndexError):
        neighbors(16, 4)
    with pytest.raises(IndexError):
        neighbors(-1, 4)
    with pytest.raises(ValueError):
        neighbors(0, 0)


def test_adjacency_table():
    table = adjacency(5)
    assert len(table) == 25
    assert table[12] == tuple(neighbors(12, 5))


def test_is_valid_path():
    board = make_board(["A"] * 16)
    assert is_valid_path(board, [0, 1, 5])
    assert is_valid_path(board, [0, 5, 10, 15])
    assert not is_valid_path(board, [])
    assert not is_valid_path(board, [0, 2])
    assert not is_valid_path(board, [0, 1, 0])
    assert not is_valid_path(board, [15, 16])
    assert not is_valid_path(board, [0, "1"])


def test_path_matches_word():
    board = make_board(["Qu", "I", "T", "E"])
    assert path_word(board, [0, 1, 2]) == "quit"
    assert path_matches_word(board, "quit", [0, 1, 2])
    assert not path_matches_word(board, "quit", [0, 1])
    assert not path_matches_word(board, "quite", [0, 1, 2])
    assert not path_matches_word(board, "", [])


def test_path_matches_word_skips_blank_tiles():
    board = make_board(["C", "", "A", "T"])
    assert not path_matches_word(board, "cat", [0, 1, 2, 3])
    assert path_matches_word(board, "cat", [0, 2, 3])


def test_print_board(monkeypatch):
    out = io.StringIO()
    monkeypatch.setattr('sys.stdout', out)
    board = make_board([("A", "DL"), "B", "Qu", ("D", "TW")])
    print_board(board, [0, 2])
    text = out.getvalue()
    assert "A" in text and "Qu" in text and "TW" in text
    assert len([line for line in text.splitlines() if line.strip()]) == 2
