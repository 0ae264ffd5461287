import os, sys
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

import json

import pytest

import solver
import utils
from board import Tile
from scoring import BonusLetterRules, DEFAULT_RULES, FixedWordScoreRules, NoBonusRules
from solver import parse_grid, parse_word_list, load_dictionary, load_board, variant_from_args, run_solver


@pytest.fixture
def dict_file(tmp_path):
    path = tmp_path / "dico.txt"
    path.write_text("chat\nChats\nÉté\n\nthé\nzèbre\n", encoding="utf-8")
    return str(path)


@pytest.fixture(autouse=True)
def quiet(monkeypatch):
    monkeypatch.setattr(utils, "VERBOSE", False)


def test_parse_word_list():
    assert parse_word_list("Chat\n  été \n--\nœuf\n") == frozenset({"chat", "ete", "oeuf"})


def test_load_dictionary_from_file(dict_file):
    assert load_dictionary(dict_file) == frozenset({"chat", "chats", "ete", "the", "zebre"})


def test_load_dictionary_from_url(monkeypatch):
    class FakeResp:
        text = "Lune\nSoleil\n"

        def raise_for_status(self):
            pass

    seen = {}

    def fake_get(url, timeout=None):
        seen["url"] = url
        return FakeResp()

    monkeypatch.setattr(solver.requests, "get", fake_get)
    assert load_dictionary("https://example.org/dico.txt") == frozenset({"lune", "soleil"})
    assert seen["url"] == "https://example.org/dico.txt"


def test_parse_grid():
    board = parse_grid("A:DL,B;Qu,d:M3")
    assert board == (Tile("A", "DL"), Tile("B"), Tile("Qu"), Tile("d", "TW"))


def test_parse_grid_not_square():
    with pytest.raises(ValueError):
        parse_grid("A,B;C")


def test_load_board_with_plan(tmp_path):
    path = tmp_path / "board.json"
    path.write_text(json.dumps({
        "grid": [{"letter": "A", "bonus": "L2"}, {"letter": "B", "bonus": None},
                 {"letter": "C"}, {"letter": "Qu", "bonus": "M2"}],
        "plan": {"bonusLetter": "A", "bonusLetterScore": 20},
    }))
    board, plan = load_board(str(path))
    assert board[0] == Tile("A", "DL")
    assert board[3] == Tile("Qu", "DW")
    assert plan == {"bonusLetter": "A", "bonusLetterScore": 20}


def test_load_board_plain_list(tmp_path):
    path = tmp_path / "board.json"
    path.write_text(json.dumps([{"letter": "E", "bonus": None}] * 16))
    board, plan = load_board(str(path))
    assert len(board) == 16
    assert plan is None


def test_variant_from_args():
    parser = solver.build_parser()
    args = parser.parse_args(["--grid", "A"])
    assert variant_from_args(args) is DEFAULT_RULES
    assert variant_from_args(args, {"disableBonuses": True}) == NoBonusRules()
    args = parser.parse_args(["--grid", "A", "--bonus-letter", "e", "--bonus-score", "15"])
    assert variant_from_args(args) == BonusLetterRules("E", 15)
    args = parser.parse_args(["--grid", "A", "--fixed-word-score", "4", "--no-bonuses"])
    assert variant_from_args(args) == FixedWordScoreRules(4)


def test_run_solver_full_board(dict_file, capsys):
    assert run_solver(["--grid", "C,H;A,T", "--dict", dict_file]) == 0
    out = capsys.readouterr().out
    assert "CHAT" in out
    assert "1 words" in out


def test_run_solver_single_word(dict_file, capsys):
    assert run_solver(["--grid", "C,H;A:TW,T", "--dict", dict_file, "--word", "Chat"]) == 0
    out = capsys.readouterr().out
    assert "CHAT" in out
    assert "word_triple=1" in out


def test_run_solver_word_not_on_board(dict_file, capsys):
    assert run_solver(["--grid", "C,H;A,T", "--dict", dict_file, "--word", "zèbre"]) == 1
    assert "cannot be played" in capsys.readouterr().out


def test_run_solver_missing_dictionary(tmp_path, capsys):
    missing = str(tmp_path / "nope.txt")
    assert run_solver(["--grid", "C,H;A,T", "--dict", missing]) == 1
    assert "Could not find dictionary" in capsys.readouterr().out


def test_run_solver_bad_grid(dict_file, capsys):
    assert run_solver(["--grid", "C,H;A", "--dict", dict_file]) == 1
    assert "Could not load board" in capsys.readouterr().out
