import argparse
import concurrent.futures
import json
import os
import sys
import time

import requests
from colorama import Fore, Style

import utils
from utils import log_with_time, vlog, normalize_word
from board import make_board, print_board
from scoring import (
    DEFAULT_RULES,
    BonusLetterRules,
    FixedWordScoreRules,
    NoBonusRules,
    summarize_bonuses,
    variant_from_plan,
)
from search import grid_stats, score_word_on_grid, BackgroundSolver, SolveCancelled


DEFAULT_DICT = os.path.join("public", "dico.txt")


def parse_word_list(text, ligatures=None):
    """Normalize every line of a raw word list into a frozenset."""
    return frozenset(
        w for w in (normalize_word(line, ligatures) for line in text.splitlines()) if w
    )


def load_dictionary(source=DEFAULT_DICT, ligatures=None):
    """Load and normalize a word list from a local path or an http(s) URL."""
    t0 = time.time()
    if source.startswith(("http://", "https://")):
        log_with_time(f"⟳ Downloading dictionary from {source}…")
        resp = requests.get(source, timeout=30)
        resp.raise_for_status()
        text = resp.text
    else:
        with open(source, "r", encoding="utf-8") as f:
            text = f.read()
    words = parse_word_list(text, ligatures)
    vlog(f"Dictionary loaded and normalized ({len(words)} words)", t0)
    log_with_time(f"✅ {len(words)} words")
    return words


def parse_grid(text):
    """Parse "A,B:DL;C,Qu" (rows split by ';', cells by ',', optional
    ':BONUS' suffix) into a board."""
    cells = []
    for row in text.strip().split(";"):
        for cell in row.split(","):
            cell = cell.strip()
            if not cell:
                continue
            letter, _, bonus = cell.partition(":")
            cells.append((letter, bonus or None))
    return make_board(cells)


def load_board(path):
    """Load a board JSON file: a list of {"letter", "bonus"} cells, or an
    object holding one under "grid" and optionally a round plan under "plan".

    Returns ``(board, plan)``.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    plan = None
    if isinstance(data, dict):
        plan = data.get("plan")
        data = data.get("grid") or []
    return make_board(data), plan


def variant_from_args(args, plan=None):
    if args.fixed_word_score:
        return FixedWordScoreRules(args.fixed_word_score)
    if args.bonus_letter:
        return BonusLetterRules(args.bonus_letter, args.bonus_score)
    if args.no_bonuses:
        return NoBonusRules()
    if plan:
        return variant_from_plan(plan)
    return DEFAULT_RULES


def print_word(board, result):
    bonuses = summarize_bonuses(result.path, board)
    used = ", ".join(
        f"{name}={count}" for name, count in bonuses._asdict().items() if count
    )
    print(f"{Fore.GREEN}{result.word.upper():<16}{Style.RESET_ALL} {result.points:>4} pts  path={result.path}"
          + (f"  {Style.DIM}{used}{Style.RESET_ALL}" if used else ""), flush=True)


def build_parser():
    parser = argparse.ArgumentParser(description="Word grid solver")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--board", type=str, help="Path to a board JSON file")
    source.add_argument("--grid", type=str, help='Inline grid, e.g. "A,B;C:DL,Qu"')
    parser.add_argument("--dict", type=str, default=DEFAULT_DICT, help="Word list path or URL")
    parser.add_argument("--word", type=str, default=None, help="Look up a single word instead of solving the board")
    parser.add_argument("--bonus-letter", type=str, default=None, help="Bonus-letter round: letter worth --bonus-score")
    parser.add_argument("--bonus-score", type=int, default=20, help="Points for the bonus letter (default: 20)")
    parser.add_argument("--no-bonuses", action="store_true", help="Ignore bonus squares")
    parser.add_argument("--fixed-word-score", type=int, default=None, help="Every word scores this many points")
    parser.add_argument("--min-length", type=int, default=utils.MIN_WORD_LENGTH, help="Minimum word length (default: 3)")
    parser.add_argument("--long-length", type=int, default=8, help="Length counted as a long word in the summary (default: 8)")
    parser.add_argument("--top", type=int, default=20, help="Number of best words to print (default: 20, 0 for all)")
    parser.add_argument("--timeout", type=float, default=None, help="Give up on the full solve after this many seconds")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    return parser


def run_solver(argv=None):
    args = build_parser().parse_args(argv)
    utils.start_time = time.time()
    utils.VERBOSE = args.verbose

    plan = None
    try:
        if args.board:
            board, plan = load_board(args.board)
        else:
            board = parse_grid(args.grid)
    except (OSError, ValueError) as e:
        log_with_time(f"Could not load board: {e}", color=Fore.RED)
        return 1
    variant = variant_from_args(args, plan)

    try:
        dictionary = load_dictionary(args.dict)
    except FileNotFoundError:
        log_with_time(f"Could not find dictionary: {args.dict}", color=Fore.RED)
        return 1

    print("Board:")
    print_board(board)
    vlog(f"Rules: {variant!r}")

    if args.word:
        result = score_word_on_grid(
            args.word, board, variant, dictionary=dictionary, min_length=args.min_length
        )
        if result is None:
            log_with_time(f"'{args.word}' cannot be played on this board", color=Fore.YELLOW)
            return 1
        print_board(board, result.path)
        print_word(board, result)
        return 0

    with BackgroundSolver() as pool:
        future = pool.submit(board, dictionary, variant, min_length=args.min_length)
        try:
            solved = future.result(timeout=args.timeout)
        except concurrent.futures.TimeoutError:
            pool.cancel()
            log_with_time(f"Solve did not finish within {args.timeout}s", color=Fore.RED)
            return 1
        except SolveCancelled as e:
            log_with_time(f"Solve cancelled ({len(e.partial)} words traced)", color=Fore.RED)
            return 1

    fixed = variant.points if isinstance(variant, FixedWordScoreRules) else None
    stats = grid_stats(solved, min_long_len=args.long_length, fixed_word_score=fixed)
    log_with_time(
        f"{stats.words} words, {stats.possible_score} possible points, "
        f"longest {stats.max_len} letters, best word {stats.max_points} pts, "
        f"{stats.long_words} words of {args.long_length}+ letters",
        color=Fore.CYAN,
    )

    ranked = sorted(solved.values(), key=lambda s: (-s.points, -len(s.word), s.word))
    if args.top:
        ranked = ranked[:args.top]
    for result in ranked:
        print_word(board, result)
    return 0


if __name__ == "__main__":
    sys.exit(run_solver())
