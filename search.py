from collections import Counter, namedtuple
import concurrent.futures
import threading
import time

from utils import vlog, normalize_word, MIN_WORD_LENGTH
from board import adjacency, board_labels, board_side, path_matches_word
from dawg import DAWG
from scoring import compute_score

# How many DFS expansions between two polls of ``should_stop``
STOP_CHECK_INTERVAL = 2048

WordScore = namedtuple("WordScore", ["word", "path", "points"])
GridStats = namedtuple(
    "GridStats",
    ["words", "max_len", "max_points", "total_points", "long_words", "possible_score"],
)


class SolveCancelled(Exception):
    """Raised when ``should_stop`` asks a solve to terminate early.

    ``partial`` holds the words traced before the stop request.
    """

    def __init__(self, partial):
        super().__init__(f"solve cancelled after {len(partial)} words")
        self.partial = partial


# ============== Dictionary prefilter ==============
def board_letter_counts(board):
    """Character multiset of the board; a Qu tile adds one 'q' and one 'u'."""
    counts = Counter()
    for label in board_labels(board):
        counts.update(label)
    return counts


def filter_dictionary(dictionary, board):
    """Words whose letters could all be supplied by the board's tiles.

    Letter counts only; adjacency is left to the solver.
    """
    t0 = time.time()
    available = board_letter_counts(board)
    if not available:
        return set()
    total = sum(available.values())
    filtered = set()
    for w in dictionary:
        if not w or len(w) > total:
            continue
        wc = Counter(w)
        if all(available[ch] >= n for ch, n in wc.items()):
            filtered.add(w)
    vlog(f"filter_dictionary: reduced from {len(dictionary)} to {len(filtered)}", t0)
    return filtered


# ============== Full board solve ==============
def solve_all(board, candidate_words, variant=None, *, tables=None, prefer_best=False, should_stop=None):
    """Trace every candidate word that has a path on ``board``.

    Returns ``{word: path}`` with one path per traceable word: the first one
    discovered, or with ``prefer_best`` the highest scoring under ``variant``.
    ``should_stop`` is an optional zero-argument callable polled during the
    search; a true result raises ``SolveCancelled``.
    """
    t0 = time.time()
    found = {}
    if not board or not candidate_words:
        return found
    side = board_side(board)
    labels = board_labels(board)
    adj = adjacency(side)
    trie = DAWG.build(candidate_words)
    used = bytearray(len(board))
    path = []
    best_points = {}
    ticks = 0

    def dfs(idx, node, prefix):
        nonlocal ticks
        label = labels[idx]
        if not label:
            return
        node = trie.step(node, label)
        if node is None:
            return
        if should_stop is not None:
            ticks += 1
            if ticks % STOP_CHECK_INTERVAL == 0 and should_stop():
                raise SolveCancelled(dict(found))

        word = prefix + label
        path.append(idx)
        if trie.is_terminal(node):
            if prefer_best:
                pts = compute_score(word, path, board, variant, tables)
                if word not in found or pts > best_points[word]:
                    found[word] = list(path)
                    best_points[word] = pts
            elif word not in found:
                found[word] = list(path)

        if trie.has_children(node):
            used[idx] = 1
            for nb in adj[idx]:
                if not used[nb]:
                    dfs(nb, node, word)
            used[idx] = 0
        path.pop()

    for start in range(len(board)):
        if should_stop is not None and should_stop():
            raise SolveCancelled(dict(found))
        if not prefer_best and len(found) == len(trie):
            break
        dfs(start, DAWG.ROOT, "")

    vlog(f"solve_all: traced {len(found)} of {len(trie)} candidates", t0)
    return found


# ============== Single word lookup ==============
def find_best_path_for_word(board, word, variant=None, *, tables=None):
    """Highest scoring path spelling ``word`` (already normalized), or None.

    Every path is scored; ties keep the first path found.
    """
    if not board or not word:
        return None
    side = board_side(board)
    labels = board_labels(board)
    adj = adjacency(side)
    used = bytearray(len(board))
    path = []
    best_path, best_points = None, None

    def dfs(idx, pos):
        nonlocal best_path, best_points
        label = labels[idx]
        if not label or not word.startswith(label, pos):
            return
        nxt = pos + len(label)
        path.append(idx)
        if nxt == len(word):
            pts = compute_score(word, path, board, variant, tables)
            if best_path is None or pts > best_points:
                best_path, best_points = list(path), pts
        else:
            used[idx] = 1
            for nb in adj[idx]:
                if not used[nb]:
                    dfs(nb, nxt)
            used[idx] = 0
        path.pop()

    for start in range(len(board)):
        dfs(start, 0)
    return best_path


# ============== Submission helpers ==============
def score_word_on_grid(raw_word, board, variant=None, *, tables=None, dictionary=None, min_length=MIN_WORD_LENGTH):
    """Validate and price a typed word: its best path and points, or None.

    None when the word is too short, absent from ``dictionary`` (if given)
    or not traceable on ``board``.
    """
    norm = normalize_word(raw_word)
    if not norm or len(norm) < min_length:
        return None
    if dictionary is not None and norm not in dictionary:
        return None
    path = find_best_path_for_word(board, norm, variant, tables=tables)
    if path is None:
        return None
    return WordScore(norm, path, compute_score(norm, path, board, variant, tables))


def score_word_on_grid_with_path(raw_word, board, path, variant=None, *, tables=None, dictionary=None, min_length=MIN_WORD_LENGTH):
    """Price a dragged word with the path the player actually traced."""
    norm = normalize_word(raw_word)
    if not norm or len(norm) < min_length:
        return None
    if dictionary is not None and norm not in dictionary:
        return None
    path = list(path or ())
    if not path_matches_word(board, norm, path):
        return None
    return WordScore(norm, path, compute_score(norm, path, board, variant, tables))


# ============== Round helpers ==============
def solve_grid(board, dictionary, variant=None, *, tables=None, min_length=MIN_WORD_LENGTH, should_stop=None):
    """Prefilter, solve and score a board: ``{word: WordScore}`` using the
    best path of every traceable word."""
    t0 = time.time()
    if not dictionary:
        return {}
    candidates = {w for w in filter_dictionary(dictionary, board) if len(w) >= min_length}
    if should_stop is not None and should_stop():
        raise SolveCancelled({})
    paths = solve_all(
        board, candidates, variant, tables=tables, prefer_best=True, should_stop=should_stop
    )
    solved = {
        w: WordScore(w, p, compute_score(w, p, board, variant, tables))
        for w, p in paths.items()
    }
    vlog(f"solve_grid: {len(solved)} words from {len(dictionary)} entries", t0)
    return solved


def grid_stats(solved, *, min_long_len=0, fixed_word_score=None):
    """Summary figures for a solved board (``solve_grid`` output)."""
    words = len(solved)
    max_len = max((len(w) for w in solved), default=0)
    max_points = max((s.points for s in solved.values()), default=0)
    total_points = sum(s.points for s in solved.values())
    long_words = sum(1 for w in solved if min_long_len > 0 and len(w) >= min_long_len)
    possible_score = words * fixed_word_score if fixed_word_score else total_points
    return GridStats(words, max_len, max_points, total_points, long_words, possible_score)


class BackgroundSolver:
    """Runs ``solve_grid`` off the calling thread. Submitting a new board
    cancels the solve it supersedes; its future then raises
    ``SolveCancelled`` (or ``CancelledError`` if it never started)."""

    def __init__(self, max_workers=1):
        self._executor = concurrent.futures.ThreadPoolExecutor(max_workers=max_workers)
        self._lock = threading.Lock()
        self._current = None

    def submit(self, board, dictionary, variant=None, **kwargs):
        with self._lock:
            self._cancel_current()
            stop = threading.Event()
            future = self._executor.submit(
                solve_grid, board, dictionary, variant, should_stop=stop.is_set, **kwargs
            )
            self._current = (future, stop)
            return future

    def cancel(self):
        with self._lock:
            self._cancel_current()

    def _cancel_current(self):
        if self._current is not None:
            future, stop = self._current
            stop.set()
            future.cancel()
            self._current = None

    def shutdown(self, wait=True):
        self.cancel()
        self._executor.shutdown(wait=wait)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.shutdown()
        return False
