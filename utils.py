# --- utils.py ---

import time
import threading
import unicodedata
from colorama import Fore, Style, init

init()

# Bonus-square codes, keyed by every spelling a round plan may use
MAPPING = {
    'DOUBLE_LETTER': 'DL',
    'TRIPLE_LETTER': 'TL',
    'DOUBLE_WORD':   'DW',
    'TRIPLE_WORD':   'TW',
    'L2': 'DL',
    'L3': 'TL',
    'M2': 'DW',
    'M3': 'TW',
    'W2': 'DW',
    'W3': 'TW',
}
BONUS_CODES = ('DL', 'TL', 'DW', 'TW')

# French tile values, keyed by normalized tile label
LETTER_SCORES = {
    **dict.fromkeys(list("aeilnorstu"), 1),
    **dict.fromkeys(list("dgm"), 2),
    **dict.fromkeys(list("bcp"), 3),
    **dict.fromkeys(list("fhv"), 4),
    'j': 8,
    **dict.fromkeys(list("qkwxyz"), 10),
    'qu': 11,
}

# Word length -> bonus; lengths past the largest key use the largest key's value
LENGTH_BONUS = {5: 3, 6: 6, 7: 10, 8: 15}

LIGATURES = {
    'œ': 'oe',
    'æ': 'ae',
}

MIN_WORD_LENGTH = 3

VERBOSE = False
start_time = None

# Lock used for synchronized printing across threads
PRINT_LOCK = threading.Lock()


def _fold_letters(text, ligatures):
    """One folding pass: casefold, decompose, drop marks, expand ligatures."""
    letters = []
    for ch in unicodedata.normalize("NFKD", text.casefold()):
        if unicodedata.combining(ch):
            continue
        ch = ch.casefold()
        ch = ligatures.get(ch, ch)
        for c in unicodedata.normalize("NFKD", ch.casefold()):
            if c.isalpha() and not unicodedata.combining(c):
                letters.append(c)
    return "".join(letters)


def normalize_word(raw, ligatures=None):
    """Canonical matching form of ``raw``: lowercase letters only, no accents.

    Ligatures are expanded from ``ligatures`` (default ``LIGATURES``), keyed
    by their case-folded form. Folding repeats until the text is stable, so
    the result normalizes to itself; a table that never settles raises
    ValueError.
    """
    if ligatures is None:
        ligatures = LIGATURES
    text = raw.strip()
    for _ in range(len(ligatures) + 8):
        folded = _fold_letters(text, ligatures)
        if folded == text:
            return folded
        text = folded
    raise ValueError(f"Ligature table does not settle on {raw!r}")


def log_with_time(msg, color=Fore.LIGHTBLUE_EX):
    """Print ``msg`` with a timestamp."""
    global start_time
    if start_time is None:
        start_time = time.time()
    elapsed = time.time() - start_time
    mins = int(elapsed // 60)
    secs = elapsed % 60
    timestamp = Style.DIM + f"[{mins:02}:{secs:06.3f}]" + Style.RESET_ALL
    with PRINT_LOCK:
        print(f"{timestamp} {color}{msg}{Style.RESET_ALL}", flush=True)


def vlog(msg, t0=None):
    if VERBOSE:
        if t0 is not None:
            elapsed = time.time() - t0
            log_with_time(f"{msg} (took {elapsed:.3f}s)")
        else:
            log_with_time(msg)
