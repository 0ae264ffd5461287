from collections import namedtuple

from utils import LETTER_SCORES, LENGTH_BONUS, normalize_word
from board import tile_label


BonusSummary = namedtuple(
    "BonusSummary", ["letter_double", "letter_triple", "word_double", "word_triple"]
)

_SUMMARY_FIELDS = {
    'DL': 'letter_double',
    'TL': 'letter_triple',
    'DW': 'word_double',
    'TW': 'word_triple',
}


class ScoreTables:
    """Letter point values (keyed by normalized tile label) and the
    word-length bonus table."""

    __slots__ = ("letter_scores", "length_bonus", "_max_len")

    def __init__(self, letter_scores=None, length_bonus=None):
        self.letter_scores = dict(LETTER_SCORES if letter_scores is None else letter_scores)
        self.length_bonus = dict(LENGTH_BONUS if length_bonus is None else length_bonus)
        self._max_len = max(self.length_bonus) if self.length_bonus else None

    def letter_value(self, label):
        return self.letter_scores.get(label, 0)

    def length_value(self, length):
        if length in self.length_bonus:
            return self.length_bonus[length]
        if self._max_len is not None and length > self._max_len:
            return self.length_bonus[self._max_len]
        return 0


DEFAULT_TABLES = ScoreTables()


def tile_score(tile, tables=None):
    """Base point value of a tile, ignoring its bonus square."""
    tables = tables or DEFAULT_TABLES
    return tables.letter_value(tile_label(tile))


def summarize_bonuses(path, board):
    counts = dict.fromkeys(BonusSummary._fields, 0)
    for idx in path:
        field = _SUMMARY_FIELDS.get(board[idx].bonus)
        if field:
            counts[field] += 1
    return BonusSummary(**counts)


# ============== Rule variants ==============
class RuleVariant:
    """Scoring rules for a round. Variants change points only, never which
    words or paths exist on a board."""

    name = "default"
    use_bonuses = True
    use_length_bonus = True

    def letter_value(self, label, tables):
        return tables.letter_value(label)

    def score(self, word, path, board, tables):
        if not path:
            return 0
        base, multiplier, length = 0, 1, 0
        for idx in path:
            tile = board[idx]
            label = tile_label(tile)
            length += len(label)
            value = self.letter_value(label, tables)
            if self.use_bonuses:
                if tile.bonus == 'DL':
                    value *= 2
                elif tile.bonus == 'TL':
                    value *= 3
                elif tile.bonus == 'DW':
                    multiplier *= 2
                elif tile.bonus == 'TW':
                    multiplier *= 3
            base += value
        if self.use_length_bonus:
            base += tables.length_value(length)
        return base * multiplier

    def __eq__(self, other):
        return type(self) is type(other) and vars(self) == vars(other)

    def __hash__(self):
        return hash((type(self), tuple(sorted(vars(self).items()))))

    def __repr__(self):
        params = ", ".join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"{type(self).__name__}({params})"


class DefaultRules(RuleVariant):
    pass


class NoBonusRules(RuleVariant):
    """Bonus squares are ignored; the length bonus still applies."""

    name = "no_bonuses"
    use_bonuses = False


class BonusLetterRules(RuleVariant):
    """Every tile whose label is ``letter`` is worth ``fixed_score``; bonus
    squares are ignored."""

    name = "bonus_letter"
    use_bonuses = False

    def __init__(self, letter, fixed_score, length_bonus=False):
        self.letter = normalize_word(letter)
        self.fixed_score = fixed_score
        self.use_length_bonus = length_bonus

    def letter_value(self, label, tables):
        if label == self.letter:
            return self.fixed_score
        return tables.letter_value(label)


class FixedWordScoreRules(RuleVariant):
    """Every traced word is worth the same number of points."""

    name = "fixed_word_score"

    def __init__(self, points):
        self.points = points

    def score(self, word, path, board, tables):
        return self.points if path else 0


DEFAULT_RULES = DefaultRules()


def variant_from_plan(plan):
    """Build a rule variant from a round plan mapping, e.g.
    ``{"bonusLetter": "E", "bonusLetterScore": 20}`` or
    ``{"fixedWordScore": 5}``. Unknown keys are ignored."""
    if not plan:
        return DEFAULT_RULES
    if plan.get("fixedWordScore"):
        return FixedWordScoreRules(int(plan["fixedWordScore"]))
    if plan.get("bonusLetter"):
        score = plan.get("bonusLetterScore")
        return BonusLetterRules(plan["bonusLetter"], int(20 if score is None else score))
    if plan.get("disableBonuses"):
        return NoBonusRules()
    return DEFAULT_RULES


def compute_score(word, path, board, variant=None, tables=None):
    """Points for ``path`` under ``variant`` (default rules when None).

    Default rules: each step scores its letter value, doubled on DL and
    tripled on TL; the length bonus for the spelled length is added and the
    total multiplied by 2 per DW and 3 per TW crossed.
    """
    variant = variant or DEFAULT_RULES
    return variant.score(word, path, board, tables or DEFAULT_TABLES)
