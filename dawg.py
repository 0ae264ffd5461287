# dawg.py
# Compact trie with DAWG-like API, built once per round from the candidate
# words. Nodes are stored as parallel lists so the solver can walk by index.

from typing import Dict, Iterable, List, Tuple, Optional


class DAWG:
    """
    Compact trie over normalized words:
      - DAWG.build(words) -> DAWG
      - has_prefix(str) -> bool
      - is_word(str) -> bool
      - iter_extensions(prefix) -> Iterable[(char, is_terminal)]
      - step(node, label) -> child node index after consuming every char of label
    Internals:
      _edges[i]: Dict[str, int] char -> child index
      _term[i]:  bool, True if a word ends at node i
      node 0 is the root.
    """

    __slots__ = ("_edges", "_term", "_count")

    ROOT = 0

    def __init__(self, edges: List[Dict[str, int]], term: List[bool], count: int = 0):
        self._edges = edges
        self._term = term
        self._count = count

    # ---------- Public API ----------
    @classmethod
    def build(cls, words: Iterable[str]) -> "DAWG":
        """Build a trie from already-normalized words. Empty words are skipped."""
        edges: List[Dict[str, int]] = [{}]
        term: List[bool] = [False]
        count = 0
        for w in words:
            if not w:
                continue
            cur = 0
            for ch in w:
                nxt = edges[cur].get(ch)
                if nxt is None:
                    edges.append({})
                    term.append(False)
                    nxt = len(edges) - 1
                    edges[cur][ch] = nxt
                cur = nxt
            if not term[cur]:
                term[cur] = True
                count += 1
        return cls(edges, term, count)

    def __len__(self) -> int:
        return self._count

    def __contains__(self, word: str) -> bool:
        return self.is_word(word)

    def has_prefix(self, s: str) -> bool:
        """True if s is a path from the root (empty string is always a prefix)."""
        return self._walk(s) is not None

    def is_word(self, s: str) -> bool:
        """True if s is in the trie as a terminal word."""
        idx = self._walk(s)
        return idx is not None and self._term[idx]

    def iter_extensions(self, prefix: str) -> Iterable[Tuple[str, bool]]:
        """
        Yield (next_char, is_terminal_after_appending_char) for all single-letter
        continuations of 'prefix'. If prefix isn't present, yields nothing.
        """
        idx = self._walk(prefix)
        if idx is None:
            return
        for ch, child in self._edges[idx].items():
            yield ch, self._term[child]

    def step(self, node: int, label: str) -> Optional[int]:
        """Node reached from ``node`` after consuming ``label``, or None."""
        edges = self._edges
        for ch in label:
            node = edges[node].get(ch)
            if node is None:
                return None
        return node

    def is_terminal(self, node: int) -> bool:
        return self._term[node]

    def has_children(self, node: int) -> bool:
        return bool(self._edges[node])

    # ---------- Helpers ----------
    def _walk(self, s: str) -> Optional[int]:
        """Return node index after consuming s, or None if no such path."""
        return self.step(self.ROOT, s)
