from typing import Iterable, Optional

from .base import Token
from .symbols import Symbol

NO_TOKEN = -1
ROOT = 0


class TrieBuilder:
    """Single-writer construction phase of a VocabularyTrie.

    Nodes live in flat arrays indexed by node number:
      children[node]: symbol -> child node
      token_ids[node]: rank of the token spelled by the path, or NO_TOKEN
      parents[node]: predecessor node (lookup only, ROOT has itself)
    build() hands the arrays to an immutable VocabularyTrie; the builder
    cannot be used afterwards.
    """
    def __init__(self):
        self._children: list[dict[Symbol, int]] = [{}]
        self._token_ids: list[Token] = [NO_TOKEN]
        self._parents: list[int] = [ROOT]
        self._built = False

    def insert(self, symbols: Iterable[Symbol], token_id: Token) -> None:
        """Add the path for symbols, creating nodes as needed, and mark its end with token_id.
        Inserting the same path again overwrites the previous id.
        """
        if self._built:
            raise RuntimeError("Trie already built")
        if token_id < 0:
            raise ValueError(f"Token id must be non-negative, got {token_id}")

        node = ROOT
        for symbol in symbols:
            child = self._children[node].get(symbol)
            if child is None:
                child = len(self._children)
                self._children[node][symbol] = child
                self._children.append({})
                self._token_ids.append(NO_TOKEN)
                self._parents.append(node)
            node = child

        if node == ROOT:
            raise ValueError("Cannot insert an empty token")
        self._token_ids[node] = token_id

    def build(self) -> 'VocabularyTrie':
        if self._built:
            raise RuntimeError("Trie already built")
        self._built = True
        trie = VocabularyTrie(tuple(self._children), tuple(self._token_ids), tuple(self._parents))
        self._children, self._token_ids, self._parents = [], [], []
        return trie


class VocabularyTrie:
    """Read-only prefix tree over token symbol sequences.
    Safe for concurrent readers; only TrieBuilder creates one.
    """
    __slots__ = ("_children", "_token_ids", "_parents")

    def __init__(self, children: tuple[dict[Symbol, int], ...],
                 token_ids: tuple[Token, ...], parents: tuple[int, ...]):
        self._children = children
        self._token_ids = token_ids
        self._parents = parents

    @property
    def root(self) -> int:
        return ROOT

    def __len__(self) -> int:
        """Number of nodes, including the root"""
        return len(self._token_ids)

    def step(self, node: int, symbol: Symbol) -> int:
        """Child of node along symbol, or -1"""
        return self._children[node].get(symbol, -1)

    def token_id(self, node: int) -> Optional[Token]:
        token_id = self._token_ids[node]
        return None if token_id == NO_TOKEN else token_id

    def parent(self, node: int) -> int:
        return self._parents[node]

    def find(self, symbols: Iterable[Symbol]) -> Optional[Token]:
        """Exact lookup: id of the token spelled by symbols, or None"""
        node = ROOT
        for symbol in symbols:
            node = self._children[node].get(symbol, -1)
            if node < 0:
                return None
        return self.token_id(node)

    def longest_match(self, symbols: list[Symbol], start: int) -> tuple[Optional[Token], int]:
        """Longest token that is a prefix of symbols[start:].

        Walks down as far as the input matches, then climbs back through
        parents to the deepest node that is a token.
        Returns:
            (token_id, end): end is the index after the match.
                             (None, start) when no prefix is a token.
        """
        children = self._children
        token_ids = self._token_ids
        parents = self._parents

        node = ROOT
        pos = start
        n = len(symbols)
        while pos < n:
            child = children[node].get(symbols[pos])
            if child is None:
                break
            node = child
            pos += 1

        while node != ROOT and token_ids[node] == NO_TOKEN:
            node = parents[node]
            pos -= 1

        if node == ROOT:
            return None, start
        return token_ids[node], pos
