from pathlib import Path
from typing import Iterable, Mapping, Optional
import warnings

from .base import Tokenizer, Token
from .errors import CoverageGapWarning
from .rank_file import VocabularyTable, load_rank_file
from .symbols import Alphabet, Symbolizer
from .trie import TrieBuilder, VocabularyTrie


def build_trie(table: VocabularyTable, symbolizer: Symbolizer) -> VocabularyTrie:
    """Insert every (token, rank) pair of the table into a new trie.
    Pairs go in in order of last assignment, so on a shared path the latest line wins.
    """
    builder = TrieBuilder()
    for token, rank in table.token_to_rank.items():
        builder.insert(symbolizer.symbolize_token(token), rank)
    return builder.build()


class RankBPETokenizer(Tokenizer):
    """Tokenizer over a pre-built rank table (tiktoken-style .tiktoken files).

    Encoding is greedy longest-match over a trie of the vocabulary:
    at each position the longest prefix that is itself a token is emitted.
    With "go" and "good" in the vocabulary, "goo " encodes as "go", then
    continues from the second "o".

    A position where no token matches (not even the single symbol) is a
    coverage gap: a CoverageGapWarning is issued and the symbol is skipped.

    The table and trie are never modified after construction, so one
    instance can be shared by any number of threads.
    """
    def __init__(self, table: VocabularyTable, name: str = "", alphabet: Alphabet = "codepoint"):
        super().__init__()
        self.name = name
        self.table = table
        self.symbolizer = Symbolizer(alphabet)
        self.trie = build_trie(table, self.symbolizer)
        self.vocab_size = len(table)

    @classmethod
    def from_file(cls, filepath: str | Path, name: Optional[str] = None,
                  alphabet: Alphabet = "codepoint") -> 'RankBPETokenizer':
        """Load a rank file and build the tokenizer. name defaults to the file stem."""
        filepath = Path(filepath)
        table = load_rank_file(filepath)
        return cls(table, name=filepath.stem if name is None else name, alphabet=alphabet)

    @classmethod
    def from_ranks(cls, ranks: Mapping[bytes, Token], name: str = "",
                   alphabet: Alphabet = "codepoint") -> 'RankBPETokenizer':
        """Build the tokenizer from an in-memory token -> rank mapping"""
        return cls(VocabularyTable.from_ranks(ranks), name=name, alphabet=alphabet)

    @property
    def alphabet(self) -> Alphabet:
        return self.symbolizer.alphabet

    def encode(self, text: str | bytes) -> list[Token]:
        """Convert a string to a list of tokens"""
        symbols = self.symbolizer.symbolize(text)

        tokens = []
        pos = 0
        while pos < len(symbols):
            token, end = self.trie.longest_match(symbols, pos)
            if token is None:
                warnings.warn(
                    f"No vocabulary token matches symbol {symbols[pos]:#x} at position {pos}, skipping it",
                    CoverageGapWarning,
                    stacklevel=2
                )
                pos += 1
                continue
            tokens.append(token)
            pos = end

        return tokens

    def decode_bytes(self, tokens: Iterable[Token]) -> bytes:
        """Concatenate the bytes of each token.
        Raises:
            IdOutOfRange: if any token is negative or >= vocab_size
        """
        return b"".join([self.table.token(token) for token in tokens])

    def token_bytes(self, token: Token) -> bytes:
        return self.table.token(token)

    def __repr__(self) -> str:
        return f"RankBPETokenizer(name={self.name!r}, vocab_size={self.vocab_size}, alphabet={self.alphabet!r})"
