import base64
import binascii
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping

from .base import Token
from .errors import MalformedRecord, IdOutOfRange

# Largest rank accepted; rank_to_token is a dense tuple of max(rank) + 1 entries
MAX_RANK = 2**24 - 1


@dataclass(frozen=True)
class VocabularyTable:
    """Bidirectional token <-> rank mapping loaded from a rank file.

    token_to_rank: token bytes -> rank
    rank_to_token: rank -> token bytes, sized max(rank) + 1.
                   Ranks never assigned during loading hold b"".
    Duplicate tokens keep the last rank seen; duplicate ranks keep the
    last token seen in rank_to_token.
    """
    token_to_rank: Mapping[bytes, Token]
    rank_to_token: tuple[bytes, ...]

    @classmethod
    def from_records(cls, records: Iterable[tuple[bytes, Token]]) -> 'VocabularyTable':
        """Build the table from (token, rank) pairs in file order.
        A later pair overrides both the token's rank and the rank's token.
        token_to_rank iterates in order of each token's last assignment.
        """
        records = list(records)
        token_to_rank = {}
        for token, rank in records:
            if not isinstance(rank, int) or rank < 0 or rank > MAX_RANK:
                raise ValueError(f"Rank must be a non-negative integer no larger than {MAX_RANK}, got {rank!r} for {token!r}")
            token_to_rank.pop(token, None)
            token_to_rank[token] = rank

        size = max(token_to_rank.values()) + 1 if token_to_rank else 0
        rank_to_token = [b""] * size
        for token, rank in records:
            rank_to_token[rank] = token

        return cls(MappingProxyType(token_to_rank), tuple(rank_to_token))

    @classmethod
    def from_ranks(cls, ranks: Mapping[bytes, Token]) -> 'VocabularyTable':
        """Build the table from a token -> rank mapping"""
        return cls.from_records(ranks.items())

    def __len__(self) -> int:
        return len(self.rank_to_token)

    def token(self, rank: Token) -> bytes:
        """Token bytes for a rank, raising IdOutOfRange outside the table"""
        if rank < 0 or rank >= len(self.rank_to_token):
            raise IdOutOfRange(rank, len(self.rank_to_token))
        return self.rank_to_token[rank]

    def rank(self, token: bytes) -> Token | None:
        return self.token_to_rank.get(token)


def parse_record(line: str, line_number: int) -> tuple[bytes, Token]:
    """Parse one `<base64 token> <decimal rank>` line."""
    fields = line.split(" ")
    if len(fields) != 2:
        raise MalformedRecord(line_number, line, f"expected 2 fields, got {len(fields)}")

    token_b64, rank_str = fields
    try:
        token = base64.b64decode(token_b64, validate=True)
    except (binascii.Error, ValueError):
        raise MalformedRecord(line_number, line, "invalid base64 token")
    if not token:
        raise MalformedRecord(line_number, line, "empty token")

    if not (rank_str.isascii() and rank_str.isdigit()):
        raise MalformedRecord(line_number, line, "rank is not a non-negative decimal integer")

    rank = int(rank_str)
    if rank > MAX_RANK:
        raise MalformedRecord(line_number, line, f"rank exceeds maximum of {MAX_RANK}")

    return token, rank


def parse_rank_records(content: str | bytes) -> list[tuple[bytes, Token]]:
    """Parse rank file content into (token, rank) pairs in file order.
    Empty lines are skipped.
    """
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedRecord(content[:e.start].count(b"\n") + 1, "", "not valid UTF-8")

    records = []
    for line_number, line in enumerate(content.split("\n"), start=1):
        line = line.rstrip("\r")
        if not line:
            continue
        records.append(parse_record(line, line_number))
    return records


def parse_rank_file(content: str | bytes) -> dict[bytes, Token]:
    """Parse rank file content into a token -> rank dict.
    A later line for the same token overwrites the earlier rank.
    """
    return dict(parse_rank_records(content))


def load_rank_file(filepath: str | Path) -> VocabularyTable:
    """Read and parse a rank file into a VocabularyTable."""
    if not isinstance(filepath, (str, Path)):
        raise TypeError("filepath must be a string or Path")

    filepath = Path(filepath)

    try:
        with open(filepath, 'rb') as f:
            content = f.read()
    except FileNotFoundError:
        raise FileNotFoundError(f"Rank file not found: {filepath}")

    return VocabularyTable.from_records(parse_rank_records(content))
