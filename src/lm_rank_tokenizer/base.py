from abc import ABC, abstractmethod
from typing import Iterable, TypeAlias

Token: TypeAlias = int

class Tokenizer(ABC):
    """Byte-exact tokenizer: decode_bytes(encode(text)) reproduces the UTF-8 bytes of text."""
    def __init__(self):
        self.vocab_size = 0

    @abstractmethod
    def encode(self, text: str | bytes) -> list[Token]:
        pass

    @abstractmethod
    def decode_bytes(self, tokens: Iterable[Token]) -> bytes:
        pass

    def decode(self, tokens: Iterable[Token]) -> str:
        """Convert a list of tokens to a string"""
        return self.decode_bytes(tokens).decode('utf-8', errors='replace')
