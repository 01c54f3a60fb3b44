from typing import Literal, TypeAlias

Symbol: TypeAlias = int
Alphabet: TypeAlias = Literal["codepoint", "byte"]

ALPHABETS: tuple[str, ...] = ("codepoint", "byte")


class Symbolizer:
    """
    Splits text into the atomic units the vocabulary trie is matched over.

    "codepoint": one symbol per Unicode code point. Bytes are read as UTF-8
    and invalid sequences become U+FFFD, so two tokens that are not valid
    UTF-8 can land on the same trie path.
    "byte": one symbol per UTF-8 byte. Token bytes are used unchanged and
    every token keeps its own path.
    Lone surrogates in str input are encoded with surrogatepass.
    """
    def __init__(self, alphabet: Alphabet = "codepoint"):
        if alphabet not in ALPHABETS:
            raise ValueError(f"Unknown alphabet {alphabet!r}, expected one of {ALPHABETS}")
        self.alphabet = alphabet

    def symbolize(self, text: str | bytes) -> list[Symbol]:
        """Convert text (or raw bytes) to an ordered list of symbols"""
        if self.alphabet == "byte":
            if isinstance(text, str):
                text = text.encode("utf-8", errors="surrogatepass")
            return list(text)

        if isinstance(text, (bytes, bytearray)):
            text = bytes(text).decode("utf-8", errors="replace")
        return [ord(ch) for ch in text]

    def symbolize_token(self, token: bytes) -> list[Symbol]:
        """Convert a vocabulary token's bytes to the symbols of its trie path"""
        return self.symbolize(token)

    def __repr__(self) -> str:
        return f"Symbolizer(alphabet={self.alphabet!r})"
