class TokenizerError(Exception):
    """Base class for errors raised by the rank tokenizer."""


class MalformedRecord(TokenizerError, ValueError):
    """A rank file line is not `<base64 token> <decimal rank>`."""
    def __init__(self, line_number: int, line: str, reason: str):
        self.line_number = line_number
        self.line = line
        self.reason = reason
        super().__init__(f"Malformed record on line {line_number} ({reason}): {line!r}")


class UnknownVocabulary(TokenizerError, KeyError):
    """No rank file could be resolved or loaded for a vocabulary name."""
    def __init__(self, name: str, reason: str = "vocab not found"):
        self.name = name
        self.reason = reason
        super().__init__(name)

    def __str__(self) -> str:
        return f"{self.name} {self.reason}"


class IdOutOfRange(TokenizerError, IndexError):
    """A token id outside [0, vocab_size) was passed to decode."""
    def __init__(self, token_id: int, vocab_size: int):
        self.token_id = token_id
        self.vocab_size = vocab_size
        super().__init__(f"Token id {token_id} out of range for vocabulary of size {vocab_size}")


class WireFormatError(TokenizerError, ValueError):
    """Packed id buffer is malformed or an id does not fit in uint32."""


class ServiceError(TokenizerError):
    """The tokenizer service answered with a non-2xx status."""
    def __init__(self, status: int, reason: str):
        self.status = status
        self.reason = reason
        super().__init__(f"HTTP {status}: {reason}")


class CoverageGapWarning(UserWarning):
    """Encode met a symbol that no vocabulary token starts with; the symbol is skipped."""
