import struct
from typing import Iterable

from .base import Token
from .errors import WireFormatError

ID_SIZE = 4
MAX_ID = 2**32 - 1


def pack_ids(tokens: Iterable[Token]) -> bytes:
    """Pack token ids as consecutive unsigned 32-bit little-endian integers"""
    tokens = list(tokens)
    for token in tokens:
        if not 0 <= token <= MAX_ID:
            raise WireFormatError(f"Token id {token} does not fit in an unsigned 32-bit integer")
    return struct.pack(f"<{len(tokens)}I", *tokens)


def unpack_ids(data: bytes) -> list[Token]:
    """Inverse of pack_ids. The buffer length must be a multiple of 4."""
    if len(data) % ID_SIZE != 0:
        raise WireFormatError(f"Packed ids must be a multiple of {ID_SIZE} bytes, got {len(data)}")
    return list(struct.unpack(f"<{len(data) // ID_SIZE}I", data))
