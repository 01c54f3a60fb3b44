import urllib.error
import urllib.request

from .base import Token
from .errors import ServiceError, WireFormatError
from .wire import ID_SIZE, pack_ids, unpack_ids


class TokenizerClient:
    """Client for the tokenizer service.

    Args:
        server_addr: "host:port" of a running service, e.g. "localhost:8090"
        vocab: vocabulary name, e.g. "p50k_base"
        timeout: per-request timeout in seconds
    """
    def __init__(self, server_addr: str, vocab: str, timeout: float = 30.0):
        self.server_addr = server_addr
        self.vocab = vocab
        self.timeout = timeout
        self.encode_addr = f"http://{server_addr}/encode/{vocab}"
        self.decode_addr = f"http://{server_addr}/decode/{vocab}"

    def _post(self, url: str, data: bytes) -> bytes:
        request = urllib.request.Request(
            url, data=data, method="POST",
            headers={"Content-Type": "application/octet-stream"}
        )
        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                return response.read()
        except urllib.error.HTTPError as e:
            reason = e.read().decode('utf-8', errors='replace')
            raise ServiceError(e.code, reason or str(e.reason))

    def encode(self, text: str | bytes) -> list[Token]:
        """Tokenize text on the server"""
        if isinstance(text, str):
            text = text.encode("utf-8")
        body = self._post(self.encode_addr, text)
        if len(body) % ID_SIZE != 0:
            raise WireFormatError(f"invalid size of return array: {len(body)} bytes")
        return unpack_ids(body)

    def decode(self, tokens: list[Token]) -> bytes:
        """Detokenize ids on the server, returning the raw bytes"""
        return self._post(self.decode_addr, pack_ids(tokens))
