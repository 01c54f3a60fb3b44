import time
import urllib.error
import urllib.request
from pathlib import Path

from .errors import UnknownVocabulary
from .save_utils import atomic_save_bytes

VOCAB_ADDRESSES: dict[str, str] = {
    "r50k_base": "https://openaipublic.blob.core.windows.net/encodings/r50k_base.tiktoken",
    "p50k_base": "https://openaipublic.blob.core.windows.net/encodings/p50k_base.tiktoken",
    "p50k_edit": "https://openaipublic.blob.core.windows.net/encodings/p50k_base.tiktoken",
    "cl100k_base": "https://openaipublic.blob.core.windows.net/encodings/cl100k_base.tiktoken",
    "o200k_base": "https://openaipublic.blob.core.windows.net/encodings/o200k_base.tiktoken",
}

DEFAULT_EXTENSION = ".tiktoken"


def vocab_path(name: str, vocab_dir: str | Path = ".", extension: str = DEFAULT_EXTENSION) -> Path:
    """Local rank file path for a vocabulary name"""
    return Path(vocab_dir) / f"{name}{extension}"


def fetch_url(url: str, timeout: float = 30.0, retries: int = 2, backoff: float = 1.0) -> bytes:
    """
    Download url, retrying on network errors.
    Raises the last OSError once all attempts have failed.
    """
    if retries < 0:
        raise ValueError("retries must be >= 0")

    last_error = None
    for attempt in range(retries + 1):
        try:
            with urllib.request.urlopen(url, timeout=timeout) as response:
                return response.read()
        except urllib.error.URLError as e:
            print(f"  Failed {url} (attempt {attempt + 1}/{retries + 1}): {e}")
            last_error = e
        except OSError as e:
            print(f"  Failed {url} (attempt {attempt + 1}/{retries + 1}): {e}")
            last_error = e
        if attempt < retries:
            time.sleep(backoff * (attempt + 1))
    raise last_error


def find_or_download(name: str, vocab_dir: str | Path = ".", extension: str = DEFAULT_EXTENSION,
                     timeout: float = 30.0, retries: int = 2) -> Path:
    """
    Return the local rank file for name, downloading it from VOCAB_ADDRESSES if missing.

    Raises:
        UnknownVocabulary: name is not in the address table
        OSError: the download failed
    """
    filepath = vocab_path(name, vocab_dir, extension)
    if filepath.is_file():
        return filepath

    url = VOCAB_ADDRESSES.get(name)
    if url is None:
        raise UnknownVocabulary(name, "not found in addresses")

    print(f"Downloading: '{name}' from '{url}' ...")
    data = fetch_url(url, timeout=timeout, retries=retries)
    atomic_save_bytes(filepath, data)
    print(f"  ✓ Downloaded {name}: {len(data) // 1024}KB")

    return filepath
