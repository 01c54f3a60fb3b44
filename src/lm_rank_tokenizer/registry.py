import threading
import time
from pathlib import Path
from typing import Callable, Iterable

from .download import DEFAULT_EXTENSION, find_or_download, vocab_path
from .errors import UnknownVocabulary
from .rank_bpe import RankBPETokenizer
from .symbols import Alphabet, Symbolizer


class VocabularyLoader:
    """Resolves a vocabulary name to a rank file and builds its tokenizer.

    Args:
        vocab_dir: directory holding <name><extension> rank files
        extension: rank file extension
        enable_download: fetch missing files from the known address table
        alphabet: symbol alphabet the tries are built over
        timeout: per-attempt download timeout in seconds
        retries: extra download attempts after the first failure
    """
    def __init__(self, vocab_dir: str | Path = ".", extension: str = DEFAULT_EXTENSION,
                 enable_download: bool = False, alphabet: Alphabet = "codepoint",
                 timeout: float = 30.0, retries: int = 2):
        Symbolizer(alphabet)  # validates the alphabet name
        self.vocab_dir = Path(vocab_dir)
        self.extension = extension
        self.enable_download = enable_download
        self.alphabet = alphabet
        self.timeout = timeout
        self.retries = retries

    def resolve(self, name: str) -> Path:
        """Local rank file for name, downloading it first if allowed"""
        if not name or name in (".", "..") or Path(name).name != name or "\\" in name:
            raise UnknownVocabulary(name, "is not a valid vocabulary name")

        if self.enable_download:
            return find_or_download(name, self.vocab_dir, self.extension,
                                    timeout=self.timeout, retries=self.retries)

        filepath = vocab_path(name, self.vocab_dir, self.extension)
        if not filepath.is_file():
            raise UnknownVocabulary(name)
        return filepath

    def __call__(self, name: str) -> RankBPETokenizer:
        filepath = self.resolve(name)
        return RankBPETokenizer.from_file(filepath, name=name, alphabet=self.alphabet)


class VocabularyRegistry:
    """Thread-safe cache of loaded vocabularies, keyed by name.

    Each name is loaded at most once at a time: concurrent callers for the
    same name wait for the in-flight load, callers for other names are not
    blocked by it. A failed load is not cached, so the next call retries.
    Returned tokenizers are shared and read-only.
    """
    def __init__(self, loader: Callable[[str], RankBPETokenizer]):
        self.loader = loader
        self._vocabs: dict[str, RankBPETokenizer] = {}
        self._key_locks: dict[str, threading.Lock] = {}
        self._lock = threading.Lock()

    def get_or_load(self, name: str) -> RankBPETokenizer:
        """Return the cached tokenizer for name, loading it on first use.
        Raises whatever the loader raises (UnknownVocabulary, MalformedRecord, OSError).
        """
        vocab = self._vocabs.get(name)
        if vocab is not None:
            return vocab

        with self._lock:
            vocab = self._vocabs.get(name)
            if vocab is not None:
                return vocab
            key_lock = self._key_locks.setdefault(name, threading.Lock())

        with key_lock:
            # another thread may have finished loading while we waited
            vocab = self._vocabs.get(name)
            if vocab is not None:
                return vocab

            start_time = time.time()
            try:
                vocab = self.loader(name)
                load_time = time.time() - start_time
                with self._lock:
                    self._vocabs[name] = vocab
            finally:
                # waiters holding key_lock re-check the cache and retry on failure
                with self._lock:
                    self._key_locks.pop(name, None)

        print(f"Loaded vocabulary '{name}': {vocab.vocab_size} tokens in {load_time:.3f}s")
        return vocab

    def preload(self, names: Iterable[str]) -> None:
        for name in names:
            self.get_or_load(name)

    def loaded(self) -> list[str]:
        """Names of the vocabularies currently cached"""
        with self._lock:
            return sorted(self._vocabs)

    def __contains__(self, name: str) -> bool:
        return name in self._vocabs

    def __len__(self) -> int:
        return len(self._vocabs)
