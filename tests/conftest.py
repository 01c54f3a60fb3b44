import base64
from pathlib import Path
import pytest

from lm_rank_tokenizer import RankBPETokenizer

# ASCII bytes keep their own value as rank, merged tokens follow
MERGED_TOKENS = [
    b"go",
    b"good",
    b"Hi",
    b" there",
    b"th",
    b"the",
    b" wor",
    b"ld",
    "é".encode("utf-8"),
    "你好".encode("utf-8"),
]

HI_THERE_IDS = [130, 131, 33]  # "Hi", " there", "!"


def make_ranks() -> dict[bytes, int]:
    ranks = {bytes([b]): b for b in range(128)}
    for i, token in enumerate(MERGED_TOKENS):
        ranks[token] = 128 + i
    return ranks


def write_rank_file(path: Path, ranks: dict[bytes, int]) -> Path:
    """Write ranks in `<base64 token> <rank>` format with a trailing newline"""
    lines = [f"{base64.b64encode(token).decode('ascii')} {rank}" for token, rank in ranks.items()]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def ranks():
    return make_ranks()


@pytest.fixture
def vocab_dir(tmp_path, ranks):
    """Directory holding test_vocab.tiktoken"""
    directory = tmp_path / "vocabs"
    directory.mkdir()
    write_rank_file(directory / "test_vocab.tiktoken", ranks)
    return directory


@pytest.fixture
def tokenizer(ranks):
    return RankBPETokenizer.from_ranks(ranks, name="test_vocab")


@pytest.fixture
def byte_tokenizer():
    """Byte-alphabet tokenizer whose base covers all 256 byte values"""
    ranks = {bytes([b]): b for b in range(256)}
    for i, token in enumerate(MERGED_TOKENS):
        ranks[token] = 256 + i
    return RankBPETokenizer.from_ranks(ranks, name="test_bytes", alphabet="byte")


@pytest.fixture
def hi_there_ids():
    return list(HI_THERE_IDS)


@pytest.fixture
def rank_file_factory(tmp_path):
    """Factory fixture writing a rank file from ranks or raw text"""
    def _create(filename, ranks=None, content=None):
        path = tmp_path / filename
        if content is not None:
            path.write_text(content, encoding="utf-8")
            return path
        return write_rank_file(path, ranks)
    return _create
