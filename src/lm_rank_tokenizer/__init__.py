# lm_rank_tokenizer/__init__.py
from .base import Tokenizer, Token
from .errors import (
    TokenizerError,
    MalformedRecord,
    UnknownVocabulary,
    IdOutOfRange,
    WireFormatError,
    ServiceError,
    CoverageGapWarning,
)
from .symbols import Symbolizer, ALPHABETS
from .rank_file import MAX_RANK, VocabularyTable, load_rank_file, parse_rank_file, parse_rank_records
from .trie import TrieBuilder, VocabularyTrie
from .rank_bpe import RankBPETokenizer
from .registry import VocabularyLoader, VocabularyRegistry
from .download import VOCAB_ADDRESSES, find_or_download
from .wire import pack_ids, unpack_ids
from .client import TokenizerClient
from .config import ServiceConfig

__all__ = [
    'Tokenizer',
    'Token',
    'TokenizerError',
    'MalformedRecord',
    'UnknownVocabulary',
    'IdOutOfRange',
    'WireFormatError',
    'ServiceError',
    'CoverageGapWarning',
    'Symbolizer',
    'ALPHABETS',
    'VocabularyTable',
    'load_rank_file',
    'parse_rank_file',
    'parse_rank_records',
    'MAX_RANK',
    'TrieBuilder',
    'VocabularyTrie',
    'RankBPETokenizer',
    'VocabularyLoader',
    'VocabularyRegistry',
    'VOCAB_ADDRESSES',
    'find_or_download',
    'pack_ids',
    'unpack_ids',
    'TokenizerClient',
    'ServiceConfig',
]
