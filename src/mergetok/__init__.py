"""mergetok: byte-level BPE tokenization."""

from ._models.base import Tokenizer
from ._models.basic import BasicTokenizer
from ._models.gpt4 import GPT4Tokenizer
from ._models.regex import RegexTokenizer
from .errors import (
    MergeTokError,
    PatternError,
    RankTableError,
    TrainingError,
    VocabularyError,
)
from .factory import from_tiktoken, get_tokenizer, new_tokenizer
from .pattern import TokenPattern, get_pattern, list_patterns
from .pretokenize import PreTokenizer
from .ranks import load_tiktoken_ranks, parse_rank_table
from .shuffle import ByteShuffle

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("mergetok")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "Tokenizer",
    "BasicTokenizer",
    "RegexTokenizer",
    "GPT4Tokenizer",
    "PreTokenizer",
    "ByteShuffle",
    "TokenPattern",
    "MergeTokError",
    "PatternError",
    "RankTableError",
    "TrainingError",
    "VocabularyError",
    "get_tokenizer",
    "new_tokenizer",
    "from_tiktoken",
    "get_pattern",
    "list_patterns",
    "load_tiktoken_ranks",
    "parse_rank_table",
]
