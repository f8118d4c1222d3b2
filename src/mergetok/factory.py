"""Factory functions for creating tokenizers."""

from typing import Final, Literal, overload

from ._models.base import Tokenizer
from ._models.basic import BasicTokenizer
from ._models.gpt4 import GPT4Tokenizer
from ._models.regex import RegexTokenizer
from .errors import MergeTokError
from .pattern import TokenPattern
from .ranks import load_tiktoken_ranks

Pattern = Literal["gpt2", "gpt4"]

_TOKENIZER_REGISTRY: Final[dict[str, type[Tokenizer]]] = {
    cls.TOKENIZER_TYPE: cls for cls in (RegexTokenizer, BasicTokenizer)
}


@overload
def get_tokenizer(pattern: Pattern) -> RegexTokenizer: ...


@overload
def get_tokenizer(*, custom_pattern: str) -> RegexTokenizer: ...


def get_tokenizer(
    pattern: Pattern = "gpt4", *, custom_pattern: str | None = None
) -> RegexTokenizer:
    """
    Create an untrained tokenizer with a built-in or custom regex pattern.

    :param pattern: Built-in pattern name ("gpt2" or "gpt4").
                    Ignored if custom_pattern is provided.
    :param custom_pattern: Custom regex pattern string. Overrides pattern parameter.
    :return: Configured tokenizer instance.
    :raises PatternError: If the name is unknown or custom_pattern is invalid regex.

    .. code-block:: python

        # Use built-in pattern
        tokenizer = get_tokenizer("gpt4")

        # Use custom pattern
        tokenizer = get_tokenizer(custom_pattern=r"\\p{L}+|\\s+|.")
    """
    # regex class initializer handles invalid custom patterns
    if custom_pattern is not None:
        return RegexTokenizer(custom_pattern)

    # get() handles invalid pattern names
    return RegexTokenizer(TokenPattern.get(pattern))


def new_tokenizer(kind: str) -> Tokenizer:
    """
    Create an untrained tokenizer by type name ("regex" or "basic").

    :raises MergeTokError: If ``kind`` is not a trainable tokenizer type.
    """
    if kind not in _TOKENIZER_REGISTRY:
        raise MergeTokError(
            f"unknown tokenizer type {kind!r} "
            f"(available: {list(_TOKENIZER_REGISTRY.keys())})"
        )
    return _TOKENIZER_REGISTRY[kind]()


def from_tiktoken(name: str = "cl100k_base") -> GPT4Tokenizer:
    """
    Build a pretrained tokenizer from a tiktoken encoding's mergeable ranks.

    The rank table is fetched once per name; each call builds a fresh
    tokenizer with its own cache.

    .. code-block:: python

        tokenizer = from_tiktoken("cl100k_base")
        tokens = tokenizer.encode("Hello world")
    """
    return GPT4Tokenizer(load_tiktoken_ranks(name))


__all__ = ["Pattern", "get_tokenizer", "new_tokenizer", "from_tiktoken"]
