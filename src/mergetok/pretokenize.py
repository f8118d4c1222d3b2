"""Regex based pre-tokenization: text -> chunks that merges never cross."""

from collections.abc import Iterator

import regex as re

from .errors import PatternError
from .pattern import TokenPattern


class PreTokenizer:
    """
    Split text into chunks with a fixed regex pattern.

    With the built-in patterns every character of the input lands in
    exactly one chunk. Chunks are yielded in input order and never empty.
    """

    def __init__(self, pattern: str | None = None) -> None:
        self.pat: str = TokenPattern.GPT4.value if pattern is None else pattern
        self.compiled_pat: re.Pattern[str] = _compile_pattern(self.pat)

    def split(self, text: str) -> Iterator[str]:
        """Lazily yield the chunks of ``text``."""
        for m in self.compiled_pat.finditer(text):
            chunk = m.group(0)
            # patterns that can match the empty string would otherwise
            # emit zero-width chunks
            if chunk:
                yield chunk

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.pat!r})"


def _compile_pattern(pattern: str) -> re.Pattern:
    """
    Compile and validate a regex pattern.

    :param pattern: Regex pattern string to compile.
    :return: Compiled regex pattern.
    :raises PatternError: If pattern is invalid.
    """
    try:
        return re.compile(pattern)
    except re.error as e:
        raise PatternError("invalid regex pattern", pattern=pattern, regex_err=e) from e
