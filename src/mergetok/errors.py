"""Custom exception hierarchy for mergetok tokenization errors."""

import regex as re

from .types import Token


class MergeTokError(Exception):
    """Base exception for all mergetok errors."""


class VocabularyError(MergeTokError):
    """Raised when vocabulary operations fail."""

    def __init__(
        self,
        message: str,
        *,
        vocab_size: int | None = None,
        invalid_tok: Token | None = None,
    ) -> None:
        """Initialize with optional token and vocab_size that get appended to the message."""
        extra = " "
        # training: vocab size < 256
        if vocab_size is not None:
            extra += f"(vocab size: {vocab_size}) "
        # decoding: token not in model vocab
        if invalid_tok is not None:
            extra += f"(invalid token: {invalid_tok}) "
        super().__init__(message + extra)
        self.vocab_size = vocab_size
        self.invalid_tok = invalid_tok


class RankTableError(MergeTokError):
    """Raised when a mergeable rank table is malformed or inconsistent."""

    def __init__(
        self,
        message: str,
        *,
        rank: Token | None = None,
        line: int | None = None,
    ) -> None:
        extra = " "
        if rank is not None:
            extra += f"(rank: {rank}) "
        if line is not None:
            extra += f"(line: {line}) "
        super().__init__(message + extra)
        self.rank = rank
        self.line = line


class TrainingError(MergeTokError):
    """Raised when tokenizer training fails."""

    def __init__(self, message: str, *, vocab_size: int | None = None) -> None:
        super().__init__(message)
        self.vocab_size = vocab_size


class PatternError(MergeTokError):
    """Raised when compiling and/or validating regex patterns."""

    def __init__(
        self,
        message: str,
        *,
        pattern: str | None = None,
        regex_err: re.error | None = None,
    ) -> None:
        """
        Initialize PatternError with pattern details.

        Args:
            message: Error message.
            pattern: The regex pattern that failed.
            regex_err: The underlying regex error from the regex library.
        """
        extra = " "
        if pattern:
            extra += f"(pattern: {pattern!r}) "
        if regex_err:
            extra += f"(reason: {regex_err}) "
        super().__init__(message + extra)
        self.pattern = pattern
        self.regex_err = regex_err
