"""Regex-based byte-level tokenizer implementation."""

from collections.abc import Iterator
from typing import override

from .._decorators import measure_time
from ..errors import VocabularyError
from ..pretokenize import PreTokenizer
from ..trainer import train_bpe

from .base import Tokenizer


class RegexTokenizer(Tokenizer):
    """Tokenizer that splits text using regex patterns before applying BPE."""

    TOKENIZER_TYPE = "regex"

    def __init__(self, pattern: str | None = None) -> None:
        """Initialize tokenizer with a provided or default (GPT-4) split pattern."""
        super().__init__()
        self.pretokenizer = PreTokenizer(pattern)

    @property
    def pat(self) -> str:
        return self.pretokenizer.pat

    @override
    @measure_time
    def train(
        self, text: str | list[str], vocab_size: int, verbose: bool = False
    ) -> None:
        """
        Train the tokenizer on regex-split text chunks.

        Input text is first segmented by the configured regex pattern and each
        chunk is turned into UTF-8 byte tokens, so no learned merge crosses a
        chunk boundary. Training always starts again from the 256 base bytes.

        :param text: Training text as a single string or list of strings.
        :param vocab_size: Target vocabulary size including the base 256 bytes.
        :param verbose: Log each learned merge when ``True``.
        :raises VocabularyError: If ``vocab_size`` is less than 256.
        :raises TrainingError: If merges are requested on empty text.
        """
        if vocab_size < 256:
            raise VocabularyError(
                "vocab size must be at least 256", vocab_size=vocab_size
            )

        # handle list input
        if isinstance(text, list):
            text = "".join(text)

        # cached encodings belong to the old merges
        self.clear_cache()

        chunks = [
            list(chunk.encode("utf-8", errors="replace"))
            for chunk in self.pretokenizer.split(text)
        ]

        n_merges = vocab_size - 256
        result = train_bpe(chunks, n_merges, verbose=verbose)

        self.merges = result.merges
        self.vocab = result.vocab

    @override
    def _split(self, text: str) -> Iterator[str]:
        return self.pretokenizer.split(text)
