"""Basic byte-level tokenizer implementation."""

from typing import override

from .._decorators import measure_time
from ..errors import VocabularyError
from ..trainer import train_bpe

from .base import Tokenizer


class BasicTokenizer(Tokenizer):
    """
    Tokenizer that operates directly on byte sequences without regex splitting
    """

    TOKENIZER_TYPE = "basic"

    @override
    @measure_time
    def train(
        self, text: str | list[str], vocab_size: int, verbose: bool = False
    ) -> None:
        """
        Train the tokenizer on raw text using byte-level BPE.

        The whole text is one byte stream, so merges may cross word,
        whitespace and punctuation boundaries.

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

        if isinstance(text, list):
            text = "".join(text)

        self.clear_cache()

        tokens = list(text.encode("utf-8", errors="replace"))
        result = train_bpe([tokens], vocab_size - 256, verbose=verbose)

        self.merges = result.merges  # used for encoding text -> tokens
        self.vocab = result.vocab  # used for decoding tokens -> text

    @override
    def _split(self, text: str) -> list[str]:
        # whole text is a single chunk
        return [text] if text else []
