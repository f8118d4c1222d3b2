"""
Base tokenizer interface for byte-level tokenization implementations.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable

from .._bpe import apply_merges, build_vocab
from ..errors import VocabularyError
from ..shuffle import ByteShuffle
from ..types import Encoding, Token, Vocabulary

log = logging.getLogger(__name__)


class Tokenizer(ABC):
    """
    Abstract base class for byte-level tokenizers.

    Owns the merge table, the vocabulary and a per-instance encode cache.
    Subclasses decide how text is split into chunks and whether a byte
    shuffle is applied. Instances are not safe to share between threads.
    """

    TOKENIZER_TYPE: str = "base"

    def __init__(self) -> None:
        """Initialize tokenizer with base 256 vocabulary."""
        super().__init__()
        # byte pair -> merge token
        self.merges: Encoding = {}
        # tokens -> bytes
        self.vocab: Vocabulary = build_vocab(self.merges)
        # raw byte -> vocabulary byte, None when the vocabulary uses raw bytes
        self.byte_shuffle: ByteShuffle | None = None
        # chunk text -> tokens
        self._cache: dict[str, list[Token]] = {}

    @abstractmethod
    def train(
        self, text: str | list[str], vocab_size: int, verbose: bool = False
    ) -> None:
        """Train tokenizer on text to learn merges up to target vocab size."""
        ...

    @abstractmethod
    def _split(self, text: str) -> Iterable[str]:
        """Split text into chunks that are encoded independently."""
        ...

    def encode(self, text: str) -> list[Token]:
        """
        Encode text into a sequence of tokens.

        :param text: Text to encode.
        :returns: Tokens of every chunk, concatenated in chunk order.
        """
        tokens: list[Token] = []
        for chunk in self._split(text):
            tokens.extend(self._encode_chunk(chunk))
        return tokens

    def decode(self, tokens: list[Token]) -> str:
        """
        Decode a sequence of tokens back into text.

        :param tokens: Token sequence to decode.
        :returns: Decoded text where invalid UTF-8 is replaced.
        :raises VocabularyError: If any token is not in the vocabulary.
        """
        txt_bytes = []
        for tok in tokens:
            try:
                txt_bytes.append(self.vocab[tok])
            except KeyError:
                raise VocabularyError(
                    "token not found in vocabulary", invalid_tok=tok
                ) from None

        raw = b"".join(txt_bytes)
        if self.byte_shuffle is not None:
            raw = self.byte_shuffle.unshuffle(raw)
        return raw.decode("utf-8", errors="replace")

    def vocab_size(self) -> int:
        """Return the number of tokens in the vocabulary."""
        return len(self.vocab)

    def clear_cache(self) -> None:
        """Drop all cached chunk encodings."""
        self._cache.clear()

    def _encode_chunk(self, chunk: str) -> list[Token]:
        """Encode one chunk, consulting the cache first."""
        cached = self._cache.get(chunk)
        if cached is None:
            txt_bytes = chunk.encode("utf-8", errors="replace")
            if self.byte_shuffle is not None:
                txt_bytes = self.byte_shuffle.shuffle(txt_bytes)
            cached = apply_merges(list(txt_bytes), self.merges)
            self._cache[chunk] = cached
        # callers own the returned list
        return list(cached)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(vocab_size={self.vocab_size()})"
