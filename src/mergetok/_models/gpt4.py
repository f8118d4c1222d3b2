"""
A reproduction of GPT-4's tokenization from a pretrained mergeable rank table,
such as the ``cl100k_base`` table shipped with tiktoken.
"""

from typing import override
import logging

from .._bpe import build_vocab, recover_merges
from ..errors import RankTableError, TrainingError
from ..shuffle import ByteShuffle
from ..types import RankTable

from .regex import RegexTokenizer

log = logging.getLogger(__name__)


class GPT4Tokenizer(RegexTokenizer):
    """
    Tokenizer with a fixed vocabulary given as a flat rank table.

    The pairwise merges are recovered once at construction. cl100k_base does
    not rank its single bytes 0..255 in order, so input bytes are shuffled
    onto their ranks before merging and shuffled back after decoding.
    """

    TOKENIZER_TYPE = "gpt4"

    def __init__(self, mergeable_ranks: RankTable, pattern: str | None = None) -> None:
        """
        :param mergeable_ranks: Byte sequence -> rank for every token, including
            all 256 single bytes.
        :param pattern: Split pattern, GPT-4's by default.
        :raises RankTableError: If the rank table is inconsistent.
        """
        super().__init__(pattern)

        if len(set(mergeable_ranks.values())) != len(mergeable_ranks):
            raise RankTableError("ranks must be unique")

        # single byte ranks are validated before recovery relies on them
        shuffle = ByteShuffle.from_ranks(mergeable_ranks)
        self.merges = recover_merges(mergeable_ranks)
        self.vocab = build_vocab(self.merges)
        self.byte_shuffle = None if shuffle.is_identity else shuffle

        log.info(
            f"loaded pretrained vocabulary: {len(self.merges)} merges, "
            f"{len(self.vocab)} total tokens"
        )

    @override
    def train(
        self, text: str | list[str], vocab_size: int, verbose: bool = False
    ) -> None:
        """Pretrained vocabularies are fixed.

        :raises TrainingError: Always.
        """
        raise TrainingError(
            f"{self.__class__.__name__} has a fixed vocabulary and cannot be trained",
            vocab_size=vocab_size,
        )
