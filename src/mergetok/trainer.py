"""Standalone BPE training module."""

from collections import Counter
from dataclasses import dataclass
import logging

from ._bpe import bpe_freqs, bpe_merge
from ._sanitise import render_bytes
from .errors import TrainingError
from .types import Encoding, Token, TokenPair, Vocabulary

log = logging.getLogger(__name__)


@dataclass
class BPETrainingResult:
    """Results from one BPE training run."""

    vocab: Vocabulary
    merges: Encoding
    n_merges_completed: int


def _best_pair(freqs: Counter[TokenPair]) -> TokenPair:
    """Most frequent pair; ties go to the lowest-valued pair."""
    return min(freqs, key=lambda pair: (-freqs[pair], pair))


def train_bpe(
    chunks: list[list[Token]], n_merges: int, verbose: bool = False
) -> BPETrainingResult:
    """
    Learn up to ``n_merges`` merges from byte-token chunks.

    Pair frequencies are summed over all chunks but never span two of them.
    Identical chunks are trained once and weighted by their count, which
    gives the same merges as scanning every occurrence.

    Example:
       >>> result = train_bpe([list(b"hello"), list(b"help")], n_merges=2)
       >>> result.merges
       {(101, 108): 256, (104, 256): 257}

    :param chunks: Token sequences, typically UTF-8 bytes of pre-tokenized text.
    :param n_merges: Maximum number of merge operations to perform.
    :param verbose: Log each learned merge when ``True``.
    :returns: Training output containing vocab, merge rules, and completed merge count.
    :raises TrainingError: If merges are requested but ``chunks`` holds no tokens.
    """
    if n_merges > 0 and not any(chunks):
        raise TrainingError("empty token sequence, no training performed")

    # unique chunk -> number of occurrences
    words: Counter[tuple[Token, ...]] = Counter(tuple(chunk) for chunk in chunks if chunk)

    merges: Encoding = {}
    vocab: Vocabulary = {tok: bytes([tok]) for tok in range(256)}

    for i in range(n_merges):
        freqs: Counter[TokenPair] = Counter()
        for word, count in words.items():
            bpe_freqs(word, freqs, weight=count)

        # 1. corpus compressed to single tokens per chunk
        # 2. corpus too short to reach the requested vocab size
        if not freqs:
            log.warning(
                f"no more byte pairs to merge after {i} merges "
                f"(requested {n_merges}) stopping early"
            )
            break

        pair = _best_pair(freqs)
        new_tok = 256 + i

        merged: Counter[tuple[Token, ...]] = Counter()
        for word, count in words.items():
            merged[tuple(bpe_merge(list(word), pair, new_tok))] += count
        words = merged

        merges[pair] = new_tok
        vocab[new_tok] = vocab[pair[0]] + vocab[pair[1]]

        if verbose:
            log.info(
                "merge %d/%d: %s -> %d [%s] (count %d)",
                i + 1,
                n_merges,
                pair,
                new_tok,
                render_bytes(vocab[new_tok]),
                freqs[pair],
            )

    return BPETrainingResult(
        vocab=vocab,
        merges=merges,
        n_merges_completed=len(merges),
    )


__all__ = ["BPETrainingResult", "train_bpe"]
