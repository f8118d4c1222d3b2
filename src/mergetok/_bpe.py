"""
Core Byte Pair Encoding (BPE) operations.

Shared by the trainable and the pretrained tokenizers so that training time
and inference time merges follow exactly the same rules.
"""

from collections import Counter
import logging

from .errors import RankTableError
from .types import Encoding, RankTable, Token, TokenBytes, TokenPair, Vocabulary

log = logging.getLogger(__name__)


def bpe_freqs(
    tokens: list[Token] | tuple[Token, ...],
    counter: Counter[TokenPair] | None = None,
    weight: int = 1,
) -> Counter[TokenPair]:
    """
    Count every consecutive token pair in ``tokens``.

    When ``counter`` is given it is updated in place, which lets callers
    accumulate frequencies over many chunks without pairs spanning them.
    Each pair counts ``weight`` times, for chunks that occur repeatedly.
    """
    if counter is None:
        counter = Counter()
    for pair in zip(tokens, tokens[1:]):
        counter[pair] += weight
    return counter


def bpe_merge(tokens: list[Token], target: TokenPair, new_tok: Token) -> list[Token]:
    """
    Merge all occurrences of a target token pair into a single new token.

    Occurrences are replaced left to right without overlap, so ``(a, a)`` in
    ``[a, a, a]`` only merges the first two tokens.

    Note: Merged tokens may represent partial UTF-8 sequences. Use errors="replace"
    when decoding to handle invalid sequences gracefully.
    """
    newtoks: list[Token] = []

    i = 0
    n = len(tokens)
    while i < n:
        # check if we can form a pair and it matches the target
        if i < n - 1 and tokens[i] == target[0] and tokens[i + 1] == target[1]:
            newtoks.append(new_tok)
            i += 2
        else:
            newtoks.append(tokens[i])
            i += 1

    return newtoks


def apply_merges(tokens: list[Token], merges: Encoding) -> list[Token]:
    """
    Apply learned merges to a token sequence.

    :param tokens: List of tokens (initially bytes 0-255).
    :param merges: Pair -> merged token, where the merged token is also the rank.
    :returns: Compressed token sequence after applying all possible merges.
    """
    while len(tokens) >= 2:
        # we dont need to count frequencies to find the lowest rank pair.
        # see: https://github.com/karpathy/minbpe/issues/87#issuecomment-2273349030
        # min() keeps the first minimum, so ties resolve to the leftmost pair.
        pair: TokenPair = min(
            zip(tokens, tokens[1:]),
            key=lambda bp: merges.get(bp, float("inf")),
        )
        # no pair to merge
        if pair not in merges:
            break
        tokens = bpe_merge(tokens, pair, merges[pair])

    return tokens


def bpe_parts(
    ranks: RankTable, token: TokenBytes, max_rank: Token | None = None
) -> list[TokenBytes]:
    """
    Split ``token`` into single bytes and merge them back using ``ranks``.

    Only the leftmost lowest-rank adjacent pair is merged per round. With
    ``max_rank`` set, merges whose rank is not strictly below it never fire.
    """
    parts = [bytes([b]) for b in token]
    while len(parts) >= 2:
        min_idx = None
        min_rank = None
        for i, pair in enumerate(zip(parts, parts[1:])):
            rank = ranks.get(pair[0] + pair[1])
            if rank is not None and (min_rank is None or rank < min_rank):
                min_idx = i
                min_rank = rank
        if min_idx is None or (max_rank is not None and min_rank >= max_rank):
            break
        parts = parts[:min_idx] + [parts[min_idx] + parts[min_idx + 1]] + parts[min_idx + 2 :]
    return parts


def recover_merges(ranks: RankTable) -> Encoding:
    """
    Recover the pairwise merge table from a flat rank table.

    Each multi-byte entry is replayed with merges capped at its own rank.
    What is left must be exactly the two tokens it was built from.

    :param ranks: Byte sequence -> rank, including all 256 single bytes.
    :returns: Pair of constituent ranks -> rank of the merged entry.
    :raises RankTableError: If an entry does not decompose into two known tokens.
    """
    merges: Encoding = {}
    # rank order, never the mapping's insertion order
    for token, rank in sorted(ranks.items(), key=lambda x: x[1]):
        if len(token) == 1:
            continue
        pair = bpe_parts(ranks, token, max_rank=rank)
        if len(pair) != 2:
            raise RankTableError(
                f"entry {token!r} decomposes into {len(pair)} parts, expected 2",
                rank=rank,
            )
        try:
            ix0, ix1 = ranks[pair[0]], ranks[pair[1]]
        except KeyError as e:
            raise RankTableError(
                f"entry {token!r} is built from an unknown sub-token", rank=rank
            ) from e
        merges[(ix0, ix1)] = rank

    log.debug(f"recovered {len(merges)} merges from {len(ranks)} ranks")
    return merges


def build_vocab(merges: Encoding) -> Vocabulary:
    """
    Build token-to-bytes vocabulary mapping.

    Adds base 256 byte tokens, then merged tokens in merge order so child
    tokens exist before their parent.
    """
    # mapping for base 256 tokens
    vocab: Vocabulary = {btok: bytes([btok]) for btok in range(256)}
    for (tok0, tok1), mtok in sorted(merges.items(), key=lambda x: x[1]):
        vocab[mtok] = vocab[tok0] + vocab[tok1]

    log.debug(f"built vocabulary with {len(vocab)} tokens")
    return vocab


__all__ = [
    "bpe_freqs",
    "bpe_merge",
    "apply_merges",
    "bpe_parts",
    "recover_merges",
    "build_vocab",
]
