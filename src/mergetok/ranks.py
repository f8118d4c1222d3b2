"""Loading mergeable rank tables (byte sequence -> rank)."""

import base64
import binascii
import functools
import logging

import tiktoken

from .errors import RankTableError
from .types import RankTable

log = logging.getLogger(__name__)


def parse_rank_table(text: str) -> RankTable:
    """
    Parse a tiktoken style rank table.

    Every non-blank line holds a base64 encoded byte sequence and its rank,
    separated by whitespace.

    .. code-block:: text

        IQ== 0
        Ig== 1

    :param text: Full contents of the table.
    :return: Byte sequence -> rank mapping.
    :raises RankTableError: On malformed lines, negative ranks or duplicates.
    """
    ranks: RankTable = {}
    seen: set[int] = set()

    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        parts = line.split()
        if len(parts) != 2:
            raise RankTableError("expected '<base64> <rank>'", line=lineno)
        try:
            token = base64.b64decode(parts[0], validate=True)
            rank = int(parts[1])
        except (binascii.Error, ValueError) as e:
            raise RankTableError(f"invalid entry {line.strip()!r}", line=lineno) from e

        if not token:
            raise RankTableError("empty byte sequence", line=lineno)
        if rank < 0:
            raise RankTableError("rank must be non-negative", rank=rank, line=lineno)
        if rank in seen or token in ranks:
            raise RankTableError("duplicate entry", rank=rank, line=lineno)

        ranks[token] = rank
        seen.add(rank)

    log.debug(f"parsed {len(ranks)} ranks")
    return ranks


@functools.cache
def _tiktoken_ranks(name: str) -> RankTable:
    log.info(f"loading {name} mergeable ranks from tiktoken")
    enc = tiktoken.get_encoding(name)
    return enc._mergeable_ranks


def load_tiktoken_ranks(name: str = "cl100k_base") -> RankTable:
    """
    Return the mergeable ranks of a tiktoken encoding.

    The table is fetched once per name and shared afterwards. Callers get a
    copy so the cached table cannot be modified.
    """
    return dict(_tiktoken_ranks(name))


__all__ = ["parse_rank_table", "load_tiktoken_ranks"]
