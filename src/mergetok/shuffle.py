"""Byte permutation for vocabularies whose single-byte ranks are not 0..255 in order."""

from .errors import RankTableError
from .types import RankTable


class ByteShuffle:
    """
    Bijective byte permutation and its inverse.

    ``shuffle`` maps raw input bytes onto the ids the vocabulary gave them,
    ``unshuffle`` maps vocabulary bytes back to raw bytes.
    """

    def __init__(self, table: bytes) -> None:
        if len(table) != 256 or len(set(table)) != 256:
            raise RankTableError("byte shuffle must be a permutation of 0..255")
        self._table = table
        inverse = bytearray(256)
        for raw, shuffled in enumerate(table):
            inverse[shuffled] = raw
        self._inverse = bytes(inverse)

    @classmethod
    def from_ranks(cls, ranks: RankTable) -> "ByteShuffle":
        """
        Build the permutation ``b -> ranks[bytes([b])]``.

        :raises RankTableError: If a single byte is missing, its rank does not
            fit in a byte, or two bytes share a rank.
        """
        table = bytearray(256)
        for b in range(256):
            rank = ranks.get(bytes([b]))
            if rank is None:
                raise RankTableError(f"single byte {b} missing from rank table")
            if not 0 <= rank <= 255:
                raise RankTableError(
                    f"rank for single byte {b} does not fit in a byte", rank=rank
                )
            table[b] = rank
        return cls(bytes(table))

    @property
    def is_identity(self) -> bool:
        return self._table == bytes(range(256))

    def shuffle(self, data: bytes) -> bytes:
        """Map raw bytes to vocabulary bytes."""
        return data.translate(self._table)

    def unshuffle(self, data: bytes) -> bytes:
        """Map vocabulary bytes back to raw bytes."""
        return data.translate(self._inverse)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(identity={self.is_identity})"
