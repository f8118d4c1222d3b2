"""Unit tests for pretrained (rank table) tokenizers, byte shuffling and rank table parsing."""

import base64
from types import SimpleNamespace

import pytest
import requests
import tiktoken

import mergetok as mtok
from mergetok import ByteShuffle, GPT4Tokenizer, TokenPattern, parse_rank_table
from mergetok.ranks import _tiktoken_ranks
from mergetok.errors import RankTableError, TrainingError


def _shuffled_ranks() -> dict[bytes, int]:
    """Small vocabulary whose single bytes are ranked in reverse order."""
    ranks = {bytes([b]): 255 - b for b in range(256)}
    ranks[b"ab"] = 256
    ranks[b"abc"] = 257
    ranks[b" ab"] = 258
    return ranks


def _to_table(ranks: dict[bytes, int]) -> str:
    return "\n".join(
        f"{base64.b64encode(tok).decode()} {rank}" for tok, rank in ranks.items()
    )


@pytest.fixture
def shuffled_tokenizer():
    return GPT4Tokenizer(_shuffled_ranks())


# Byte shuffle
# ---------------------------------------------------------------------------


def test_byte_shuffle_roundtrip():
    shuffle = ByteShuffle.from_ranks(_shuffled_ranks())
    assert not shuffle.is_identity
    assert shuffle.shuffle(b"\x00\x01a") == bytes([255, 254, 255 - ord("a")])
    data = bytes(range(256))
    assert shuffle.unshuffle(shuffle.shuffle(data)) == data


def test_byte_shuffle_identity():
    shuffle = ByteShuffle.from_ranks({bytes([b]): b for b in range(256)})
    assert shuffle.is_identity
    assert shuffle.shuffle(b"hello") == b"hello"


def test_byte_shuffle_rank_out_of_range():
    ranks = {bytes([b]): b + 1 for b in range(256)}
    with pytest.raises(RankTableError) as exc_info:
        ByteShuffle.from_ranks(ranks)
    assert exc_info.value.rank == 256


def test_byte_shuffle_missing_byte():
    ranks = {bytes([b]): b for b in range(255)}
    with pytest.raises(RankTableError):
        ByteShuffle.from_ranks(ranks)


def test_byte_shuffle_must_be_bijective():
    with pytest.raises(RankTableError):
        ByteShuffle(bytes(256))


# Pretrained tokenizer on a small shuffled vocabulary
# ---------------------------------------------------------------------------


def test_recovered_merges_use_shuffled_ids(shuffled_tokenizer):
    a, b, c = (255 - ord(ch) for ch in "abc")
    space = 255 - ord(" ")
    assert shuffled_tokenizer.merges == {
        (a, b): 256,
        (256, c): 257,
        (space, 256): 258,
    }
    assert shuffled_tokenizer.vocab_size() == 259


def test_encode_applies_shuffle(shuffled_tokenizer):
    assert shuffled_tokenizer.encode("abc") == [257]
    assert shuffled_tokenizer.encode("abd") == [256, 255 - ord("d")]
    # chunks are "ab" and " ab"
    assert shuffled_tokenizer.encode("ab ab") == [256, 258]


def test_decode_reverses_shuffle(shuffled_tokenizer):
    text = "abc ab abd! Zürich"
    tokens = shuffled_tokenizer.encode(text)
    assert shuffled_tokenizer.decode(tokens) == text
    assert shuffled_tokenizer.decode([257, 258]) == "abc ab"


def test_pretrained_rank_monotonicity(shuffled_tokenizer):
    for (tok0, tok1), rank in shuffled_tokenizer.merges.items():
        assert rank > tok0
        assert rank > tok1


def test_pretrained_cannot_train(shuffled_tokenizer):
    with pytest.raises(TrainingError):
        shuffled_tokenizer.train("hello", vocab_size=300)


def test_identity_vocabulary_has_no_shuffle():
    ranks = {bytes([b]): b for b in range(256)}
    ranks[b"hi"] = 256
    tok = GPT4Tokenizer(ranks)
    assert tok.byte_shuffle is None
    assert tok.encode("hi") == [256]


def test_corrupt_rank_table_is_rejected():
    ranks = {bytes([b]): b for b in range(256)}
    ranks[b"xyz"] = 256
    with pytest.raises(RankTableError):
        GPT4Tokenizer(ranks)


def test_duplicate_ranks_are_rejected():
    ranks = _shuffled_ranks()
    ranks[b"zz"] = 256
    with pytest.raises(RankTableError):
        GPT4Tokenizer(ranks)


def test_single_byte_rank_out_of_range_is_rejected():
    ranks = _shuffled_ranks()
    ranks[b"a"] = 300
    with pytest.raises(RankTableError):
        GPT4Tokenizer(ranks)


# Rank table parsing
# ---------------------------------------------------------------------------


def test_parse_rank_table():
    ranks = _shuffled_ranks()
    assert parse_rank_table(_to_table(ranks) + "\n\n") == ranks


def test_parsed_table_builds_same_tokenizer(shuffled_tokenizer):
    tok = GPT4Tokenizer(parse_rank_table(_to_table(_shuffled_ranks())))
    assert tok.merges == shuffled_tokenizer.merges
    assert tok.encode("abc ab") == shuffled_tokenizer.encode("abc ab")


@pytest.mark.parametrize(
    ("table", "line"),
    [
        ("YQ== notanint", 1),
        ("YQ== 0\n!!!! 1", 2),
        ("YQ== 0\nYg== 1 extra", 2),
        ("YQ== -1", 1),
        ("YQ== 0\nYg== 0", 2),
        ("YQ== 0\nYQ== 1", 2),
    ],
)
def test_parse_rank_table_errors(table, line):
    with pytest.raises(RankTableError) as exc_info:
        parse_rank_table(table)
    assert exc_info.value.line == line


# tiktoken loading (offline)
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_tiktoken(monkeypatch):
    """Serve the small shuffled table from tiktoken.get_encoding and count calls."""
    calls = []

    def get_encoding(name):
        calls.append(name)
        return SimpleNamespace(_mergeable_ranks=_shuffled_ranks())

    _tiktoken_ranks.cache_clear()
    monkeypatch.setattr(tiktoken, "get_encoding", get_encoding)
    yield calls
    _tiktoken_ranks.cache_clear()


def test_load_tiktoken_ranks(fake_tiktoken):
    assert mtok.load_tiktoken_ranks("fake") == _shuffled_ranks()
    assert fake_tiktoken == ["fake"]


def test_load_tiktoken_ranks_fetches_once(fake_tiktoken):
    first = mtok.load_tiktoken_ranks("fake")
    first[b"zz"] = 999
    second = mtok.load_tiktoken_ranks("fake")
    assert fake_tiktoken == ["fake"]
    # callers get copies of the shared table
    assert b"zz" not in second


def test_from_tiktoken(fake_tiktoken):
    tok = mtok.from_tiktoken("fake")
    assert isinstance(tok, GPT4Tokenizer)
    assert tok.encode("ab") == [256]
    assert tok.decode(tok.encode("abc ab")) == "abc ab"
    mtok.from_tiktoken("fake")
    assert fake_tiktoken == ["fake"]


def test_load_tiktoken_ranks_propagates_loader_errors(monkeypatch):
    """A broken encoding object surfaces as an error, not as missing data."""
    _tiktoken_ranks.cache_clear()
    monkeypatch.setattr(tiktoken, "get_encoding", lambda name: SimpleNamespace())
    try:
        with pytest.raises(AttributeError):
            mtok.load_tiktoken_ranks("broken")
    finally:
        _tiktoken_ranks.cache_clear()


# Agreement with tiktoken's BPE on shuffled tables
# ---------------------------------------------------------------------------


def _word_ranks() -> dict[bytes, int]:
    """Multi-level merges over reverse-ranked single bytes."""
    ranks = {bytes([b]): 255 - b for b in range(256)}
    for tok in [
        b"he", b"ll", b"hell", b"hello", b" w", b"or", b" wor", b"ld", b" world",
        b"12", b"123",
    ]:
        ranks[tok] = len(ranks)
    return ranks


@pytest.mark.parametrize("make_ranks", [_shuffled_ranks, _word_ranks])
@pytest.mark.parametrize(
    "text",
    [
        "abc ab abd!",
        "Hello've world12345 how's are you!!!?",
        "hello world, hello there, the weather words\n\n  more 987",
        "Zürich 👋 ab",
    ],
)
def test_matches_tiktoken_encoding(make_ranks, text):
    ranks = make_ranks()
    reference = tiktoken.Encoding(
        name="shuffled-test",
        pat_str=TokenPattern.GPT4.value,
        mergeable_ranks=ranks,
        special_tokens={},
    )
    tok = GPT4Tokenizer(ranks)
    expected = reference.encode_ordinary(text)
    assert tok.encode(text) == expected
    assert tok.decode(expected) == text


# cl100k_base
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def cl100k():
    """GPT-4 tokenizer built from tiktoken's table, skipped when it cannot be fetched."""
    try:
        ranks = mtok.load_tiktoken_ranks("cl100k_base")
    except (requests.exceptions.RequestException, OSError) as e:
        pytest.skip(f"cl100k_base unavailable: {e}")
    return GPT4Tokenizer(ranks)


def test_cl100k_reference_sequence(cl100k):
    text = "Hello've world12345 how's are you!!!?"
    tokens = cl100k.encode(text)
    assert tokens == [9906, 3077, 1917, 4513, 1774, 1268, 596, 527, 499, 12340, 30]
    assert cl100k.decode(tokens) == text


def test_cl100k_uses_byte_shuffle(cl100k):
    assert cl100k.byte_shuffle is not None
    assert cl100k.vocab_size() == 100_256


@pytest.mark.parametrize(
    "text",
    [
        "hello world",
        "The café costs 12345 dollars!\nNew line here.",
        "def f(x):\n    return x ** 2",
        "日本語のテキスト 👋🌍",
    ],
)
def test_cl100k_matches_tiktoken(cl100k, text):
    tiktoken = pytest.importorskip("tiktoken")
    expected = tiktoken.get_encoding("cl100k_base").encode(text)
    assert cl100k.encode(text) == expected
    assert cl100k.decode(expected) == text
