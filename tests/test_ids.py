"""
Testing identifier codecs: round trips, fixed widths, and rejection of malformed keys.
"""

from uuid import UUID, uuid4

import pytest

from codebreaker.exceptions import DecodeError
from codebreaker.ids import Base36Codec, Base64UrlCodec, build_codec

CODECS = [Base36Codec(), Base64UrlCodec()]


@pytest.mark.parametrize("codec", CODECS)
def test_round_trip_for_random_ids(codec):
    for _ in range(10_000):
        value = uuid4()
        key = codec.encode(value)
        assert len(key) == codec.width
        assert codec.encode(value) == key
        assert codec.decode(key) == value


@pytest.mark.parametrize("codec", CODECS)
@pytest.mark.parametrize("value", [UUID(int=0), UUID(int=1), UUID(int=(1 << 128) - 1), UUID(int=1 << 64)])
def test_round_trip_at_the_edges(codec, value):
    assert codec.decode(codec.encode(value)) == value


def test_base36_layout():
    codec = Base36Codec()
    assert codec.encode(UUID(int=0)) == "0" * 26
    assert codec.encode(UUID(int=35)) == "0" * 25 + "z"
    # most significant half on the left, least significant on the right
    assert codec.encode(UUID(int=1 << 64)) == "0" * 12 + "1" + "0" * 13
    assert codec.encode(UUID(int=(1 << 128) - 1)) == "3w5e11264sgsf" * 2


@pytest.mark.parametrize(
    "key",
    [
        "",
        "0" * 25,
        "0" * 27,
        "0" * 25 + "Z",          # uppercase is not part of the alphabet
        "0" * 25 + "-",
        "0" * 12 + "_1" + "0" * 12,
        "zzzzzzzzzzzzz" + "0" * 13,  # half wider than 64 bits
    ],
)
def test_base36_rejects_malformed_keys(key):
    with pytest.raises(DecodeError):
        Base36Codec().decode(key)


@pytest.mark.parametrize(
    "key",
    [
        "A" * 21,
        "A" * 24,
        "A" * 20 + "==",
        "A" * 21 + "+",
        "A" * 21 + "B",  # trailing bits must be zero
    ],
)
def test_base64url_rejects_malformed_keys(key):
    with pytest.raises(DecodeError):
        Base64UrlCodec().decode(key)


def test_decode_error_is_a_value_error():
    with pytest.raises(ValueError):
        Base36Codec().decode("nope")


def test_build_codec():
    assert isinstance(build_codec("base36"), Base36Codec)
    assert isinstance(build_codec("base64url"), Base64UrlCodec)
    with pytest.raises(ValueError):
        build_codec("hex")
