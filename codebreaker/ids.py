"""
Identifier codecs: reversible, fixed-width string forms of 128-bit UUIDs.

Keys are an opacity/brevity convenience for the HTTP layer, never an
access-control mechanism. Two formats are available:

- base36:    26 characters, [0-9a-z]. The left 13 characters hold the most
             significant 64 bits, the right 13 the least significant 64 bits,
             each zero-padded.
- base64url: 22 characters, unpadded URL-safe base64 of the 16 UUID bytes.
"""

import base64
import binascii
import re
from typing import Protocol
from uuid import UUID

from .exceptions import DecodeError

BASE36_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
_HALF_WIDTH = 13
_HALF_LIMIT = 1 << 64

_BASE64URL_WIDTH = 22
_BASE64URL_PATTERN = re.compile(r"^[A-Za-z0-9_-]{22}$")

PARSE_FAILURE_FORMAT = 'Specified key cannot be parsed: "{}" ({}).'


class IdentifierCodec(Protocol):
    width: int

    def encode(self, value: UUID) -> str:
        ...

    def decode(self, key: str) -> UUID:
        ...


class Base36Codec:
    width = 2 * _HALF_WIDTH

    def encode(self, value: UUID) -> str:
        msb, lsb = divmod(value.int, _HALF_LIMIT)
        return self._half_to_string(msb) + self._half_to_string(lsb)

    def decode(self, key: str) -> UUID:
        if len(key) != self.width:
            raise DecodeError(PARSE_FAILURE_FORMAT.format(key, "wrong length"))
        if any(ch not in BASE36_ALPHABET for ch in key):
            raise DecodeError(PARSE_FAILURE_FORMAT.format(key, "invalid character"))
        msb = int(key[:_HALF_WIDTH], 36)
        lsb = int(key[_HALF_WIDTH:], 36)
        if msb >= _HALF_LIMIT or lsb >= _HALF_LIMIT:
            raise DecodeError(PARSE_FAILURE_FORMAT.format(key, "field out of range"))
        return UUID(int=msb * _HALF_LIMIT + lsb)

    @staticmethod
    def _half_to_string(value: int) -> str:
        digits = []
        while value:
            value, remainder = divmod(value, 36)
            digits.append(BASE36_ALPHABET[remainder])
        return "".join(reversed(digits)).rjust(_HALF_WIDTH, "0")


class Base64UrlCodec:
    width = _BASE64URL_WIDTH

    def encode(self, value: UUID) -> str:
        return base64.urlsafe_b64encode(value.bytes).rstrip(b"=").decode("ascii")

    def decode(self, key: str) -> UUID:
        if len(key) != self.width:
            raise DecodeError(PARSE_FAILURE_FORMAT.format(key, "wrong length"))
        if not _BASE64URL_PATTERN.match(key):
            raise DecodeError(PARSE_FAILURE_FORMAT.format(key, "invalid character"))
        try:
            raw = base64.urlsafe_b64decode(key + "==")
        except binascii.Error as e:
            raise DecodeError(PARSE_FAILURE_FORMAT.format(key, "invalid encoding")) from e
        value = UUID(bytes=raw)
        # the last character carries 4 unused bits; only the canonical form decodes
        if self.encode(value) != key:
            raise DecodeError(PARSE_FAILURE_FORMAT.format(key, "non-canonical encoding"))
        return value


CODECS = {
    "base36": Base36Codec,
    "base64url": Base64UrlCodec,
}


def build_codec(name: str = "base36") -> IdentifierCodec:
    try:
        return CODECS[name]()
    except KeyError:
        raise ValueError(f"Unknown key format {name!r}; expected one of {sorted(CODECS)}.") from None
