"""Deterministic (content-addressed) shortening strategies.

Each strategy digests the UTF-8 encoded URL (lone surrogates, e.g. from
surrogateescape decoding, pass through), reads the digest as a
big-endian integer and re-encodes it over the SMS-safe Base62 alphabet
(never passing raw hex/base64 through). The encoding is then truncated to
the requested length, or left-padded with '0' when shorter (CRC32 encodes
to at most 6 characters).

Example:
    >>> from dynamiclinks.strategies import SHA256Strategy
    >>> strategy = SHA256Strategy()
    >>> strategy.shorten('https://example.com') == strategy.shorten('https://example.com')
    True
"""

import zlib
import hashlib
from abc import abstractmethod

from dynamiclinks.strategies.base import BaseStrategy, base62_encode


class DigestStrategy(BaseStrategy):
    """Base class for digest-based strategies"""

    @abstractmethod
    def digest(self, data: bytes) -> int:
        pass

    def generate(self, url: str, length: int) -> str:
        return self._fit(base62_encode(self.digest(url.encode('utf-8', 'surrogatepass'))), length)

    def always_growing(self) -> bool:
        return False


class MD5Strategy(DigestStrategy):
    def digest(self, data: bytes) -> int:
        return int.from_bytes(hashlib.md5(data, usedforsecurity=False).digest(), 'big')


class SHA256Strategy(DigestStrategy):
    def digest(self, data: bytes) -> int:
        return int.from_bytes(hashlib.sha256(data).digest(), 'big')


class CRC32Strategy(DigestStrategy):
    def digest(self, data: bytes) -> int:
        return zlib.crc32(data)
