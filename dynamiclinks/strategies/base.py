"""Abstract base class for shortening strategies.

A strategy turns a URL into a shortcode drawn from the SMS-safe Base62
alphabet (0-9, A-Z, a-z). Strategies come in two flavours:

    - always growing: every call yields a fresh, non-reproducible code
      (e.g. NanoIDStrategy, RedisCounterStrategy). Callers must store a
      new mapping each time.
    - deterministic: the same URL always yields the same code under a fixed
      configuration (e.g. MD5Strategy). Callers may reuse an existing
      mapping for the same (client, code) pair.

Length policy:
    - The requested length defaults to the instance's `min_length`.
    - A requested length below `MIN_LENGTH` is raised to `MIN_LENGTH`.
    - A requested length above `max_length` is truncated to `max_length`.

Example:
    >>> from dynamiclinks.strategies import MD5Strategy
    >>> strategy = MD5Strategy()
    >>> code = strategy.shorten('https://example.com')
    >>> code == strategy.shorten('https://example.com')
    True
    >>> strategy.always_growing()
    False
"""

from abc import ABC, abstractmethod

from dynamiclinks.constants import SAFE_ALPHABET, BASE, CodeLength
from dynamiclinks.exceptions import GenerationError


SAFE_CHARACTERS = frozenset(SAFE_ALPHABET)


def base62_encode(number: int) -> str:
    """Encode a non-negative integer over the safe alphabet (most significant digit first)

    Example:
        >>> base62_encode(61)
        'z'
        >>> base62_encode(62)
        '10'
    """
    if number < 0:
        raise ValueError(f'Number must be a non-negative integer (given value: {number}).')
    if number == 0:
        return SAFE_ALPHABET[0]

    digits = []
    while number > 0:
        number, remainder = divmod(number, BASE)
        digits.append(SAFE_ALPHABET[remainder])
    return ''.join(reversed(digits))


class BaseStrategy(ABC):
    """Interface for shortening strategies.

    Attributes:
        min_length (int):
            Default requested length when `shorten()` receives none.
        max_length (int):
            Ceiling enforced on every generated code.

    Methods:
        shorten(url: str, min_length: int | None = None) -> str:
            Generate a shortcode for the URL.
            Raises GenerationError if no valid shortcode can be produced.

        always_growing() -> bool:
            True if every call yields a fresh code.

    Subclassing:
        Implement `generate(url, length)` returning a code of exactly
        `length` characters, and `always_growing()`. Output is validated
        by `shorten()`, so a subclass can never leak unsafe characters.
    """

    MIN_LENGTH = CodeLength.MIN
    MAX_LENGTH = CodeLength.MAX

    def __init__(self, min_length: int = CodeLength.MIN, max_length: int = CodeLength.MAX):
        if max_length < self.MIN_LENGTH:
            raise ValueError(f'Maximum length must be at least {self.MIN_LENGTH} (given value: {max_length}).')
        if min_length > max_length:
            raise ValueError(f'Minimum length ({min_length}) exceeds maximum length ({max_length}).')

        self.min_length = min_length
        self.max_length = max_length

    @property
    def name(self) -> str:
        return type(self).__name__

    def shorten(self, url: str, min_length: int | None = None) -> str:
        """Generate a shortcode for the given URL

        Args:
            url (str):
                The URL to shorten.
            min_length (int | None):
                Requested length. Defaults to the instance's `min_length`.

        Returns:
            str: shortcode made of SMS-safe characters only

        Raises:
            GenerationError:
                If the strategy cannot produce a valid shortcode.
        """
        length = self._resolve_length(min_length)
        shortcode = self.generate(url, length)
        return self._validate(self._enforce_max_length(shortcode))

    @abstractmethod
    def generate(self, url: str, length: int) -> str:
        """Produce a raw shortcode of `length` characters"""
        pass

    @abstractmethod
    def always_growing(self) -> bool:
        pass

    def _resolve_length(self, min_length: int | None) -> int:
        requested = self.min_length if min_length is None else min_length
        return min(max(requested, self.MIN_LENGTH), self.max_length)

    def _enforce_max_length(self, shortcode: str) -> str:
        return shortcode[: self.max_length]

    def _fit(self, encoded: str, length: int) -> str:
        """Truncate (keep leading characters) or left-pad an encoding to `length`"""
        return encoded[:length].rjust(length, SAFE_ALPHABET[0])

    def _validate(self, shortcode: str) -> str:
        if not isinstance(shortcode, str) or len(shortcode) < self.MIN_LENGTH:
            raise GenerationError(f'{self.name} produced a shortcode shorter than {self.MIN_LENGTH} characters.')
        if not SAFE_CHARACTERS.issuperset(shortcode):
            raise GenerationError(f'{self.name} produced a shortcode with characters outside the safe alphabet.')
        return shortcode
