"""Unit tests for NanoIDStrategy

Test coverage includes:

1. Growing behavior
   - always_growing() is True.
   - The same URL yields a different shortcode on every call.

2. Length policy
   - Default, requested, floored and truncated lengths.

3. Input tolerance
   - Empty, very long, non-URL and non-ASCII inputs never raise.

4. SMS-safe output
   - Only Base62 characters (no '_' or '-') across many generations.

5. Error handling
   - Entropy failures and unsafe generator output raise GenerationError.
"""

import re
import string

import pytest

from dynamiclinks.exceptions import GenerationError
from dynamiclinks.strategies import NanoIDStrategy
from dynamiclinks.strategies import nano_id_strategy


SAFE = re.compile(r'^[0-9A-Za-z]+$')


@pytest.fixture
def strategy():
    return NanoIDStrategy()


# -------------------------------
# 1. Growing behavior
# -------------------------------


def test_always_growing(strategy):
    assert strategy.always_growing() is True


def test_shorten_returns_string(strategy):
    assert isinstance(strategy.shorten('https://example.com'), str)


def test_shorten_returns_different_codes_for_same_url(strategy):
    """100 generations for the same URL must not collide."""
    codes = [strategy.shorten('https://example.com') for _ in range(100)]
    assert len(set(codes)) == 100


# -------------------------------
# 2. Length policy
# -------------------------------


def test_shorten_default_length(strategy):
    assert len(strategy.shorten('https://example.com')) == NanoIDStrategy.MIN_LENGTH


def test_shorten_respects_requested_length(strategy):
    assert len(strategy.shorten('https://example.com', min_length=7)) == 7


def test_shorten_never_below_minimum_length(strategy):
    assert len(strategy.shorten('https://example.com', min_length=2)) == NanoIDStrategy.MIN_LENGTH


def test_shorten_truncates_to_max_length():
    strategy = NanoIDStrategy(max_length=10)
    assert len(strategy.shorten('https://example.com', min_length=50)) == 10


def test_shorten_uses_instance_min_length():
    strategy = NanoIDStrategy(min_length=8)
    assert len(strategy.shorten('https://example.com')) == 8


def test_invalid_length_bounds_raise_error():
    with pytest.raises(ValueError):
        NanoIDStrategy(min_length=10, max_length=8)
    with pytest.raises(ValueError):
        NanoIDStrategy(max_length=3)


# -------------------------------
# 3. Input tolerance
# -------------------------------


@pytest.mark.parametrize(
    'url',
    [
        '',
        f'https://example.com/{"a" * 500}',
        'this is not a valid URL',
        'https://example.com?param1=value1&param2=value2',
        'https://example.com/path?query=特殊文字#fragment',
        'https://example.com/\udcff',
    ],
)
def test_shorten_handles_any_input(strategy, url):
    short_url = strategy.shorten(url)
    assert isinstance(short_url, str)
    assert len(short_url) >= NanoIDStrategy.MIN_LENGTH


# -------------------------------
# 4. SMS-safe output
# -------------------------------


def test_shorten_generates_only_sms_safe_characters(strategy):
    problematic = [code for code in (strategy.shorten(f'https://example.com?iteration={i}') for i in range(100)) if not SAFE.match(code)]
    assert problematic == []


def test_shorten_uses_only_base62_characters(strategy):
    base62 = set(string.digits + string.ascii_uppercase + string.ascii_lowercase)
    assert set(strategy.shorten('https://example.com', min_length=12)) <= base62


def test_shorten_generates_unique_codes_for_different_urls(strategy):
    codes = [strategy.shorten(f'https://example.com/page-{i}') for i in range(50)]
    assert len(set(codes)) == len(codes)


# -------------------------------
# 5. Error handling
# -------------------------------


@pytest.mark.parametrize('error', [NotImplementedError('no entropy source'), OSError('getrandom failed')])
def test_entropy_failure_raises_generation_error(strategy, monkeypatch, error):
    def deny_entropy(alphabet, size):
        raise error

    monkeypatch.setattr(nano_id_strategy, 'generate', deny_entropy)

    with pytest.raises(GenerationError, match='Nano ID generation failed'):
        strategy.shorten('https://example.com')


@pytest.mark.parametrize('unsafe', ['abc_12', 'ab-123', 'abc 12'])
def test_unsafe_generator_output_raises_generation_error(strategy, monkeypatch, unsafe):
    monkeypatch.setattr(nano_id_strategy, 'generate', lambda alphabet, size: unsafe)

    with pytest.raises(GenerationError, match='outside the safe alphabet'):
        strategy.shorten('https://example.com')


def test_short_generator_output_raises_generation_error(strategy, monkeypatch):
    monkeypatch.setattr(nano_id_strategy, 'generate', lambda alphabet, size: 'ab1')

    with pytest.raises(GenerationError, match='shorter than'):
        strategy.shorten('https://example.com')
