from nanoid import generate

from dynamiclinks.constants import SAFE_ALPHABET
from dynamiclinks.exceptions import GenerationError
from dynamiclinks.strategies.base import BaseStrategy


class NanoIDStrategy(BaseStrategy):
    """Shorten URLs with random Nano IDs over the SMS-safe alphabet.

    The URL content is ignored, so the same URL yields a different shortcode
    on every call. No global dedup is attempted here.
    """

    def generate(self, url: str, length: int) -> str:
        try:
            return generate(SAFE_ALPHABET, length)
        except (NotImplementedError, OSError) as e:
            # os.urandom() has no entropy source available
            raise GenerationError(f'Nano ID generation failed: {e}') from e

    def always_growing(self) -> bool:
        return True
