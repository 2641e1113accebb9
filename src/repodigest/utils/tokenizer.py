# src/repodigest/utils/tokenizer.py
import logging

import tiktoken

logger = logging.getLogger(__name__)

CHARS_PER_TOKEN = 4


def estimate_tokens(text: str) -> int:
    """
    Cheap character-based token estimate used for scoring and packing.
    Monotone in len(text); empty text is 0 tokens.
    """
    return -(-len(text) // CHARS_PER_TOKEN)


class Tokenizer:
    _encoding = None

    @classmethod
    def get_encoding(cls):
        if cls._encoding is None:
            try:
                cls._encoding = tiktoken.get_encoding("cl100k_base")
            except Exception:
                # Fallback
                cls._encoding = tiktoken.get_encoding("p50k_base")
        return cls._encoding

    @staticmethod
    def count(text: str) -> int:
        """Exact token count, for reporting only."""
        try:
            encoding = Tokenizer.get_encoding()
            return len(encoding.encode(text, disallowed_special=()))
        except Exception as e:
            # No encoding available (e.g. offline): report the estimate instead
            logger.debug("tiktoken unavailable, using estimate: %s", e)
            return estimate_tokens(text)
