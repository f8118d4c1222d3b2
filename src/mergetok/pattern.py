from enum import Enum

from .errors import PatternError


class TokenPattern(str, Enum):
    """
    Pre-defined regex patterns used to split text before applying merges.

    Source: https://github.com/openai/tiktoken/blob/main/tiktoken_ext/openai_public.py
    """

    # r50k_base / p50k_base
    GPT2 = (
        r"'(?:[sdmt]|ll|ve|re)|"
        r" ?\p{L}+|"
        r" ?\p{N}+|"
        r" ?[^\s\p{L}\p{N}]+|"
        r"\s+(?!\S)|"
        r"\s+"
    )

    # cl100k_base
    GPT4 = (
        r"'(?i:[sdmt]|ll|ve|re)|"
        r"[^\r\n\p{L}\p{N}]?+\p{L}+|"
        r"\p{N}{1,3}|"
        r" ?[^\s\p{L}\p{N}]++[\r\n]*|"
        r"\s*[\r\n]|"
        r"\s+(?!\S)|"
        r"\s+"
    )

    @classmethod
    def get(cls, name: str) -> str:
        """Get patterns by name (case-insensitive)."""
        try:
            return cls[name.upper().replace("-", "_")].value
        except KeyError:
            raise PatternError(
                f"Unknown pattern: {name!r}. "
                f"Valid patterns: {', '.join(pat.name for pat in cls)}"
            )


def list_patterns() -> list[str]:
    """Return names of all available built-in split patterns."""
    return [pat.name.lower() for pat in TokenPattern]


def get_pattern(name: str) -> str:
    return TokenPattern.get(name)


__all__ = ["TokenPattern", "list_patterns", "get_pattern"]
