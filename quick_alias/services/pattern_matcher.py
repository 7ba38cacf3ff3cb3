"""
Pattern Matcher — decides whether a note's name qualifies for alias scanning.

The user-supplied expression must match the whole base name (no extension),
so the default date pattern accepts ``2024-01-01`` but not ``2024-01-01 draft``.
"""

import re
from functools import lru_cache

from quick_alias.errors import ConfigError

DEFAULT_FILE_PATTERN = r"[0-9]{4}-[0-9]{2}-[0-9]{2}"  # YYYY-MM-DD


@lru_cache(maxsize=32)
def compile_pattern(pattern: str) -> re.Pattern:
    """Compile *pattern*; raises ``ConfigError``."""
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ConfigError(f"Invalid regex: {e}") from e


def matches(name: str, pattern: str) -> bool:
    return compile_pattern(pattern).fullmatch(name) is not None
