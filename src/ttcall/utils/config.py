"""
Configuration constants and environment overrides for ttcall
"""

import os
import tempfile

# Input naming and encoding
DEFAULT_SOURCE_FILE = "<input>"
DEFAULT_FILE_ENCODING = "utf-8"

# Lexer configuration (cache under temp dir to avoid cluttering project root)
DEFAULT_LEXER_CACHE_FILE = os.path.join(tempfile.gettempdir(), "ttcall_lexer.cache")

# Expansion limits (Rust's default #![recursion_limit] is 128)
DEFAULT_RECURSION_LIMIT = 128
DEFAULT_STEP_LIMIT = 100_000

RECURSION_LIMIT_ENV = "TTCALL_RECURSION_LIMIT"
STEP_LIMIT_ENV = "TTCALL_STEP_LIMIT"

# Predicate outputs
BOOLEAN_TRUE_LITERAL = "true"
BOOLEAN_FALSE_LITERAL = "false"


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def recursion_limit() -> int:
    """
    Maximum continuation chain length during one expansion.

    Each level of generic nesting in a path holds about five frames, so the
    default allows roughly 25 levels of `Vec<Vec<...>>`.
    """
    return _env_int(RECURSION_LIMIT_ENV, DEFAULT_RECURSION_LIMIT)


def step_limit() -> int:
    """Maximum number of rewrite steps during one expansion."""
    return _env_int(STEP_LIMIT_ENV, DEFAULT_STEP_LIMIT)
