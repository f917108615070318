"""
File input for the CLI.

Token sources are read whole: the lexer needs the complete text up front.
"""

from pathlib import Path
from typing import Union

from .config import DEFAULT_FILE_ENCODING


def read_source_file(path: Union[Path, str]) -> str:
    """Read a token source file with the standard encoding."""
    return Path(path).read_text(encoding=DEFAULT_FILE_ENCODING)
