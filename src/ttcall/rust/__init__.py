"""
Rust path and type grammar written as call/return callees.

Entry points: `parse_path` (outputs `path`, `rest`) and `parse_type`
(outputs `type`, `rest`).
"""

from .names import PARSE_PATH, PARSE_TYPE
from . import path, ty
