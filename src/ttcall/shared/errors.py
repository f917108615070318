"""
Error Reporting

Rust Pattern: rustc_errors::Diagnostic

Faults are anchored at a token rather than described in prose: the location
is the part of a diagnostic that scales to large token streams.
"""

import os
import sys
from dataclasses import dataclass
from typing import Optional, List, Dict, TYPE_CHECKING
from .source_location import SourceLocation

if TYPE_CHECKING:
    from .tokens import Token


# Error codes
UNEXPECTED_TOKEN = "E0001"
UNEXPECTED_EOF = "E0002"
LEX_ERROR = "E0003"


# ---------------------------------------------------------------------------
# ANSI color helpers (disabled when NO_COLOR is set)
# ---------------------------------------------------------------------------

def _use_color() -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    explicit = os.environ.get("TTCALL_COLOR", "").lower()
    if explicit in ("0", "false", "no", "never"):
        return False
    return True

_BOLD   = "\033[1m"
_RED    = "\033[31m"
_BLUE   = "\033[34m"
_CYAN   = "\033[36m"
_RESET  = "\033[0m"

def _style(text: str, *codes: str, color: bool = True) -> str:
    if not color:
        return text
    prefix = "".join(codes)
    return f"{prefix}{text}{_RESET}" if prefix else text


# ---------------------------------------------------------------------------
# Error dataclass
# ---------------------------------------------------------------------------

@dataclass
class Error:
    """
    A reported diagnostic.

    Rust Pattern: rustc_errors::Diagnostic
    """
    message: str
    location: Optional[SourceLocation]
    code: Optional[str] = None
    help: Optional[str] = None
    note: Optional[str] = None
    label: Optional[str] = None


# ---------------------------------------------------------------------------
# Formatting engine
# ---------------------------------------------------------------------------

def _format_diagnostic(
    error: Error,
    source_files: Dict[str, str],
    color: bool = False,
) -> str:
    """
    Render a single diagnostic in rustc style.

    Example output (plain, no color)::

        error[E0001]: no rules expected the token `u8`
         --> <input>:1:5
          |
        1 | Foo<u8
          |     ^^ no rules expected this token
    """
    out: List[str] = []

    code_str = f"[{error.code}]" if error.code else ""
    out.append(
        _style(f"error{code_str}", _BOLD, _RED, color=color)
        + _style(f": {error.message}", _BOLD, color=color)
    )

    if error.location is None:
        out.append(_style(" --> ", _BOLD, _BLUE, color=color) + "<end of input>")
        _append_annotations(out, error, 1, color)
        return "\n".join(out)

    loc = error.location

    source = source_files.get(loc.file)
    if source is None:
        out.append(
            _style(" --> ", _BOLD, _BLUE, color=color)
            + f"{loc.file}:{loc.line}:{loc.column}"
        )
        _append_annotations(out, error, 1, color)
        return "\n".join(out)

    src_lines = source.split("\n")

    err_line = loc.line
    err_end_line = loc.end_line if loc.end_line and loc.end_line >= err_line else err_line
    err_col = max(loc.column, 1)
    err_end_col = loc.end_column if loc.end_column else 0

    gw = max(len(str(err_line)), 1)

    out.append(
        _style(" " * gw + "--> ", _BOLD, _BLUE, color=color)
        + f"{loc.file}:{loc.line}:{loc.column}"
    )
    out.append(_style(" " * (gw + 1) + "|", _BOLD, _BLUE, color=color))

    idx = err_line - 1
    code_line = src_lines[idx] if 0 <= idx < len(src_lines) else ""
    out.append(_style(str(err_line).rjust(gw) + " | ", _BOLD, _BLUE, color=color) + code_line)

    # Spans crossing lines (multi-line groups) are underlined to end of line
    col_start = err_col - 1
    if err_end_line > err_line:
        span_len = len(code_line) - col_start
    elif err_end_col > err_col:
        span_len = err_end_col - err_col
    else:
        span_len = _guess_span(code_line, col_start)
    span_len = max(1, span_len)
    carets = " " * col_start + "^" * span_len
    label_suffix = f" {error.label}" if error.label else ""
    out.append(
        _style(" " * (gw + 1) + "| ", _BOLD, _BLUE, color=color)
        + _style(carets + label_suffix, _BOLD, _RED, color=color)
    )

    _append_annotations(out, error, gw, color)

    return "\n".join(out)


def _guess_span(code_line: str, col_start: int) -> int:
    """Guess token length when end_column is unavailable."""
    if col_start >= len(code_line):
        return 1
    length = 0
    for ch in code_line[col_start:]:
        if ch in (" ", "\t", ",", ")", "]", "}"):
            break
        length += 1
    return max(1, length)


def _append_annotations(
    out: List[str],
    error: Error,
    gw: int,
    color: bool,
) -> None:
    if not (error.help or error.note):
        return
    out.append(_style(" " * (gw + 1) + "|", _BOLD, _BLUE, color=color))
    pad = " " * (gw + 1)
    if error.help:
        out.append(
            _style(f"{pad}= ", _BOLD, _CYAN, color=color)
            + _style("help: ", _BOLD, color=color)
            + error.help
        )
    if error.note:
        out.append(
            _style(f"{pad}= ", _BOLD, _CYAN, color=color)
            + _style("note: ", _BOLD, color=color)
            + error.note
        )


# ---------------------------------------------------------------------------
# ErrorReporter
# ---------------------------------------------------------------------------

class ErrorReporter:
    """
    Error reporter with Rust-style formatting.

    Rust Pattern: rustc_errors::Emitter
    """

    def __init__(self, source_files: Dict[str, str]):
        self.source_files = source_files
        self.errors: List[Error] = []

    def report_error(
        self,
        message: str,
        location: Optional[SourceLocation],
        code: Optional[str] = None,
        help: Optional[str] = None,
        note: Optional[str] = None,
        label: Optional[str] = None,
    ) -> None:
        self.errors.append(Error(
            message=message,
            location=location,
            code=code,
            help=help,
            note=note,
            label=label,
        ))

    def report(self, error: "TtCallSourceError") -> None:
        """Record a source error raised during lexing or expansion."""
        self.report_error(
            error.message,
            error.location,
            code=error.error_code,
            help=error.help_text,
            note=error.note_text,
            label=error.label_text,
        )

    def format_error(self, error: Error, color: Optional[bool] = None) -> str:
        use_color = color if color is not None else _use_color()
        return _format_diagnostic(error, self.source_files, color=use_color)

    def format_all_errors(self, color: Optional[bool] = None) -> str:
        parts = [self.format_error(e, color=color) for e in self.errors]
        use_color = color if color is not None else _use_color()
        count = len(self.errors)
        summary = f"aborting due to {count} previous error{'s' if count != 1 else ''}"
        parts.append(
            _style("error", _BOLD, _RED, color=use_color)
            + _style(f": {summary}", _BOLD, color=use_color)
        )
        return "\n\n".join(parts)

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def print_errors(self) -> None:
        print(self.format_all_errors(), file=sys.stderr)


# ============================================================================
# Exception Classes
# ============================================================================

class TtCallError(Exception):
    """Base exception for all ttcall errors"""
    def __init__(self, message: str, location: Optional[SourceLocation] = None):
        super().__init__(message)
        self.message = message
        self.location = location

    def __str__(self):
        if self.location:
            return f"{self.message}\n --> {self.location}"
        return self.message


class TtCallSourceError(TtCallError):
    """
    Error in the user's input tokens, rendered rustc-style.

    Use this for anything the user can fix by changing the input: lexing
    errors and grammar faults.
    """
    def __init__(self,
                 message: str,
                 location: Optional[SourceLocation] = None,
                 error_code: str = UNEXPECTED_TOKEN,
                 source_code: Optional[str] = None,
                 help: Optional[str] = None,
                 note: Optional[str] = None,
                 label: Optional[str] = None):
        super().__init__(message, location)
        self.error_code = error_code
        self.source_code = source_code
        self.help_text = help
        self.note_text = note
        self.label_text = label

    def __str__(self):
        source_files: Dict[str, str] = {}
        if self.source_code and self.location:
            source_files[self.location.file] = self.source_code
        err = Error(
            message=self.message,
            location=self.location,
            code=self.error_code,
            help=self.help_text,
            note=self.note_text,
            label=self.label_text,
        )
        return _format_diagnostic(err, source_files, color=_use_color())


class LexError(TtCallSourceError):
    """Source text could not be split into token trees."""
    def __init__(self, message: str, location: Optional[SourceLocation] = None, **kwargs):
        kwargs.setdefault("error_code", LEX_ERROR)
        super().__init__(message, location, **kwargs)


class Fault(TtCallSourceError):
    """
    Terminal expansion failure.

    Rust Pattern: "no rules expected the token" from macro_rules matching
    """


class UnexpectedToken(Fault):
    """Fault anchored at an offending token."""
    def __init__(self, token: "Token"):
        super().__init__(
            f"no rules expected the token `{token.render()}`",
            token.location,
            error_code=UNEXPECTED_TOKEN,
            label="no rules expected this token",
        )
        self.token = token


class UnexpectedEof(Fault):
    """Anchorless fault: input ended where a token was required."""
    def __init__(self):
        super().__init__(
            "unexpected end of input",
            None,
            error_code=UNEXPECTED_EOF,
            note="no token was available to anchor this error",
        )


class ProtocolError(Exception):
    """
    Error in callee authoring, not in the user's tokens.

    Use this for broken call/return contracts:
    - Unknown or duplicate callee names
    - Argument shapes no rule of a callee accepts
    - Continuations fired twice or never
    - State names colliding with output names
    """
    def __init__(self, message: str, callee: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.callee = callee

    def __str__(self):
        if self.callee:
            return f"[{self.callee}] {self.message}"
        return self.message


class RecursionLimitError(ProtocolError):
    """Expansion exceeded the configured depth or step limit."""
