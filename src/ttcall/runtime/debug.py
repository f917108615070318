"""
Debug Sink

Rust Pattern: tt-call tt_debug!

Destination that renders every output it receives as `name = [{ tokens }]`.
"""

from typing import Optional
import logging

from .protocol import Arguments, Continuation
from .registry import callee

logger = logging.getLogger(__name__)


@callee("tt_debug")
def tt_debug(caller: Optional[Continuation], args: Arguments) -> str:
    lines = [item.render() for item in args]
    for line in lines:
        logger.info(line)
    return "\n".join(lines)
