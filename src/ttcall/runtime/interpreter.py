"""
Interpreter

Rust Pattern: macro expansion loop with #![recursion_limit]

Trampoline over Invocations: each handler returns the next step and the loop
runs it, so Python's own stack depth stays constant however long the
continuation chain gets. The loop also enforces the fire-once contract.
"""

from typing import Dict, Optional, Set
import logging

from ..shared.errors import ProtocolError, RecursionLimitError
from ..utils import config
from .protocol import Continuation, Invocation, Step

logger = logging.getLogger(__name__)


class Interpreter:
    """
    Runs steps until one produces a final value.

    Checks, per run:
    - a continuation fires at most once
    - every continuation that became live has fired by the end
    - a handler with a caller returns an Invocation, never a final value
    - chain depth and step count stay under the configured limits
    """

    def __init__(self, recursion_limit: Optional[int] = None, step_limit: Optional[int] = None):
        self.recursion_limit = recursion_limit if recursion_limit is not None else config.recursion_limit()
        self.step_limit = step_limit if step_limit is not None else config.step_limit()

    def run(self, step: Step) -> Step:
        fired: Set[int] = set()
        live: Dict[int, Continuation] = {}
        steps = 0

        while isinstance(step, Invocation):
            steps += 1
            if steps > self.step_limit:
                raise RecursionLimitError(
                    f"step limit of {self.step_limit} reached while expanding",
                    callee=step.callee.name,
                )

            if step.fires is not None:
                frame_id = step.fires.frame_id
                if frame_id in fired:
                    raise ProtocolError(
                        "continuation fired more than once",
                        callee=step.fires.callee.name,
                    )
                fired.add(frame_id)
                live.pop(frame_id, None)

            depth = 0
            frame = step.caller
            while frame is not None:
                if frame.frame_id in fired:
                    raise ProtocolError(
                        "continuation used after it already fired",
                        callee=frame.callee.name,
                    )
                live.setdefault(frame.frame_id, frame)
                depth += 1
                frame = frame.caller
            if depth > self.recursion_limit:
                raise RecursionLimitError(
                    f"recursion limit of {self.recursion_limit} reached while expanding",
                    callee=step.callee.name,
                )

            logger.debug(f"step {steps}: {step.callee.name} {step.args.shape} depth={depth}")
            result = step.callee.handler(step.caller, step.args)

            if step.caller is not None and not isinstance(result, Invocation):
                raise ProtocolError(
                    "callee finished without firing its continuation",
                    callee=step.callee.name,
                )
            step = result

        if live:
            names = ", ".join(sorted({frame.callee.name for frame in live.values()}))
            raise ProtocolError(f"continuation never fired: {names}")

        logger.debug(f"expansion finished after {steps} steps")
        return step


def expand(step: Step, recursion_limit: Optional[int] = None, step_limit: Optional[int] = None) -> Step:
    """Run one top-level invocation to completion."""
    return Interpreter(recursion_limit, step_limit).run(step)
