"""Sandboxed Brainfuck evaluation with step and output limits."""

from bf_sandbox.errors import (
    BracketError,
    BrainfuckError,
    OutputLimitExceeded,
    ResourceLimitExceeded,
    StepLimitExceeded,
    UnmatchedCloseBracketError,
    UnmatchedOpenBracketError,
)
from bf_sandbox.interpreter import (
    DEFAULT_MAX_OUTPUT,
    DEFAULT_MAX_STEPS,
    NULL_SINK,
    TAPE_SIZE,
    BrainfuckInterpreter,
    CallbackSink,
    OutputSink,
    brainfuck,
    brainfuck_bytes,
    build_jump_table,
)

__version__ = "0.1.0"
