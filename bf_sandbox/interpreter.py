"""
Brainfuck Interpreter

Brainfuck is an esoteric programming language with only 8 commands:
    >   Move the pointer to the right
    <   Move the pointer to the left
    +   Increment the memory cell at the pointer
    -   Decrement the memory cell at the pointer
    .   Output the character signified by the cell at the pointer
    ,   Input a character and store it in the cell at the pointer
    [   Jump past the matching ] if the cell at the pointer is 0
    ]   Jump back to the matching [ if the cell at the pointer is nonzero

All other characters are treated as comments. They are not stripped: each
one keeps its position and costs a step when the instruction pointer passes
over it.

The tape is a fixed ring of 30000 byte cells. Every run is bounded by a step
limit and, for byte output, an output limit, so untrusted programs can be
evaluated safely.
"""

import logging
import operator
from typing import Callable, List, Optional, Union

from bf_sandbox.errors import (
    OutputLimitExceeded,
    StepLimitExceeded,
    UnmatchedCloseBracketError,
    UnmatchedOpenBracketError,
)

logger = logging.getLogger(__name__)

TAPE_SIZE = 30000
DEFAULT_MAX_STEPS = 1000000
DEFAULT_MAX_OUTPUT = 1000000

NO_JUMP = -1

Program = Union[str, bytes]
InputData = Union[str, bytes]


class OutputSink:
    """Receives each output byte as soon as it is written. Does nothing by default."""

    def accept(self, byte: int) -> None:
        pass


NULL_SINK = OutputSink()


class CallbackSink(OutputSink):
    """Forwards each output byte to a plain callable."""

    def __init__(self, callback: Callable[[int], None]):
        self.callback = callback

    def accept(self, byte: int) -> None:
        self.callback(byte)


def _as_text(program: Program) -> str:
    if isinstance(program, (bytes, bytearray)):
        return program.decode('latin-1')
    return program


def _as_bytes(input_data: InputData) -> bytes:
    if isinstance(input_data, (bytes, bytearray)):
        return bytes(input_data)
    # one read per UTF-16 code unit, keeping its low byte
    return input_data.encode('utf-16-le', 'surrogatepass')[::2]


def _check_limit(name: str, value: int) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    try:
        value = operator.index(value)
    except TypeError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    return value


def build_jump_table(code: Program) -> List[int]:
    """Build a table mapping bracket positions for efficient jumping.

    Slot i holds the position of the bracket matching code[i], or NO_JUMP
    when code[i] is not a bracket.
    """
    code = _as_text(code)
    jump_table = [NO_JUMP] * len(code)
    stack = []

    for i, cmd in enumerate(code):
        if cmd == '[':
            stack.append(i)
        elif cmd == ']':
            if not stack:
                raise UnmatchedCloseBracketError(i)
            start = stack.pop()
            jump_table[start] = i
            jump_table[i] = start

    if stack:
        raise UnmatchedOpenBracketError(stack[-1])

    return jump_table


class BrainfuckInterpreter:
    """Fetch-decode-execute engine shared by the text and byte entry points.

    Limits and the output sink are fixed at construction. Each call to run()
    starts from a zeroed tape; counters from the last run stay readable
    afterwards.
    """

    def __init__(self, memory_size: int = TAPE_SIZE, max_steps: int = DEFAULT_MAX_STEPS,
                 max_output: Optional[int] = None, sink: Optional[OutputSink] = None):
        if memory_size < 1:
            raise ValueError(f"memory_size must be positive, got {memory_size}")
        self.memory_size = memory_size
        self.max_steps = _check_limit('max_steps', max_steps)
        self.max_output = None if max_output is None else _check_limit('max_output', max_output)
        self.sink = NULL_SINK if sink is None else sink

        self.memory = bytearray(memory_size)
        self.pointer = 0
        self.instruction_pointer = 0
        self.step_count = 0
        self.input_reads = 0
        self.output_writes = 0

    def run(self, code: Program, input_data: InputData = b"") -> bytes:
        """Execute code against input_data and return the bytes it wrote."""
        code = _as_text(code)
        data = _as_bytes(input_data)

        try:
            jump_table = build_jump_table(code)
        except SyntaxError as e:
            logger.debug("rejected program before execution: %s", e)
            raise

        # Reset state
        self.memory = memory = bytearray(self.memory_size)
        self.pointer = 0
        self.instruction_pointer = 0
        self.step_count = 0
        self.input_reads = 0
        self.output_writes = 0

        output = bytearray()
        sink = self.sink
        notify = sink is not NULL_SINK
        max_steps = self.max_steps
        max_output = self.max_output
        size = self.memory_size
        code_len = len(code)
        data_len = len(data)

        ptr = 0
        ip = 0
        steps = 0
        input_index = 0

        try:
            while ip < code_len:
                steps += 1
                if steps > max_steps:
                    raise StepLimitExceeded(max_steps)

                cmd = code[ip]
                if cmd == '>':
                    ptr = (ptr + 1) % size
                elif cmd == '<':
                    ptr = (ptr - 1 + size) % size
                elif cmd == '+':
                    memory[ptr] = (memory[ptr] + 1) & 0xFF
                elif cmd == '-':
                    memory[ptr] = (memory[ptr] - 1 + 256) & 0xFF
                elif cmd == '.':
                    if max_output is not None and len(output) >= max_output:
                        raise OutputLimitExceeded(max_output)
                    output.append(memory[ptr])
                    if notify:
                        sink.accept(memory[ptr])
                elif cmd == ',':
                    if input_index < data_len:
                        memory[ptr] = data[input_index]
                        input_index += 1
                    else:
                        # EOF: cell reads as 0, cursor stays put
                        memory[ptr] = 0
                elif cmd == '[':
                    if memory[ptr] == 0:
                        ip = jump_table[ip]
                elif cmd == ']':
                    if memory[ptr] != 0:
                        ip = jump_table[ip]

                ip += 1
        except (StepLimitExceeded, OutputLimitExceeded) as e:
            logger.debug("run aborted after %d steps: %s", steps, e)
            raise
        finally:
            self.pointer = ptr
            self.instruction_pointer = ip
            self.step_count = min(steps, max_steps)
            self.input_reads = input_index
            self.output_writes = len(output)

        return bytes(output)


def brainfuck(code: Program, input_data: InputData = "", max_steps: int = DEFAULT_MAX_STEPS) -> str:
    """Run code and return its output as text, one character per output byte."""
    interpreter = BrainfuckInterpreter(max_steps=max_steps)
    return ''.join(map(chr, interpreter.run(code, input_data)))


def brainfuck_bytes(code: Program, input_data: InputData = "", max_steps: int = DEFAULT_MAX_STEPS,
                    max_output: int = DEFAULT_MAX_OUTPUT,
                    on_output: Optional[Callable[[int], None]] = None) -> bytes:
    """Run code and return its raw output bytes.

    Raises OutputLimitExceeded when the program tries to write more than
    max_output bytes. on_output, if given, is called with every byte in
    emission order while the program runs.
    """
    sink = CallbackSink(on_output) if on_output is not None else NULL_SINK
    interpreter = BrainfuckInterpreter(max_steps=max_steps, max_output=max_output, sink=sink)
    return interpreter.run(code, input_data)
