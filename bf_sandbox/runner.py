import logging
from dataclasses import dataclass
from typing import Optional

from bf_sandbox.config import get_settings
from bf_sandbox.errors import BrainfuckError
from bf_sandbox.interpreter import BrainfuckInterpreter, InputData, Program

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Outcome of one sandboxed run. output is None when the run failed."""
    output: Optional[bytes]
    steps: int
    input_reads: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def run_program(code: Program, input_data: InputData = b"", step_limit: Optional[int] = None,
                output_limit: Optional[int] = None) -> RunResult:
    """Execute BF code in byte mode, turning evaluation failures into a result.

    Limits not given fall back to BF_STEP_LIMIT / BF_OUTPUT_LIMIT, read once
    per process by get_settings().
    """
    if step_limit is None or output_limit is None:
        settings = get_settings()
        if step_limit is None:
            step_limit = settings.step_limit
        if output_limit is None:
            output_limit = settings.output_limit

    itp = BrainfuckInterpreter(max_steps=step_limit, max_output=output_limit)
    try:
        out = itp.run(code, input_data)
    except BrainfuckError as e:
        logger.debug("program %r failed: %s", code[:40], e)
        return RunResult(output=None, steps=itp.step_count, input_reads=itp.input_reads, error=str(e))
    return RunResult(output=out, steps=itp.step_count, input_reads=itp.input_reads)


def run_once(code: Program, x: int, step_limit: Optional[int] = None) -> Optional[int]:
    """Execute BF code with single byte input, return single byte output.
    Memory starts zeroed on every call.
    """
    result = run_program(code, bytes([x % 256]), step_limit=step_limit)
    if not result.output:
        return None
    return result.output[0]
