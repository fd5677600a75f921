from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import yaml

from bf_sandbox.runner import run_program

Example = Tuple[bytes, bytes]


@dataclass
class IOTask:
    name: str
    examples: List[Example] = field(default_factory=list)

    def run(self, code: str, inp: bytes) -> Optional[bytes]:
        """Run code on one example input; None if the run failed."""
        return run_program(code, inp).output


def _coerce_bytes(val: Any) -> bytes:
    """Accept a latin-1 string or a list of ints (each reduced mod 256)."""
    if isinstance(val, str):
        try:
            return val.encode("latin-1")
        except UnicodeEncodeError:
            raise ValueError(f"string {val!r} has characters outside latin-1") from None
    if isinstance(val, (list, tuple)):
        out = []
        for v in val:
            if isinstance(v, bool) or not isinstance(v, int):
                raise ValueError("byte list elements must be integers")
            out.append(v % 256)
        return bytes(out)
    if val is None:
        return b""
    raise ValueError(f"expected a string or a list of integers, got {type(val).__name__}")


def _coerce_example(obj: Any) -> Example:
    if isinstance(obj, dict):
        if "output" not in obj:
            raise ValueError("Each example must have 'output'")
        return _coerce_bytes(obj.get("input")), _coerce_bytes(obj["output"])
    if isinstance(obj, (list, tuple)) and len(obj) == 2:
        return _coerce_bytes(obj[0]), _coerce_bytes(obj[1])
    raise ValueError("example must be {input, output} or an [input, output] pair")


def parse_io_tasks(data: Any) -> List[IOTask]:
    """Build tasks from already-parsed YAML data.
    Supported formats:
      1) { tasks: [ { name, examples: [ {input, output}, ... ] }, ... ] }
      2) A list of { name, examples } objects
      3) Mapping of name -> list of [input, output] pairs
    """
    items: List[Dict[str, Any]]
    if isinstance(data, dict):
        if "tasks" in data and isinstance(data["tasks"], list):
            items = data["tasks"]
        else:
            items = [{"name": k, "examples": v} for k, v in data.items()]
    elif isinstance(data, list):
        items = data
    else:
        raise ValueError("Unsupported tasks structure; expected dict or list")

    tasks: List[IOTask] = []
    for obj in items:
        if not isinstance(obj, dict):
            raise ValueError("Each task must be a mapping")
        name = obj.get("name")
        if not name:
            raise ValueError("Each task must have 'name'")
        examples = obj.get("examples")
        if not isinstance(examples, list) or not examples:
            raise ValueError(f"Task '{name}' must have a non-empty 'examples' list")
        tasks.append(IOTask(name=str(name), examples=[_coerce_example(e) for e in examples]))
    return tasks


def load_io_tasks(path: str) -> List[IOTask]:
    """Load IO tasks from a YAML file."""
    with open(path, "r") as f:
        data = yaml.safe_load(f)
    if data is None:
        raise ValueError(f"Tasks file is empty: {path}")
    return parse_io_tasks(data)
