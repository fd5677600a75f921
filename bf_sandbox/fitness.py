import numpy as np

from bf_sandbox.tasks import IOTask

# Default strength of length penalty used by default fitness
DEFAULT_LENGTH_PENALTY_ALPHA: float = 0.05


def exact_score(task: IOTask, code: str) -> float:
    """Exact match fitness: fraction of examples producing the expected output."""
    if not task.examples:
        return 0.0
    hits = 0
    for inp, exp in task.examples:
        y = task.run(code, inp)
        hits += int(y == exp)
    return hits / len(task.examples)


def _example_error(actual, expected: bytes) -> float:
    """Normalized error in [0, 1] for one example."""
    if actual is None:
        return 1.0
    n = len(expected)
    if n == 0:
        return 0.0 if len(actual) == 0 else 1.0

    errs = np.ones(n)
    m = min(n, len(actual))
    if m:
        a = np.frombuffer(actual[:m], dtype=np.uint8).astype(np.int16)
        e = np.frombuffer(expected[:m], dtype=np.uint8).astype(np.int16)
        d = np.abs(a - e) % 256
        errs[:m] = np.minimum(d, 256 - d) / 128.0
    surplus = max(0, len(actual) - n)
    return min(1.0, (errs.sum() + surplus) / n)


def close_score(task: IOTask, code: str) -> float:
    """Close match fitness: 1 - mean normalized circular byte distance."""
    if not task.examples:
        return 0.0
    errs = [_example_error(task.run(code, inp), exp) for inp, exp in task.examples]
    return float(1.0 - np.mean(errs))


def length_penalty(code: str, alpha: float = DEFAULT_LENGTH_PENALTY_ALPHA) -> float:
    """Compute the length-based penalty term used in default fitness.
    Returns a value in [0, alpha). If alpha<=0, returns 0.0.
    """
    if alpha <= 0.0:
        return 0.0
    return alpha * (len(code) / (len(code) + 32.0))


def exact_with_length_penalty(task: IOTask, code: str, alpha: float = DEFAULT_LENGTH_PENALTY_ALPHA) -> float:
    """Exact-match fitness minus alpha * normalized program length."""
    base = exact_score(task, code)
    if alpha <= 0:
        return base
    return max(0.0, base - length_penalty(code, alpha))
