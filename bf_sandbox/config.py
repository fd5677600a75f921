"""Environment-driven defaults for the fitness evaluation layer.

The interpreter core never reads these; its own defaults are fixed constants.
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from multiprocessing import cpu_count

from dotenv import find_dotenv, load_dotenv

from bf_sandbox.interpreter import DEFAULT_MAX_OUTPUT, DEFAULT_MAX_STEPS


@dataclass(frozen=True)
class RunnerSettings:
    step_limit: int = DEFAULT_MAX_STEPS
    output_limit: int = DEFAULT_MAX_OUTPUT
    parallel: bool = True
    processes: int = max(1, cpu_count() - 1)


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    return value


def _bool_env(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


def load_settings() -> RunnerSettings:
    """Read BF_* settings from the environment (and a .env file if present)."""
    load_dotenv(find_dotenv(usecwd=True))
    defaults = RunnerSettings()
    return RunnerSettings(
        step_limit=_int_env("BF_STEP_LIMIT", defaults.step_limit),
        output_limit=_int_env("BF_OUTPUT_LIMIT", defaults.output_limit),
        parallel=_bool_env("BF_EVAL_PARALLEL", defaults.parallel),
        processes=max(1, _int_env("BF_EVAL_PROCESSES", defaults.processes)),
    )


@lru_cache(maxsize=None)
def get_settings() -> RunnerSettings:
    """load_settings(), read once per process. get_settings.cache_clear() forces a re-read."""
    return load_settings()
