from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, Tuple, Dict, List, Optional
from multiprocessing import Pool, cpu_count

from bf_sandbox import fitness
from bf_sandbox.config import get_settings
from bf_sandbox.tasks import IOTask

logger = logging.getLogger(__name__)

# Population scoring: caching and parallel eval. Runs share no state.


@dataclass
class EvalConfig:
    parallel: bool = True
    processes: int = max(1, cpu_count() - 1)

    @classmethod
    def from_settings(cls) -> "EvalConfig":
        settings = get_settings()
        return cls(parallel=settings.parallel, processes=settings.processes)


def evaluate_population(
    programs: List[str],
    eval_fn: Callable[[str], float],
    cache: Dict[str, float] | None = None,
    cfg: Optional[EvalConfig] = None,
) -> Tuple[List[Tuple[str, float]], Dict[str, float]]:
    """Evaluate a list of program strings with caching and optional parallelism.
    Returns (scored, updated_cache) where scored is a list of (program, score).
    Note: eval_fn must be a top-level function or functools.partial of one for spawn.
    """
    cache = {} if cache is None else cache
    cfg = cfg or EvalConfig.from_settings()

    # Each distinct program is evaluated at most once
    to_eval: List[str] = list(dict.fromkeys(p for p in programs if p not in cache))

    if to_eval:
        if cfg.parallel and len(to_eval) > 1 and cfg.processes > 1:
            with Pool(processes=cfg.processes) as pool:
                scores = pool.map(eval_fn, to_eval)
        else:
            scores = [eval_fn(p) for p in to_eval]
        for p, s in zip(to_eval, scores):
            cache[p] = s

    logger.debug("scored %d programs, %d newly evaluated, cache size %d",
                 len(programs), len(to_eval), len(cache))
    scored = [(p, cache[p]) for p in programs]
    return scored, cache


def score_program(task: IOTask, program: str, alpha: Optional[float] = None) -> float:
    """Evaluate a program against an IO task using the default fitness.
    Default uses length-penalized exact score.
    """
    if alpha is None:
        alpha = fitness.DEFAULT_LENGTH_PENALTY_ALPHA
    return fitness.exact_with_length_penalty(task, program, alpha=alpha)
