"""
Solving many independent Lambert problems.

Every problem gets its own targeter instance, so nothing is shared between
solves. Problems that fail are recorded with the exception that stopped them
and the remaining problems are still solved.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from tqdm import tqdm

from ..exceptions import ConvergenceError, InvalidArgumentError
from .izzo import LambertSolution
from .multi_revolution import MultiRevolutionLambertTargeterIzzo

logger = logging.getLogger(__name__)


@dataclass
class LambertBatchResult:
    """
    Outcome of ``solve_lambert_batch``.

    Attributes
    ----------
    solutions : list
        One entry per problem, in input order: the ``LambertSolution`` or
        None if the problem failed.
    failures : list of tuple
        ``(index, exception)`` for every failed problem.
    """
    solutions: List[Optional[LambertSolution]] = field(default_factory=list)
    failures: List[Tuple[int, Exception]] = field(default_factory=list)

    @property
    def success_count(self):
        return len(self.solutions) - len(self.failures)

    def __len__(self):
        return len(self.solutions)


def solve_lambert_batch(problems, gravitational_parameter, show_progress=False, **targeter_kwargs):
    """
    Solve a sequence of Lambert problems sharing a central body.

    Parameters
    ----------
    problems : iterable of tuple
        ``(position_at_departure, position_at_arrival, time_of_flight)``.
    gravitational_parameter : float
        Gravitational parameter of the central body [m^3 s^-2].
    show_progress : bool, optional
        Display a tqdm progress bar. Default is False.
    **targeter_kwargs
        Passed to ``MultiRevolutionLambertTargeterIzzo`` (for instance
        ``number_of_revolutions``, ``is_right_branch``, ``is_retrograde``,
        ``tolerance``).

    Returns
    -------
    LambertBatchResult
    """
    problems = list(problems)
    iterator = tqdm(problems, desc="Lambert problems") if show_progress else problems

    result = LambertBatchResult()
    for index, (position_at_departure, position_at_arrival, time_of_flight) in enumerate(iterator):
        try:
            targeter = MultiRevolutionLambertTargeterIzzo(
                position_at_departure, position_at_arrival, time_of_flight,
                gravitational_parameter, **targeter_kwargs)
            solution = targeter.solution
        except (InvalidArgumentError, ConvergenceError) as e:
            logger.warning(f"Lambert problem {index} failed: {e}")
            result.solutions.append(None)
            result.failures.append((index, e))
            continue
        result.solutions.append(solution)

    logger.info(f"Solved {result.success_count}/{len(problems)} Lambert problems")
    return result
