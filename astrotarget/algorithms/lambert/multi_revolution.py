"""
Multi-revolution Lambert targeting with Izzo's algorithm.

For N complete revolutions the time of flight T(x) has a single minimum
T_min(N) at x_min(N) in (-1, 1). Transfers with T* > T_min(N) have two
solutions: the left branch in (-1, x_min) and the right branch in
(x_min, 1). T(x) is convex for N >= 1, so Newton-Raphson on T(x) - T*
bracketed by the branch interval converges without crossing over to the
other branch.
"""

import logging
import math

from ..exceptions import InvalidArgumentError
from ..root_finders.newton_raphson import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_TOLERANCE,
    FunctionWithDerivative,
    NewtonRaphson,
)
from .izzo import ZeroRevolutionLambertTargeterIzzo
from .time_of_flight import (
    compute_time_of_flight,
    multi_revolution_initial_guesses,
    time_of_flight_derivatives,
)

logger = logging.getLogger(__name__)


def _check_number_of_revolutions(number_of_revolutions):
    if isinstance(number_of_revolutions, bool) or int(number_of_revolutions) != number_of_revolutions:
        raise InvalidArgumentError(
            f"Number of revolutions must be an integer, got {number_of_revolutions!r}")
    if number_of_revolutions < 0:
        raise InvalidArgumentError(
            f"Number of revolutions must be non-negative, got {number_of_revolutions}")
    return int(number_of_revolutions)


class MultiRevolutionLambertTargeterIzzo(ZeroRevolutionLambertTargeterIzzo):
    """
    Lambert targeter for transfers with complete revolutions.

    Parameters
    ----------
    position_at_departure, position_at_arrival : array_like
        Cartesian positions [m].
    time_of_flight : float
        Transfer time, strictly positive [s].
    gravitational_parameter : float
        Gravitational parameter of the central body [m^3 s^-2].
    number_of_revolutions : int, optional
        Complete revolutions before arrival. Default is 0, which gives the
        same solution as ``ZeroRevolutionLambertTargeterIzzo``.
    is_right_branch : bool, optional
        Solve the right (x > x_min) branch instead of the left one. Ignored
        for zero revolutions. Default is False.
    is_retrograde : bool, optional
        Default is False.
    tolerance : float, optional
        Default is 1e-9.
    max_iterations : int, optional
        Default is 50.

    Raises
    ------
    InvalidArgumentError
        For a negative revolution count (at construction) or one above
        ``maximum_number_of_revolutions`` (on solve).
    """

    def __init__(self, position_at_departure, position_at_arrival, time_of_flight,
                 gravitational_parameter, number_of_revolutions=0, is_right_branch=False,
                 is_retrograde=False, tolerance=DEFAULT_TOLERANCE,
                 max_iterations=DEFAULT_MAX_ITERATIONS):
        super().__init__(position_at_departure, position_at_arrival, time_of_flight,
                         gravitational_parameter, is_retrograde, tolerance, max_iterations)
        self.number_of_revolutions = _check_number_of_revolutions(number_of_revolutions)
        self.is_right_branch = bool(is_right_branch)

        self._maximum_number_of_revolutions = None
        self._minimum_time_parameters = {}

    def __repr__(self):
        return (f"{super().__repr__()[:-1]}, revolutions={self.number_of_revolutions}, "
                f"right_branch={self.is_right_branch})")

    @property
    def maximum_number_of_revolutions(self):
        """Largest revolution count for which a solution exists, computed once."""
        if self._maximum_number_of_revolutions is None:
            self._maximum_number_of_revolutions = self._compute_maximum_number_of_revolutions()
        return self._maximum_number_of_revolutions

    def get_maximum_number_of_revolutions(self):
        return self.maximum_number_of_revolutions

    def compute_for_revolutions_and_branch(self, number_of_revolutions, is_right_branch):
        """
        Re-solve the same problem for another revolution count or branch.

        The geometry and the minimum-time parameters already computed are
        reused.

        Returns
        -------
        LambertSolution
            The new solution, also exposed through the solution properties.
        """
        number_of_revolutions = _check_number_of_revolutions(number_of_revolutions)
        solution = self._solve_for(number_of_revolutions, bool(is_right_branch))
        self.number_of_revolutions = number_of_revolutions
        self.is_right_branch = bool(is_right_branch)
        self._solution = solution
        return solution

    def solve_all(self):
        """
        Every solution of the problem.

        Returns
        -------
        list of LambertSolution
            The single-arc solution followed by the left and right branch
            solutions for 1 to ``maximum_number_of_revolutions`` revolutions.
        """
        solutions = [self._solve_for(0, False)]
        for revolutions in range(1, self.maximum_number_of_revolutions + 1):
            solutions.append(self._solve_for(revolutions, False))
            solutions.append(self._solve_for(revolutions, True))
        return solutions

    def _solve(self):
        return self._solve_for(self.number_of_revolutions, self.is_right_branch)

    def _solve_for(self, number_of_revolutions, is_right_branch):
        if number_of_revolutions == 0:
            return self._build_solution(self._solve_zero_revolution(), 0, None)

        maximum = self.maximum_number_of_revolutions
        if number_of_revolutions > maximum:
            raise InvalidArgumentError(
                f"No solution with {number_of_revolutions} revolutions exists for this time of "
                f"flight; the maximum number of revolutions is {maximum}"
            )

        x_parameter = self._solve_multi_revolution(number_of_revolutions, is_right_branch)
        return self._build_solution(x_parameter, number_of_revolutions, is_right_branch)

    def _compute_maximum_number_of_revolutions(self):
        lambda_parameter = self.geometry.lambda_parameter
        target = self.geometry.normalized_time_of_flight

        maximum = int(math.floor(target / math.pi))
        t00 = math.acos(lambda_parameter) + lambda_parameter * math.sqrt(1.0 - lambda_parameter**2)
        if maximum > 0 and target < t00 + maximum * math.pi:
            x_minimum, time_minimum = self._minimum_time_parameter(maximum)
            if time_minimum > target:
                maximum -= 1

        logger.debug(f"Maximum number of revolutions: {maximum} (T = {target!r})")
        return maximum

    def _minimum_time_parameter(self, number_of_revolutions):
        """
        Locate the minimum of T(x) for ``number_of_revolutions`` (cached).

        Returns
        -------
        tuple of float
            (x_min, T_min)
        """
        if number_of_revolutions not in self._minimum_time_parameters:
            lambda_parameter = self.geometry.lambda_parameter

            def first_derivative(x):
                return time_of_flight_derivatives(x, lambda_parameter, number_of_revolutions)[1]

            def second_derivative(x):
                return time_of_flight_derivatives(x, lambda_parameter, number_of_revolutions)[2]

            solver = NewtonRaphson(self.tolerance, self.max_iterations)
            x_minimum = solver.execute(
                FunctionWithDerivative(first_derivative, second_derivative), 0.0,
                bounds=(-1.0, 1.0))
            time_minimum = compute_time_of_flight(x_minimum, lambda_parameter, number_of_revolutions)
            self._minimum_time_parameters[number_of_revolutions] = (x_minimum, time_minimum)

        return self._minimum_time_parameters[number_of_revolutions]

    def _solve_multi_revolution(self, number_of_revolutions, is_right_branch):
        """Solve T(x) = T* on one branch, bracketed by the minimum-time parameter."""
        lambda_parameter = self.geometry.lambda_parameter
        target = self.geometry.normalized_time_of_flight

        x_minimum, _ = self._minimum_time_parameter(number_of_revolutions)
        left_guess, right_guess = multi_revolution_initial_guesses(target, number_of_revolutions)

        if is_right_branch:
            x_initial = right_guess
            bounds = (x_minimum, 1.0)
        else:
            x_initial = left_guess
            bounds = (-1.0, x_minimum)
        if not bounds[0] < x_initial < bounds[1]:
            x_initial = 0.5 * (x_minimum + (1.0 if is_right_branch else -1.0))

        def function(x):
            return compute_time_of_flight(x, lambda_parameter, number_of_revolutions) - target

        def derivative(x):
            return time_of_flight_derivatives(x, lambda_parameter, number_of_revolutions)[1]

        x_parameter = self._root_finder.execute(FunctionWithDerivative(function, derivative),
                                                x_initial, bounds=bounds)
        logger.debug(f"{number_of_revolutions}-revolution Lambert solve "
                     f"({'right' if is_right_branch else 'left'} branch): x = {x_parameter!r} "
                     f"in {self._root_finder.last_iteration_count} iterations")
        return x_parameter
