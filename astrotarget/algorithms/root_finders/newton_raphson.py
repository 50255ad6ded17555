"""
Newton-Raphson root finding for scalar equations.

The solver is decoupled from its use sites: any object exposing
``evaluate(x)`` and ``evaluate_derivative(x)`` can be handed to
``NewtonRaphson.execute``. Call sites that only have two callables (for
instance closures capturing the state of a Lambert problem or of a
three-body system) wrap them in ``FunctionWithDerivative``, or call the
functional form ``newton_raphson`` directly.

An optional open bracket keeps the iterates inside a known basin: a step that
leaves the bracket is replaced by the midpoint between the current iterate and
the violated bound.
"""

import logging
import math
from typing import Callable, Optional, Protocol, Tuple

from ..exceptions import ConvergenceError, VanishingDerivativeError

logger = logging.getLogger(__name__)

#: float: Default absolute tolerance on the change of the iterate
DEFAULT_TOLERANCE = 1e-9

#: int: Default maximum number of Newton-Raphson iterations
DEFAULT_MAX_ITERATIONS = 50


class RootFunction(Protocol):
    """Anything the Newton-Raphson solver can find a root of."""

    def evaluate(self, x: float) -> float:
        ...

    def evaluate_derivative(self, x: float) -> float:
        ...


class FunctionWithDerivative:
    """
    Pair a scalar function with its first derivative.

    Parameters
    ----------
    function : callable
        g(x), returning a float.
    derivative : callable
        g'(x), returning a float.
    """

    def __init__(self, function: Callable[[float], float],
                 derivative: Callable[[float], float]):
        self._function = function
        self._derivative = derivative

    def evaluate(self, x: float) -> float:
        return self._function(x)

    def evaluate_derivative(self, x: float) -> float:
        return self._derivative(x)


class NewtonRaphson:
    """
    Newton-Raphson root finder.

    Parameters
    ----------
    tolerance : float, optional
        Convergence is declared when ``|x_{k+1} - x_k| < tolerance``.
        Default is 1e-9.
    max_iterations : int, optional
        Maximum number of iterations. Default is 50.

    Notes
    -----
    Instances hold the iteration count of their last run and are therefore
    not meant to be shared between threads.
    """

    def __init__(self, tolerance=DEFAULT_TOLERANCE, max_iterations=DEFAULT_MAX_ITERATIONS):
        if tolerance <= 0.0:
            raise ValueError(f"Tolerance must be positive, got {tolerance}")
        if max_iterations < 1:
            raise ValueError(f"Maximum number of iterations must be at least 1, got {max_iterations}")
        self.tolerance = tolerance
        self.max_iterations = max_iterations
        self.last_iteration_count = 0

    def execute(self, root_function: RootFunction, initial_guess: float,
                bounds: Optional[Tuple[float, float]] = None) -> float:
        """
        Find a root of ``root_function`` starting from ``initial_guess``.

        Parameters
        ----------
        root_function : RootFunction
            Object exposing ``evaluate`` and ``evaluate_derivative``.
        initial_guess : float
            Starting iterate.
        bounds : tuple of float, optional
            Open interval ``(lower, upper)`` the iterates must stay in.
            Either bound may be infinite.

        Returns
        -------
        float
            The converged root.

        Raises
        ------
        VanishingDerivativeError
            If the derivative is zero or not finite at an iterate.
        ConvergenceError
            If the iteration cap is reached or an iterate is not finite.
        """
        if bounds is not None:
            lower, upper = bounds
            if not lower < initial_guess < upper:
                raise ValueError(
                    f"Initial guess {initial_guess} lies outside bounds ({lower}, {upper})"
                )

        x = float(initial_guess)
        for iteration in range(1, self.max_iterations + 1):
            value = root_function.evaluate(x)
            if value == 0.0:
                self.last_iteration_count = iteration
                return x

            derivative = root_function.evaluate_derivative(x)
            if derivative == 0.0 or not math.isfinite(derivative):
                self.last_iteration_count = iteration
                raise VanishingDerivativeError(
                    f"Derivative vanished at x = {x!r} (iteration {iteration})",
                    iterations=iteration, last_value=x)

            x_next = x - value / derivative
            if bounds is not None:
                x_next = _clip_to_bounds(x, x_next, bounds)

            if not math.isfinite(x_next):
                self.last_iteration_count = iteration
                raise ConvergenceError(
                    f"Newton-Raphson produced a non-finite iterate from x = {x!r}",
                    iterations=iteration, last_value=x)

            if abs(x_next - x) < self.tolerance:
                self.last_iteration_count = iteration
                logger.debug(f"Newton-Raphson converged to {x_next!r} in {iteration} iterations")
                return x_next

            x = x_next

        self.last_iteration_count = self.max_iterations
        raise ConvergenceError(
            f"Newton-Raphson did not converge in {self.max_iterations} iterations "
            f"(tolerance {self.tolerance})",
            iterations=self.max_iterations, last_value=x)


def _clip_to_bounds(x, x_next, bounds):
    """Replace a step leaving ``bounds`` by the midpoint towards the violated bound."""
    lower, upper = bounds
    # Infinite bounds can only be crossed by a non-finite step, caught by the caller
    if x_next <= lower and math.isfinite(lower):
        return 0.5 * (x + lower)
    if x_next >= upper and math.isfinite(upper):
        return 0.5 * (x + upper)
    return x_next


def newton_raphson(function, derivative, initial_guess, tolerance=DEFAULT_TOLERANCE,
                   max_iterations=DEFAULT_MAX_ITERATIONS, bounds=None):
    """
    Find a root of ``function`` with Newton-Raphson iterations.

    Parameters
    ----------
    function : callable
        g(x).
    derivative : callable
        g'(x).
    initial_guess : float
        Starting iterate.
    tolerance : float, optional
        Convergence tolerance on the iterate change. Default is 1e-9.
    max_iterations : int, optional
        Iteration cap. Default is 50.
    bounds : tuple of float, optional
        Open interval the iterates must stay in.

    Returns
    -------
    float
        The converged root.
    """
    solver = NewtonRaphson(tolerance, max_iterations)
    return solver.execute(FunctionWithDerivative(function, derivative), initial_guess, bounds)
