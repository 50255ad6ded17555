"""
Lambert targeting with Izzo's algorithm.

Given two positions, a time of flight and the gravitational parameter of the
central body, the targeter finds the conic arc connecting the positions in
that time and exposes its velocities at both ends and its semi-major axis.

The problem is non-dimensionalised (see ``geometry``), the time-of-flight
equation T(x) = T* is solved with Newton-Raphson in the variable
xi = log(1 + x) on log T, which is nearly linear over the whole elliptic and
hyperbolic range, and the velocities are rebuilt from the converged x.

Solving is lazy: construction validates the inputs only. The first access to
a solution property runs the solver and memoises the result; later accesses
reuse it. Targeters are therefore stateful and must not be shared between
threads without external synchronisation.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..root_finders.newton_raphson import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_TOLERANCE,
    FunctionWithDerivative,
    NewtonRaphson,
)
from .geometry import compute_lambert_geometry, validate_problem
from .time_of_flight import (
    compute_time_of_flight,
    time_of_flight_derivatives,
    zero_revolution_initial_guess,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class LambertSolution:
    """
    One solution of a Lambert problem.

    Attributes
    ----------
    x_parameter : float
        Converged universal variable.
    number_of_revolutions : int
        Complete revolutions before arrival.
    is_right_branch : bool or None
        Branch of a multi-revolution solution, None for single arcs.
    semi_major_axis : float
        Negative for hyperbolic transfers, infinite for parabolic ones [m].
    radial_velocity_at_departure, radial_velocity_at_arrival : float
        [m/s]
    transverse_velocity_at_departure, transverse_velocity_at_arrival : float
        [m/s]
    inertial_velocity_at_departure, inertial_velocity_at_arrival : ndarray
        Cartesian velocities [m/s].
    iterations : int
        Newton-Raphson iterations used.
    """
    x_parameter: float
    number_of_revolutions: int
    is_right_branch: Optional[bool]
    semi_major_axis: float
    radial_velocity_at_departure: float
    radial_velocity_at_arrival: float
    transverse_velocity_at_departure: float
    transverse_velocity_at_arrival: float
    inertial_velocity_at_departure: np.ndarray
    inertial_velocity_at_arrival: np.ndarray
    iterations: int


class ZeroRevolutionLambertTargeterIzzo:
    """
    Single-arc (less than one revolution) Lambert targeter.

    Parameters
    ----------
    position_at_departure : array_like
        Cartesian position at departure [m].
    position_at_arrival : array_like
        Cartesian position at arrival [m].
    time_of_flight : float
        Transfer time, strictly positive [s].
    gravitational_parameter : float
        Gravitational parameter of the central body, strictly positive [m^3 s^-2].
    is_retrograde : bool, optional
        Transfer clockwise about the z-axis. Default is False.
    tolerance : float, optional
        Newton-Raphson tolerance. Default is 1e-9.
    max_iterations : int, optional
        Newton-Raphson iteration cap. Default is 50.

    Raises
    ------
    InvalidArgumentError
        At construction for invalid inputs, on first solve for a zero
        transfer angle.
    ConvergenceError
        On first solve if the root finder fails.
    """

    def __init__(self, position_at_departure, position_at_arrival, time_of_flight,
                 gravitational_parameter, is_retrograde=False,
                 tolerance=DEFAULT_TOLERANCE, max_iterations=DEFAULT_MAX_ITERATIONS):
        (self._position_at_departure, self._position_at_arrival,
         self.time_of_flight, self.gravitational_parameter) = validate_problem(
            position_at_departure, position_at_arrival, time_of_flight, gravitational_parameter)
        self.is_retrograde = bool(is_retrograde)
        self._root_finder = NewtonRaphson(tolerance, max_iterations)

        self._geometry = None
        self._solution = None

    def __repr__(self):
        return (f"{self.__class__.__name__}(r1={self._position_at_departure}, "
                f"r2={self._position_at_arrival}, tof={self.time_of_flight}, "
                f"mu={self.gravitational_parameter}, retrograde={self.is_retrograde})")

    @property
    def position_at_departure(self):
        return self._position_at_departure.copy()

    @property
    def position_at_arrival(self):
        return self._position_at_arrival.copy()

    @property
    def tolerance(self):
        return self._root_finder.tolerance

    @property
    def max_iterations(self):
        return self._root_finder.max_iterations

    @property
    def geometry(self):
        """Non-dimensional constants of the problem, computed once."""
        if self._geometry is None:
            self._geometry = compute_lambert_geometry(
                self._position_at_departure, self._position_at_arrival, self.time_of_flight,
                self.gravitational_parameter, self.is_retrograde)
        return self._geometry

    @property
    def solution(self):
        """The memoised ``LambertSolution``; solves on first access."""
        if self._solution is None:
            self._solution = self._solve()
        return self._solution

    @property
    def semi_major_axis(self):
        return self.solution.semi_major_axis

    @property
    def radial_velocity_at_departure(self):
        return self.solution.radial_velocity_at_departure

    @property
    def radial_velocity_at_arrival(self):
        return self.solution.radial_velocity_at_arrival

    @property
    def transverse_velocity_at_departure(self):
        return self.solution.transverse_velocity_at_departure

    @property
    def transverse_velocity_at_arrival(self):
        return self.solution.transverse_velocity_at_arrival

    @property
    def inertial_velocity_at_departure(self):
        return self.solution.inertial_velocity_at_departure.copy()

    @property
    def inertial_velocity_at_arrival(self):
        return self.solution.inertial_velocity_at_arrival.copy()

    def get_inertial_velocity_vectors(self):
        """Return (velocity at departure, velocity at arrival)."""
        return self.inertial_velocity_at_departure, self.inertial_velocity_at_arrival

    def _solve(self):
        x_parameter = self._solve_zero_revolution()
        return self._build_solution(x_parameter, 0, None)

    def _solve_zero_revolution(self):
        """Solve log T(x) = log T* for a single arc, in xi = log(1 + x)."""
        lambda_parameter = self.geometry.lambda_parameter
        target = self.geometry.normalized_time_of_flight
        log_target = math.log(target)

        def function(xi):
            x = math.expm1(xi)
            return math.log(compute_time_of_flight(x, lambda_parameter, 0)) - log_target

        def derivative(xi):
            x = math.expm1(xi)
            time_of_flight, first, _ = time_of_flight_derivatives(x, lambda_parameter, 0)
            return first * (1.0 + x) / time_of_flight

        x_initial = zero_revolution_initial_guess(target, lambda_parameter)
        xi = self._root_finder.execute(FunctionWithDerivative(function, derivative),
                                       math.log1p(x_initial))
        x_parameter = math.expm1(xi)
        logger.debug(f"Zero-revolution Lambert solve: x = {x_parameter!r} from "
                     f"x0 = {x_initial!r} in {self._root_finder.last_iteration_count} iterations")
        return x_parameter

    def _build_solution(self, x_parameter, number_of_revolutions, is_right_branch):
        """Rebuild the dimensional velocities and semi-major axis from x."""
        geometry = self.geometry
        lambda_parameter = geometry.lambda_parameter
        r1 = geometry.radius_at_departure
        r2 = geometry.radius_at_arrival

        gamma = math.sqrt(self.gravitational_parameter * geometry.semi_perimeter / 2.0)
        rho = (r1 - r2) / geometry.chord
        sigma = math.sqrt(max(0.0, 1.0 - rho * rho))
        y = math.sqrt(1.0 - lambda_parameter**2 + lambda_parameter**2 * x_parameter**2)

        radial_velocity_at_departure = gamma * ((lambda_parameter * y - x_parameter)
                                                - rho * (lambda_parameter * y + x_parameter)) / r1
        radial_velocity_at_arrival = -gamma * ((lambda_parameter * y - x_parameter)
                                               + rho * (lambda_parameter * y + x_parameter)) / r2
        transverse_velocity = gamma * sigma * (y + lambda_parameter * x_parameter)
        transverse_velocity_at_departure = transverse_velocity / r1
        transverse_velocity_at_arrival = transverse_velocity / r2

        inertial_velocity_at_departure = (
            radial_velocity_at_departure * geometry.radial_unit_vector_at_departure
            + transverse_velocity_at_departure * geometry.transverse_unit_vector_at_departure)
        inertial_velocity_at_arrival = (
            radial_velocity_at_arrival * geometry.radial_unit_vector_at_arrival
            + transverse_velocity_at_arrival * geometry.transverse_unit_vector_at_arrival)

        one_minus_x2 = 1.0 - x_parameter**2
        if one_minus_x2 == 0.0:
            semi_major_axis = math.inf
        else:
            semi_major_axis = geometry.semi_perimeter / (2.0 * one_minus_x2)

        return LambertSolution(
            x_parameter=x_parameter,
            number_of_revolutions=number_of_revolutions,
            is_right_branch=is_right_branch,
            semi_major_axis=semi_major_axis,
            radial_velocity_at_departure=radial_velocity_at_departure,
            radial_velocity_at_arrival=radial_velocity_at_arrival,
            transverse_velocity_at_departure=transverse_velocity_at_departure,
            transverse_velocity_at_arrival=transverse_velocity_at_arrival,
            inertial_velocity_at_departure=inertial_velocity_at_departure,
            inertial_velocity_at_arrival=inertial_velocity_at_arrival,
            iterations=self._root_finder.last_iteration_count,
        )


LambertTargeterIzzo = ZeroRevolutionLambertTargeterIzzo
