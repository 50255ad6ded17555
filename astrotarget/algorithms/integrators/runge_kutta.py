"""
Variable step-size Runge-Kutta integration with embedded error estimation.

Each step evaluates an embedded pair (see ``CoefficientSet``) and compares
the lower- and higher-order solutions. The step is accepted when the scaled
truncation error does not exceed one; otherwise it is retried with the
reduced step size the error control proposes. The step size proposed after
an accepted step becomes the next nominal step.
"""

import logging
import math

import numpy as np

from ..exceptions import MinimumStepSizeExceededError
from .coefficients import CoefficientSet, combine_stages, get_coefficients, runge_kutta_stages
from .integrator import _SteppingIntegrator

logger = logging.getLogger(__name__)

#: float: Fraction of the optimal step size actually proposed
DEFAULT_SAFETY_FACTOR = 0.8

#: float: Largest ratio between consecutive step sizes
DEFAULT_MAXIMUM_FACTOR_INCREASE = 4.0

#: float: Smallest ratio between consecutive step sizes
DEFAULT_MINIMUM_FACTOR_DECREASE = 0.1


class RungeKuttaVariableStepSizeIntegrator(_SteppingIntegrator):
    """
    Embedded Runge-Kutta integrator with step-size control.

    Parameters
    ----------
    coefficients : CoefficientSet or RungeKuttaCoefficients
        Embedded pair to use.
    state_derivative_function : callable
        f(t, y) returning dy/dt.
    interval_start : float
        Initial value of the independent variable.
    initial_state : array_like
        State at ``interval_start``.
    minimum_step_size : float
        Smallest step size magnitude allowed.
    maximum_step_size : float
        Largest step size magnitude allowed.
    relative_error_tolerance : float, optional
        Relative tolerance on each state component. Default is 1e-12.
    absolute_error_tolerance : float, optional
        Absolute tolerance on each state component. Default is 1e-12.
    safety_factor : float, optional
        Default is 0.8.
    maximum_factor_increase : float, optional
        Default is 4.0.
    minimum_factor_decrease : float, optional
        Default is 0.1.

    Raises
    ------
    MinimumStepSizeExceededError
        From ``perform_integration_step`` when a rejected step would have to
        shrink below ``minimum_step_size``.
    """

    def __init__(self, coefficients, state_derivative_function, interval_start, initial_state,
                 minimum_step_size, maximum_step_size,
                 relative_error_tolerance=1e-12, absolute_error_tolerance=1e-12,
                 safety_factor=DEFAULT_SAFETY_FACTOR,
                 maximum_factor_increase=DEFAULT_MAXIMUM_FACTOR_INCREASE,
                 minimum_factor_decrease=DEFAULT_MINIMUM_FACTOR_DECREASE):
        super().__init__(state_derivative_function, interval_start, initial_state)

        if isinstance(coefficients, CoefficientSet):
            coefficients = get_coefficients(coefficients)
        if not coefficients.is_embedded:
            raise ValueError("Variable step-size integration needs an embedded coefficient set")
        if not 0.0 < minimum_step_size <= maximum_step_size:
            raise ValueError(
                f"Step size limits must satisfy 0 < minimum ({minimum_step_size}) "
                f"<= maximum ({maximum_step_size})"
            )
        if relative_error_tolerance < 0.0 or absolute_error_tolerance < 0.0 or \
                relative_error_tolerance + absolute_error_tolerance == 0.0:
            raise ValueError("Error tolerances must be non-negative and not both zero")
        if not 0.0 < minimum_factor_decrease <= 1.0 <= maximum_factor_increase:
            raise ValueError("Step size factors must satisfy 0 < decrease <= 1 <= increase")

        self.coefficients = coefficients
        self.minimum_step_size = float(minimum_step_size)
        self.maximum_step_size = float(maximum_step_size)
        self.relative_error_tolerance = relative_error_tolerance
        self.absolute_error_tolerance = absolute_error_tolerance
        self.safety_factor = safety_factor
        self.maximum_factor_increase = maximum_factor_increase
        self.minimum_factor_decrease = minimum_factor_decrease

        self._next_step_size = None
        self._last_next_step_size = None
        self.number_of_rejected_steps = 0

    @property
    def next_step_size(self):
        """Step size proposed by the error control after the last accepted step."""
        return self._next_step_size

    def _following_step_size(self, step_size):
        return self._next_step_size

    def rollback_to_previous_state(self):
        """Undo the last step, restoring the step size proposed before it."""
        if not super().rollback_to_previous_state():
            return False
        self._next_step_size = self._last_next_step_size
        return True

    def perform_integration_step(self, step_size):
        """
        Take one accepted step, starting from a trial step of ``step_size``.

        The step actually taken may be smaller than ``step_size``; it is
        available afterwards as ``step_size``.

        Returns
        -------
        ndarray
            State after the accepted step.
        """
        trial_step = float(step_size)
        if trial_step == 0.0:
            raise ValueError("Step size must be non-zero")
        if abs(trial_step) > self.maximum_step_size:
            trial_step = math.copysign(self.maximum_step_size, trial_step)

        while True:
            stages = runge_kutta_stages(self.state_derivative_function, self._current_interval,
                                        self._current_state, trial_step, self.coefficients)
            lower_order_estimate = combine_stages(self._current_state, trial_step, stages,
                                                  self.coefficients.b_coefficients[0])
            higher_order_estimate = combine_stages(self._current_state, trial_step, stages,
                                                   self.coefficients.b_coefficients[1])

            accepted, proposed_step = self._compute_next_step_size(
                lower_order_estimate, higher_order_estimate, trial_step)
            if accepted:
                break

            self.number_of_rejected_steps += 1
            logger.debug(f"Rejected step {trial_step:.6e} at t = {self._current_interval!r}, "
                         f"retrying with {proposed_step:.6e}")
            trial_step = proposed_step

        new_state = higher_order_estimate if self.coefficients.integrate_higher_order \
            else lower_order_estimate
        self._commit_step(new_state, trial_step)
        self._last_next_step_size = self._next_step_size
        self._next_step_size = proposed_step
        return self.current_state

    def _compute_next_step_size(self, lower_order_estimate, higher_order_estimate, step_size):
        """
        Error control: decide acceptance and propose the next step size.

        Returns
        -------
        tuple
            (accepted, proposed_step_size)
        """
        truncation_error = np.abs(higher_order_estimate - lower_order_estimate)
        allowed_error = np.abs(higher_order_estimate) * self.relative_error_tolerance \
            + self.absolute_error_tolerance
        with np.errstate(divide="ignore", invalid="ignore"):
            relative_error = np.max(np.where(truncation_error == 0.0, 0.0,
                                             truncation_error / allowed_error))

        if not np.isfinite(relative_error):
            # Non-finite estimates are treated as the worst error possible
            factor = self.minimum_factor_decrease
            accepted = False
        elif relative_error == 0.0:
            factor = self.maximum_factor_increase
            accepted = True
        else:
            factor = self.safety_factor * (1.0 / relative_error) ** (1.0 / self.coefficients.higher_order)
            factor = min(max(factor, self.minimum_factor_decrease), self.maximum_factor_increase)
            accepted = relative_error <= 1.0

        proposed_step = factor * step_size

        if abs(proposed_step) > self.maximum_step_size:
            proposed_step = math.copysign(self.maximum_step_size, step_size)
        elif abs(proposed_step) < self.minimum_step_size:
            if not accepted:
                raise MinimumStepSizeExceededError(self.minimum_step_size, abs(proposed_step))
            # A clipped final step may legitimately be tiny
            proposed_step = math.copysign(self.minimum_step_size, step_size)

        return accepted, proposed_step
