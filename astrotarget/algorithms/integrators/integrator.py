"""
Fixed step-size numerical integration of first-order ODE systems.

The integrator advances a state ``y`` in the independent variable ``t`` given
a state derivative function ``f(t, y)``. The update rule is chosen with the
``IntegrationScheme`` enumeration; every scheme is an explicit Runge-Kutta
tableau applied by the same stage routine, so adding a scheme never changes
the public contract.

The integrator keeps the state before its last step so that a step can be
undone once with ``rollback_to_previous_state``. Instances are stateful and
must not be shared between threads without external synchronisation.
"""

import logging

import numpy as np

from .coefficients import IntegrationScheme, combine_stages, get_coefficients, runge_kutta_stages

logger = logging.getLogger(__name__)


class _SteppingIntegrator:
    """
    State bookkeeping shared by the fixed and variable step-size integrators.

    Subclasses provide ``perform_integration_step(step_size)``, which must
    call ``_commit_step`` with the new state and the step actually taken, and
    may override ``_following_step_size`` to drive ``integrate_to``.
    """

    def __init__(self, state_derivative_function, interval_start, initial_state):
        if not callable(state_derivative_function):
            raise TypeError("state_derivative_function must be callable as f(t, y)")
        self.state_derivative_function = state_derivative_function
        self._current_interval = float(interval_start)
        self._current_state = np.array(initial_state, dtype=np.float64)
        self._last_interval = self._current_interval
        self._last_state = self._current_state.copy()
        self._step_size = 0.0
        self._can_rollback = False

    @property
    def current_state(self):
        """Copy of the state at ``current_interval``."""
        return self._current_state.copy()

    @property
    def current_interval(self):
        """Current value of the independent variable."""
        return self._current_interval

    @property
    def step_size(self):
        """Size of the last step taken (0.0 before the first step)."""
        return self._step_size

    def get_current_state(self):
        return self.current_state

    def get_current_interval(self):
        return self.current_interval

    def _commit_step(self, new_state, step_size):
        self._last_interval = self._current_interval
        self._last_state = self._current_state
        self._current_interval = self._current_interval + step_size
        self._current_state = new_state
        self._step_size = step_size
        self._can_rollback = True

    def _following_step_size(self, step_size):
        return step_size

    def rollback_to_previous_state(self):
        """
        Undo the last integration step.

        Returns
        -------
        bool
            True if the state before the last step was restored, False if no
            step has been taken since construction or since the previous
            rollback (nothing is changed in that case).
        """
        if not self._can_rollback:
            return False
        self._current_interval = self._last_interval
        self._current_state = self._last_state.copy()
        self._can_rollback = False
        return True

    def integrate_to(self, interval_end, step_size):
        """
        Integrate up to ``interval_end`` and return the state there.

        Steps of ``step_size`` are taken while they fit; the final step is
        shortened so that the end value is reached exactly and never
        overshot. The sign of ``step_size`` is ignored: the direction is set
        by ``interval_end`` relative to ``current_interval``.

        Parameters
        ----------
        interval_end : float
            Value of the independent variable to integrate to.
        step_size : float
            Nominal (initial, for variable step-size integrators) step size.

        Returns
        -------
        ndarray
            State at ``interval_end``.
        """
        interval_end = float(interval_end)
        if step_size == 0.0 or not np.isfinite(step_size):
            raise ValueError(f"Step size must be finite and non-zero, got {step_size}")

        direction = 1.0 if interval_end >= self._current_interval else -1.0
        step = direction * abs(step_size)
        number_of_steps = 0

        while True:
            remaining = interval_end - self._current_interval
            if abs(remaining) <= np.finfo(np.float64).eps * abs(interval_end):
                break

            if abs(step) >= abs(remaining):
                self.perform_integration_step(remaining)
                number_of_steps += 1
                if self._step_size == remaining:
                    break
                # Variable step-size integrators may have shortened the last step
                step = self._following_step_size(self._step_size)
            else:
                self.perform_integration_step(step)
                number_of_steps += 1
                step = self._following_step_size(self._step_size)

        self._current_interval = interval_end
        logger.debug(f"Integrated to t = {interval_end!r} in {number_of_steps} steps")
        return self.current_state


class NumericalIntegrator(_SteppingIntegrator):
    """
    Fixed step-size explicit integrator.

    Parameters
    ----------
    state_derivative_function : callable
        f(t, y) returning dy/dt with the shape of the state.
    interval_start : float
        Initial value of the independent variable.
    initial_state : array_like
        State at ``interval_start``.
    integration_scheme : IntegrationScheme, optional
        Update rule. Default is ``IntegrationScheme.EULER``.

    Notes
    -----
    Derivative outputs are not validated: a NaN or Inf returned by
    ``state_derivative_function`` propagates into the state.

    Examples
    --------
    >>> integrator = NumericalIntegrator(lambda t, y: -y, 0.0, [1.0])
    >>> integrator.perform_integration_step(0.1)
    array([0.9])
    """

    def __init__(self, state_derivative_function, interval_start, initial_state,
                 integration_scheme=IntegrationScheme.EULER):
        super().__init__(state_derivative_function, interval_start, initial_state)
        self.integration_scheme = IntegrationScheme(integration_scheme)
        self._coefficients = get_coefficients(self.integration_scheme)

    def perform_integration_step(self, step_size):
        """
        Advance the state by a single step.

        Parameters
        ----------
        step_size : float
            Step in the independent variable; negative values integrate backwards.

        Returns
        -------
        ndarray
            State after the step.
        """
        stages = runge_kutta_stages(self.state_derivative_function, self._current_interval,
                                    self._current_state, step_size, self._coefficients)
        new_state = combine_stages(self._current_state, step_size, stages,
                                   self._coefficients.b_coefficients[0])
        self._commit_step(new_state, step_size)
        return self.current_state


class EulerIntegrator(NumericalIntegrator):
    """Forward Euler integrator, ``y_{n+1} = y_n + h f(t_n, y_n)``."""

    def __init__(self, state_derivative_function, interval_start, initial_state):
        super().__init__(state_derivative_function, interval_start, initial_state,
                         integration_scheme=IntegrationScheme.EULER)
