"""
Butcher tableaus for the explicit Runge-Kutta integrators.

Fixed-step schemes are selected with ``IntegrationScheme`` and carry a single
row of weights. Embedded pairs for variable step-size integration are selected
with ``CoefficientSet`` and carry two rows of weights: the lower-order
solution in row 0 and the higher-order solution in row 1.
"""

from dataclasses import dataclass
from enum import Enum

import numpy as np


class IntegrationScheme(Enum):
    """Update rules available to the fixed step-size integrator."""
    EULER = "euler"
    MIDPOINT = "midpoint"
    RUNGE_KUTTA_4 = "runge_kutta_4"


class CoefficientSet(Enum):
    """Embedded Runge-Kutta pairs available to the variable step-size integrator."""
    RUNGE_KUTTA_FEHLBERG_45 = "runge_kutta_fehlberg_45"
    DORMAND_PRINCE_54 = "dormand_prince_54"


@dataclass(frozen=True, eq=False)
class RungeKuttaCoefficients:
    """
    Butcher tableau of an explicit Runge-Kutta method.

    Attributes
    ----------
    a_coefficients : ndarray
        Stage coupling matrix, strictly lower triangular, shape (s, s).
    b_coefficients : ndarray
        Weights, shape (1, s) for a single method or (2, s) for an embedded
        pair (row 0 lower order, row 1 higher order).
    c_coefficients : ndarray
        Stage nodes, shape (s,).
    lower_order : int
        Order of the row-0 solution.
    higher_order : int
        Order of the row-1 solution (equal to ``lower_order`` for single methods).
    integrate_higher_order : bool
        Whether the propagated state is the higher-order estimate.
    """
    a_coefficients: np.ndarray
    b_coefficients: np.ndarray
    c_coefficients: np.ndarray
    lower_order: int
    higher_order: int
    integrate_higher_order: bool = False

    @property
    def number_of_stages(self):
        return self.c_coefficients.shape[0]

    @property
    def is_embedded(self):
        return self.b_coefficients.shape[0] == 2


def _tableau(a, b, c, lower_order, higher_order, integrate_higher_order=False):
    return RungeKuttaCoefficients(
        a_coefficients=np.array(a, dtype=np.float64),
        b_coefficients=np.atleast_2d(np.array(b, dtype=np.float64)),
        c_coefficients=np.array(c, dtype=np.float64),
        lower_order=lower_order,
        higher_order=higher_order,
        integrate_higher_order=integrate_higher_order,
    )


_EULER = _tableau([[0.0]], [1.0], [0.0], 1, 1)

_MIDPOINT = _tableau(
    [[0.0, 0.0],
     [0.5, 0.0]],
    [0.0, 1.0],
    [0.0, 0.5],
    2, 2,
)

_RUNGE_KUTTA_4 = _tableau(
    [[0.0, 0.0, 0.0, 0.0],
     [0.5, 0.0, 0.0, 0.0],
     [0.0, 0.5, 0.0, 0.0],
     [0.0, 0.0, 1.0, 0.0]],
    [1.0 / 6.0, 1.0 / 3.0, 1.0 / 3.0, 1.0 / 6.0],
    [0.0, 0.5, 0.5, 1.0],
    4, 4,
)

# Fehlberg (1969), propagates the 4th-order solution
_RUNGE_KUTTA_FEHLBERG_45 = _tableau(
    [[0.0, 0.0, 0.0, 0.0, 0.0, 0.0],
     [1.0 / 4.0, 0.0, 0.0, 0.0, 0.0, 0.0],
     [3.0 / 32.0, 9.0 / 32.0, 0.0, 0.0, 0.0, 0.0],
     [1932.0 / 2197.0, -7200.0 / 2197.0, 7296.0 / 2197.0, 0.0, 0.0, 0.0],
     [439.0 / 216.0, -8.0, 3680.0 / 513.0, -845.0 / 4104.0, 0.0, 0.0],
     [-8.0 / 27.0, 2.0, -3544.0 / 2565.0, 1859.0 / 4104.0, -11.0 / 40.0, 0.0]],
    [[25.0 / 216.0, 0.0, 1408.0 / 2565.0, 2197.0 / 4104.0, -1.0 / 5.0, 0.0],
     [16.0 / 135.0, 0.0, 6656.0 / 12825.0, 28561.0 / 56430.0, -9.0 / 50.0, 2.0 / 55.0]],
    [0.0, 1.0 / 4.0, 3.0 / 8.0, 12.0 / 13.0, 1.0, 1.0 / 2.0],
    4, 5,
)

# Dormand & Prince (1980), propagates the 5th-order solution
_DORMAND_PRINCE_54 = _tableau(
    [[0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0],
     [1.0 / 5.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0],
     [3.0 / 40.0, 9.0 / 40.0, 0.0, 0.0, 0.0, 0.0, 0.0],
     [44.0 / 45.0, -56.0 / 15.0, 32.0 / 9.0, 0.0, 0.0, 0.0, 0.0],
     [19372.0 / 6561.0, -25360.0 / 2187.0, 64448.0 / 6561.0, -212.0 / 729.0, 0.0, 0.0, 0.0],
     [9017.0 / 3168.0, -355.0 / 33.0, 46732.0 / 5247.0, 49.0 / 176.0, -5103.0 / 18656.0, 0.0, 0.0],
     [35.0 / 384.0, 0.0, 500.0 / 1113.0, 125.0 / 192.0, -2187.0 / 6784.0, 11.0 / 84.0, 0.0]],
    [[5179.0 / 57600.0, 0.0, 7571.0 / 16695.0, 393.0 / 640.0, -92097.0 / 339200.0,
      187.0 / 2100.0, 1.0 / 40.0],
     [35.0 / 384.0, 0.0, 500.0 / 1113.0, 125.0 / 192.0, -2187.0 / 6784.0, 11.0 / 84.0, 0.0]],
    [0.0, 1.0 / 5.0, 3.0 / 10.0, 4.0 / 5.0, 8.0 / 9.0, 1.0, 1.0],
    4, 5,
    integrate_higher_order=True,
)

_COEFFICIENTS = {
    IntegrationScheme.EULER: _EULER,
    IntegrationScheme.MIDPOINT: _MIDPOINT,
    IntegrationScheme.RUNGE_KUTTA_4: _RUNGE_KUTTA_4,
    CoefficientSet.RUNGE_KUTTA_FEHLBERG_45: _RUNGE_KUTTA_FEHLBERG_45,
    CoefficientSet.DORMAND_PRINCE_54: _DORMAND_PRINCE_54,
}


def get_coefficients(method):
    """
    Return the Butcher tableau of an integration scheme or coefficient set.

    Parameters
    ----------
    method : IntegrationScheme or CoefficientSet
        Method to look up.

    Returns
    -------
    RungeKuttaCoefficients
        The (shared, read-only) tableau.
    """
    try:
        return _COEFFICIENTS[method]
    except KeyError:
        raise ValueError(f"Unknown integration method: {method!r}") from None


def runge_kutta_stages(state_derivative_function, interval, state, step_size, coefficients):
    """
    Evaluate the stage derivatives of an explicit Runge-Kutta step.

    Parameters
    ----------
    state_derivative_function : callable
        f(t, y) returning dy/dt.
    interval : float
        Independent variable at the start of the step.
    state : ndarray
        State at the start of the step.
    step_size : float
        Step size (may be negative).
    coefficients : RungeKuttaCoefficients
        Tableau to apply.

    Returns
    -------
    list of ndarray
        Stage derivatives k_1 ... k_s.
    """
    a = coefficients.a_coefficients
    c = coefficients.c_coefficients
    stages = []
    for stage in range(coefficients.number_of_stages):
        intermediate_state = state
        for column in range(stage):
            if a[stage, column] != 0.0:
                intermediate_state = intermediate_state + step_size * a[stage, column] * stages[column]
        stages.append(np.asarray(
            state_derivative_function(interval + c[stage] * step_size, intermediate_state),
            dtype=np.float64))
    return stages


def combine_stages(state, step_size, stages, weights):
    """Return ``state + step_size * sum(weights[i] * stages[i])``."""
    increment = np.zeros_like(state)
    for weight, derivative in zip(weights, stages):
        if weight != 0.0:
            increment = increment + weight * derivative
    return state + step_size * increment
