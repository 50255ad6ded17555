"""
Numerical propagation of two-body (Keplerian) trajectories.

This module provides high-accuracy reference propagation with
``scipy.integrate.solve_ivp``, used to verify boundary-value solutions such as
Lambert transfers:
- Point-mass gravitational acceleration (numba-compiled)
- Orbit propagation over a time span
- Propagation of a solved Lambert arc from departure to arrival
"""

import logging

import numba
import numpy as np
from scipy.integrate import solve_ivp

logger = logging.getLogger(__name__)


@numba.njit(fastmath=True, cache=True)
def two_body_acceleration(state, mu):
    """
    State = [x, y, z, vx, vy, vz]
    Returns the time derivative of the state vector for the two-body problem.
    """
    x, y, z, vx, vy, vz = state

    r = np.sqrt(x**2 + y**2 + z**2)
    factor = -mu / r**3

    return np.array([vx, vy, vz, factor * x, factor * y, factor * z], dtype=np.float64)


def propagate_two_body(initial_state, mu, tspan, rtol=1e-12, atol=1e-12,
                       method='DOP853', dense_output=False, max_step=np.inf, events=None):
    """
    Propagate a state under point-mass gravity.

    Parameters
    ----------
    initial_state : array_like
        Initial state vector [x, y, z, vx, vy, vz]
    mu : float
        Gravitational parameter of the central body
    tspan : array_like
        Time span [t_start, t_end] or array of output times
    rtol : float, optional
        Relative tolerance for the integrator
    atol : float, optional
        Absolute tolerance for the integrator
    method : str, optional
        Integration method ('RK45', 'RK23', 'DOP853', 'Radau', 'BDF', 'LSODA')
    dense_output : bool, optional
        Whether to compute a continuous solution
    max_step : float, optional
        Maximum allowed step size for the integrator
    events : callable or list of callables, optional
        Events to detect during integration (see scipy.integrate.solve_ivp)

    Returns
    -------
    sol : OdeResult
        Solution object from scipy.integrate.solve_ivp

    Raises
    ------
    RuntimeError
        If the integration does not reach the end of the time span.
    """
    tspan = np.asarray(tspan, dtype=np.float64)

    def f(t, y):
        return two_body_acceleration(y, mu)

    sol = solve_ivp(
        f, [tspan[0], tspan[-1]], np.asarray(initial_state, dtype=np.float64),
        t_eval=tspan, events=events,
        rtol=rtol, atol=atol,
        method=method, dense_output=dense_output,
        max_step=max_step
    )

    if not sol.success:
        raise RuntimeError(f"Two-body propagation failed: {sol.message}")

    return sol


def propagate_lambert_arc(targeter, steps=2, **solve_kwargs):
    """
    Propagate the departure state of a solved Lambert targeter.

    Parameters
    ----------
    targeter : ZeroRevolutionLambertTargeterIzzo
        Any Lambert targeter; it is solved on demand.
    steps : int, optional
        Number of output times between departure and arrival. Default is 2.
    **solve_kwargs
        Additional keyword arguments passed to ``propagate_two_body``.

    Returns
    -------
    sol : OdeResult
        Trajectory from departure (t = 0) to arrival (t = time of flight).
        ``sol.y[:3, -1]`` should match the arrival position.
    """
    initial_state = np.concatenate((targeter.position_at_departure,
                                    targeter.inertial_velocity_at_departure))
    tspan = np.linspace(0.0, targeter.time_of_flight, steps)

    sol = propagate_two_body(initial_state, targeter.gravitational_parameter, tspan, **solve_kwargs)

    miss = np.linalg.norm(sol.y[:3, -1] - targeter.position_at_arrival)
    logger.debug(f"Lambert arc propagated, arrival position miss {miss:.3e} m")
    return sol
