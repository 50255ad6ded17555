"""
Computation of Lagrange (libration) points in the CR3BP.

This module provides functions for calculating the positions of the five
Lagrange points in the Circular Restricted Three-Body Problem (CR3BP), in the
rotating frame with the primaries at (-mu, 0, 0) and (1 - mu, 0, 0).

The collinear points are roots of dOmega/dx on the x-axis. They are found
with the package's Newton-Raphson solver, each one bracketed between the
singularities at the primaries so that the iteration cannot jump to another
point.
"""

import logging

import numpy as np

from ..exceptions import InvalidArgumentError
from ..root_finders.newton_raphson import newton_raphson

logger = logging.getLogger(__name__)

#: float: Tolerance on the x-coordinate of the collinear points
COLLINEAR_POINT_TOLERANCE = 1e-13


def _check_mass_parameter(mu):
    if not 0.0 < mu <= 0.5:
        raise InvalidArgumentError(f"Mass parameter must lie in (0, 0.5], got {mu}")


def lagrange_point_locations(mu):
    """
    Compute all five libration points in the CR3BP.

    Parameters
    ----------
    mu : float
        Mass parameter of the CR3BP system (ratio of smaller to total mass)

    Returns
    -------
    tuple
        A tuple containing the positions of L1, L2, L3, L4, and L5 as ndarrays

    Notes
    -----
    The libration points are equilibrium points in the rotating frame where
    the gravitational and centrifugal forces balance. There are three collinear
    points (L1, L2, L3) located on the x-axis, and two equilateral points
    (L4, L5) forming equilateral triangles with the primary bodies.
    """
    return tuple(get_lagrange_point(mu, index) for index in range(1, 6))


def get_lagrange_point(mu, point_index):
    """
    Get the position of a specific Lagrange point.

    Parameters
    ----------
    mu : float
        Mass parameter of the CR3BP system, in (0, 0.5]
    point_index : int
        Lagrange point index (1-5)

    Returns
    -------
    ndarray
        3D vector [x, y, z] giving the position of the specified Lagrange point

    Raises
    ------
    InvalidArgumentError
        For an index outside 1-5 or a mass parameter outside (0, 0.5].
    """
    _check_mass_parameter(mu)
    if point_index in (1, 2, 3):
        return np.array([_collinear_point(mu, point_index), 0.0, 0.0], dtype=np.float64)
    if point_index in (4, 5):
        y = np.sqrt(3.0) / 2.0 if point_index == 4 else -np.sqrt(3.0) / 2.0
        return np.array([0.5 - mu, y, 0.0], dtype=np.float64)
    raise InvalidArgumentError(f"Invalid Lagrange point index {point_index}. Must be 1-5.")


def _collinear_point(mu, point_index):
    """x-coordinate of L1, L2 or L3."""
    hill_radius = (mu / 3.0) ** (1.0 / 3.0)
    if point_index == 1:
        bounds = (-mu, 1.0 - mu)
        initial_guess = 1.0 - mu - hill_radius
    elif point_index == 2:
        bounds = (1.0 - mu, 2.0)
        initial_guess = 1.0 - mu + hill_radius
    else:
        bounds = (-2.0, -mu)
        initial_guess = -1.0 - 5.0 * mu / 12.0

    def function(x):
        return _dOmega_dx(x, mu)

    def derivative(x):
        return _d2Omega_dx2(x, mu)

    x = newton_raphson(function, derivative, initial_guess,
                       tolerance=COLLINEAR_POINT_TOLERANCE, bounds=bounds)
    logger.debug(f"L{point_index} for mu = {mu}: x = {x!r}")
    return x


def _dOmega_dx(x, mu):
    """
    Derivative of the effective potential with respect to x on the x-axis.

    Parameters
    ----------
    x : float
        x-coordinate in the rotating frame
    mu : float
        Mass parameter of the CR3BP system (ratio of smaller to total mass)

    Returns
    -------
    float
        Value of dΩ/dx at the given x-coordinate
    """
    r1 = abs(x + mu)
    r2 = abs(x - (1 - mu))
    return x - (1 - mu) * (x + mu) / (r1**3) - mu * (x - (1 - mu)) / (r2**3)


def _d2Omega_dx2(x, mu):
    """Second derivative of the effective potential on the x-axis (always positive)."""
    r1 = abs(x + mu)
    r2 = abs(x - (1 - mu))
    return 1.0 + 2.0 * (1 - mu) / (r1**3) + 2.0 * mu / (r2**3)
