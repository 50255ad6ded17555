"""
Non-dimensional geometry of the Lambert problem.

Following Izzo (2015), the boundary-value problem defined by two position
vectors, a time of flight and a gravitational parameter is reduced to two
scalars: the geometry parameter ``lambda`` in [-1, 1] and the
non-dimensional time of flight ``T``. The radial and transverse unit vectors
at both ends are kept to map the solution back to inertial velocities.

References
----------
Izzo, D. (2015). Revisiting Lambert's problem. Celestial Mechanics and
Dynamical Astronomy, 121(1), 1-15.
"""

import logging
import math
from dataclasses import dataclass

import numpy as np

from ..exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)

# |sin| of the transfer angle below which the positions are taken as collinear
COLLINEARITY_THRESHOLD = 1e-12


@dataclass(frozen=True, eq=False)
class LambertGeometry:
    """
    Memoised non-dimensional constants of a Lambert problem.

    Attributes
    ----------
    radius_at_departure, radius_at_arrival : float
        Position magnitudes [m].
    chord : float
        Distance between the two positions [m].
    semi_perimeter : float
        Half the perimeter of the triangle formed with the central body [m].
    lambda_parameter : float
        Signed geometry parameter, sqrt(1 - chord / semi_perimeter) in
        magnitude, negative for transfers longer than half a revolution.
    normalized_time_of_flight : float
        sqrt(2 mu / s^3) * tof.
    radial_unit_vector_at_departure, radial_unit_vector_at_arrival : ndarray
    transverse_unit_vector_at_departure, transverse_unit_vector_at_arrival : ndarray
    transfer_angle : float
        Angle swept by the transfer [rad], in (0, 2 pi).
    is_half_revolution : bool
        Whether the positions are exactly opposite and the plane was chosen
        by convention.
    """
    radius_at_departure: float
    radius_at_arrival: float
    chord: float
    semi_perimeter: float
    lambda_parameter: float
    normalized_time_of_flight: float
    radial_unit_vector_at_departure: np.ndarray
    radial_unit_vector_at_arrival: np.ndarray
    transverse_unit_vector_at_departure: np.ndarray
    transverse_unit_vector_at_arrival: np.ndarray
    transfer_angle: float
    is_half_revolution: bool = False


def validate_position(position, name):
    """Return ``position`` as a finite, non-zero float64 3-vector."""
    vector = np.asarray(position, dtype=np.float64)
    if vector.shape != (3,):
        raise InvalidArgumentError(f"{name} must be a 3-vector, got shape {vector.shape}")
    if not np.all(np.isfinite(vector)):
        raise InvalidArgumentError(f"{name} must be finite, got {vector}")
    if not np.linalg.norm(vector) > 0.0:
        raise InvalidArgumentError(f"{name} must have a non-zero magnitude")
    return vector.copy()


def validate_problem(position_at_departure, position_at_arrival, time_of_flight,
                     gravitational_parameter):
    """
    Check the preconditions of a Lambert problem.

    Returns
    -------
    tuple
        (r1, r2, time_of_flight, gravitational_parameter) as float64 values.

    Raises
    ------
    InvalidArgumentError
        If a position is not a finite non-zero 3-vector, or the time of
        flight or gravitational parameter is not positive and finite.
    """
    r1 = validate_position(position_at_departure, "Position at departure")
    r2 = validate_position(position_at_arrival, "Position at arrival")

    time_of_flight = float(time_of_flight)
    gravitational_parameter = float(gravitational_parameter)
    if not (math.isfinite(time_of_flight) and time_of_flight > 0.0):
        raise InvalidArgumentError(f"Time of flight must be positive, got {time_of_flight}")
    if not (math.isfinite(gravitational_parameter) and gravitational_parameter > 0.0):
        raise InvalidArgumentError(
            f"Gravitational parameter must be positive, got {gravitational_parameter}")

    return r1, r2, time_of_flight, gravitational_parameter


def _half_revolution_normal(radial_unit_vector):
    """Plane normal used when the two positions are exactly opposite."""
    reference = np.array([0.0, 0.0, 1.0])
    if abs(np.dot(reference, radial_unit_vector)) > 1.0 - 1e-6:
        reference = np.array([1.0, 0.0, 0.0])
    normal = reference - np.dot(reference, radial_unit_vector) * radial_unit_vector
    return normal / np.linalg.norm(normal)


def compute_lambert_geometry(position_at_departure, position_at_arrival, time_of_flight,
                             gravitational_parameter, is_retrograde=False):
    """
    Non-dimensionalise a Lambert problem.

    Parameters
    ----------
    position_at_departure, position_at_arrival : array_like
        Cartesian positions [m].
    time_of_flight : float
        Transfer time [s].
    gravitational_parameter : float
        Gravitational parameter of the central body [m^3 s^-2].
    is_retrograde : bool, optional
        Whether the transfer goes clockwise about the z-axis. Default is False.

    Returns
    -------
    LambertGeometry

    Raises
    ------
    InvalidArgumentError
        If the inputs are invalid or the transfer angle is zero.
    """
    r1, r2, time_of_flight, gravitational_parameter = validate_problem(
        position_at_departure, position_at_arrival, time_of_flight, gravitational_parameter)

    radius_at_departure = np.linalg.norm(r1)
    radius_at_arrival = np.linalg.norm(r2)
    chord = np.linalg.norm(r2 - r1)
    semi_perimeter = 0.5 * (radius_at_departure + radius_at_arrival + chord)

    ir1 = r1 / radius_at_departure
    ir2 = r2 / radius_at_arrival
    angular_direction = np.cross(ir1, ir2)
    sine_of_angle = np.linalg.norm(angular_direction)
    cosine_of_angle = float(np.dot(ir1, ir2))

    # Rounding can push c/s marginally above 1 for opposite positions
    lambda_parameter = math.sqrt(max(0.0, 1.0 - chord / semi_perimeter))

    is_half_revolution = False
    if sine_of_angle < COLLINEARITY_THRESHOLD:
        if cosine_of_angle > 0.0:
            raise InvalidArgumentError(
                "Transfer angle is zero: departure and arrival positions are collinear "
                "and point in the same direction, the transfer plane is undefined"
            )
        is_half_revolution = True
        ih = _half_revolution_normal(ir1)
        lambda_parameter = 0.0
        logger.warning("Positions are exactly opposite (transfer angle of pi); the transfer "
                       f"plane is undefined, using normal {ih}")
    else:
        ih = angular_direction / sine_of_angle

    if ih[2] < 0.0:
        lambda_parameter = -lambda_parameter
        it1 = np.cross(ir1, ih)
        it2 = np.cross(ir2, ih)
    else:
        it1 = np.cross(ih, ir1)
        it2 = np.cross(ih, ir2)

    if is_retrograde:
        lambda_parameter = -lambda_parameter
        it1 = -it1
        it2 = -it2

    transfer_angle = math.atan2(sine_of_angle, cosine_of_angle)
    if lambda_parameter < 0.0:
        transfer_angle = 2.0 * math.pi - transfer_angle

    normalized_time_of_flight = math.sqrt(2.0 * gravitational_parameter / semi_perimeter**3) \
        * time_of_flight

    return LambertGeometry(
        radius_at_departure=float(radius_at_departure),
        radius_at_arrival=float(radius_at_arrival),
        chord=float(chord),
        semi_perimeter=float(semi_perimeter),
        lambda_parameter=lambda_parameter,
        normalized_time_of_flight=normalized_time_of_flight,
        radial_unit_vector_at_departure=ir1,
        radial_unit_vector_at_arrival=ir2,
        transverse_unit_vector_at_departure=it1,
        transverse_unit_vector_at_arrival=it2,
        transfer_angle=transfer_angle,
        is_half_revolution=is_half_revolution,
    )
