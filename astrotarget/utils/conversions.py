"""
Unit and element conversions.

Simple scalar conversions between the units used to set up transfer problems
(astronomical units, Julian days, degrees) and SI units, and the conversion of
Keplerian elements to a Cartesian state.
"""

import logging

import numpy as np

from .constants import ASTRONOMICAL_UNIT, JULIAN_DAY

logger = logging.getLogger(__name__)


def convert_astronomical_units_to_meters(distance):
    return distance * ASTRONOMICAL_UNIT


def convert_meters_to_astronomical_units(distance):
    return distance / ASTRONOMICAL_UNIT


def convert_julian_days_to_seconds(days):
    return days * JULIAN_DAY


def convert_seconds_to_julian_days(seconds):
    return seconds / JULIAN_DAY


def convert_degrees_to_radians(angle):
    return np.deg2rad(angle)


def convert_radians_to_degrees(angle):
    return np.rad2deg(angle)


def convert_keplerian_to_cartesian_elements(keplerian_elements, gravitational_parameter):
    """
    Convert Keplerian elements to a Cartesian state.

    Parameters
    ----------
    keplerian_elements : array_like
        [a, e, i, omega, RAAN, theta]: semi-major axis [m] (semi-latus rectum
        for parabolic orbits), eccentricity, inclination, argument of
        periapsis, right ascension of the ascending node and true anomaly
        [rad].
    gravitational_parameter : float
        Gravitational parameter of the central body [m^3 s^-2].

    Returns
    -------
    ndarray
        Cartesian state [x, y, z, vx, vy, vz] in m and m/s.

    Raises
    ------
    ValueError
        If the elements do not describe a valid orbit (hyperbolic true
        anomaly beyond the asymptote, negative eccentricity).
    """
    a, e, i, omega, raan, theta = np.asarray(keplerian_elements, dtype=np.float64)

    if e < 0.0:
        raise ValueError(f"Eccentricity must be non-negative, got {e}")

    if np.isclose(e, 1.0, rtol=0.0, atol=1e-15):
        semi_latus_rectum = a
        logger.debug(f"Parabolic elements, using {a!r} m as the semi-latus rectum")
    else:
        semi_latus_rectum = a * (1.0 - e * e)
    if e > 1.0 and np.cos(theta) <= -1.0 / e:
        raise ValueError(f"True anomaly {theta} lies beyond the hyperbolic asymptote")
    if semi_latus_rectum <= 0.0:
        raise ValueError("Semi-major axis and eccentricity give a non-positive semi-latus rectum")

    radius = semi_latus_rectum / (1.0 + e * np.cos(theta))
    speed_factor = np.sqrt(gravitational_parameter / semi_latus_rectum)

    # Perifocal frame
    position_perifocal = np.array([radius * np.cos(theta), radius * np.sin(theta), 0.0])
    velocity_perifocal = np.array([-speed_factor * np.sin(theta),
                                   speed_factor * (e + np.cos(theta)), 0.0])

    cos_raan, sin_raan = np.cos(raan), np.sin(raan)
    cos_omega, sin_omega = np.cos(omega), np.sin(omega)
    cos_i, sin_i = np.cos(i), np.sin(i)

    rotation = np.array([
        [cos_raan * cos_omega - sin_raan * sin_omega * cos_i,
         -cos_raan * sin_omega - sin_raan * cos_omega * cos_i,
         sin_raan * sin_i],
        [sin_raan * cos_omega + cos_raan * sin_omega * cos_i,
         -sin_raan * sin_omega + cos_raan * cos_omega * cos_i,
         -cos_raan * sin_i],
        [sin_omega * sin_i, cos_omega * sin_i, cos_i],
    ])

    return np.concatenate((rotation @ position_perifocal, rotation @ velocity_perifocal))
