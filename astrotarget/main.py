import logging

import numpy as np

from astrotarget.algorithms.integrators.propagator import propagate_lambert_arc
from astrotarget.algorithms.lambert import (
    LambertTargeterIzzo,
    MultiRevolutionLambertTargeterIzzo,
    solve_lambert_batch,
)
from astrotarget.logging_config import setup_logging
from astrotarget.utils.constants import EARTH_DISTANCE_UNIT, EARTH_TIME_UNIT, MU_EARTH, MU_SUN
from astrotarget.utils.conversions import (
    convert_astronomical_units_to_meters,
    convert_degrees_to_radians,
    convert_julian_days_to_seconds,
    convert_keplerian_to_cartesian_elements,
)

logger = logging.getLogger(__name__)


if __name__ == "__main__":

    def report_transfer(name, targeter):
        sol = propagate_lambert_arc(targeter, steps=100)
        miss = np.linalg.norm(sol.y[:3, -1] - targeter.position_at_arrival)
        logger.info(f"{name}: a = {targeter.semi_major_axis:.6e} m, "
                    f"v1 = {targeter.inertial_velocity_at_departure} m/s, "
                    f"v2 = {targeter.inertial_velocity_at_arrival} m/s, "
                    f"propagated miss = {miss:.3e} m")
        return sol

    setup_logging(console_level="INFO")

    # Hyperbolic transfer around the Earth
    hyperbolic = LambertTargeterIzzo(
        [convert_astronomical_units_to_meters(0.02), 0.0, 0.0],
        [0.0, convert_astronomical_units_to_meters(-0.03), 0.0],
        convert_julian_days_to_seconds(100.0),
        MU_EARTH)
    report_transfer("Hyperbolic transfer", hyperbolic)

    # Elliptic transfer around the Earth
    elliptic = LambertTargeterIzzo(
        [2.0 * EARTH_DISTANCE_UNIT, 0.0, 0.0],
        [2.0 * EARTH_DISTANCE_UNIT, 2.0 * np.sqrt(3.0) * EARTH_DISTANCE_UNIT, 0.0],
        5.0 * EARTH_TIME_UNIT,
        MU_EARTH)
    report_transfer("Elliptic transfer", elliptic)

    # Heliocentric transfer close to half a revolution
    departure_state = convert_keplerian_to_cartesian_elements(
        [convert_astronomical_units_to_meters(1.0), 0.0, 0.0, 0.0, 0.0, 0.0], MU_SUN)
    arrival_state = convert_keplerian_to_cartesian_elements(
        [convert_astronomical_units_to_meters(1.5), 0.0, 0.0, 0.0, 0.0,
         convert_degrees_to_radians(179.999)], MU_SUN)
    near_pi = LambertTargeterIzzo(departure_state[:3], arrival_state[:3],
                                  convert_julian_days_to_seconds(300.0), MU_SUN)
    report_transfer("Near-pi transfer", near_pi)

    # Every multi-revolution solution of a low Earth orbit transfer
    r1 = np.array([7000e3, 0.0, 0.0])
    r2 = 8000e3 * np.array([np.cos(2.0 * np.pi / 3.0), np.sin(2.0 * np.pi / 3.0), 0.0])
    multi = MultiRevolutionLambertTargeterIzzo(r1, r2, 6.0 * 3600.0, MU_EARTH)
    logger.info(f"Maximum number of revolutions: {multi.maximum_number_of_revolutions}")
    for solution in multi.solve_all():
        branch = {None: "single arc", False: "left", True: "right"}[solution.is_right_branch]
        logger.info(f"N = {solution.number_of_revolutions} ({branch}): "
                    f"|v1| = {np.linalg.norm(solution.inertial_velocity_at_departure):.3f} m/s, "
                    f"a = {solution.semi_major_axis:.6e} m")

    # Random coplanar Earth-centred transfers
    rng = np.random.default_rng(0)
    problems = []
    for _ in range(200):
        angle = rng.uniform(0.1, 2.0 * np.pi - 0.1)
        radius = rng.uniform(6800e3, 42164e3)
        problems.append((r1, radius * np.array([np.cos(angle), np.sin(angle), 0.0]),
                         rng.uniform(600.0, 86400.0)))
    result = solve_lambert_batch(problems, MU_EARTH, show_progress=True)
    logger.info(f"Batch: {result.success_count} of {len(result)} transfers solved")
