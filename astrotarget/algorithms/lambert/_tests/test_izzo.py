import logging
import math

import numpy as np
import pytest
from numpy.testing import assert_allclose

from astrotarget.algorithms.exceptions import InvalidArgumentError
from astrotarget.algorithms.integrators.propagator import propagate_lambert_arc
from astrotarget.algorithms.lambert.izzo import LambertTargeterIzzo, ZeroRevolutionLambertTargeterIzzo
from astrotarget.utils.constants import (
    EARTH_DISTANCE_UNIT,
    EARTH_TIME_UNIT,
    MU_EARTH,
    MU_SUN,
)
from astrotarget.utils.conversions import (
    convert_astronomical_units_to_meters,
    convert_degrees_to_radians,
    convert_julian_days_to_seconds,
    convert_keplerian_to_cartesian_elements,
)


@pytest.fixture
def hyperbolic_targeter():
    return ZeroRevolutionLambertTargeterIzzo(
        [convert_astronomical_units_to_meters(0.02), 0.0, 0.0],
        [0.0, convert_astronomical_units_to_meters(-0.03), 0.0],
        convert_julian_days_to_seconds(100.0),
        MU_EARTH)


@pytest.fixture
def elliptic_targeter():
    return ZeroRevolutionLambertTargeterIzzo(
        [2.0 * EARTH_DISTANCE_UNIT, 0.0, 0.0],
        [2.0 * EARTH_DISTANCE_UNIT, 2.0 * math.sqrt(3.0) * EARTH_DISTANCE_UNIT, 0.0],
        5.0 * EARTH_TIME_UNIT,
        MU_EARTH)


def test_hyperbolic_transfer(hyperbolic_targeter):
    targeter = hyperbolic_targeter

    assert targeter.semi_major_axis == pytest.approx(-1270129.3602e3, rel=1e-7)
    assert targeter.radial_velocity_at_departure == pytest.approx(-745.46, rel=1e-4)
    assert targeter.radial_velocity_at_arrival == pytest.approx(693.21, rel=1e-4)
    assert targeter.transverse_velocity_at_departure == pytest.approx(156.74, rel=1e-4)
    assert targeter.transverse_velocity_at_arrival == pytest.approx(104.50, rel=1e-4)

    assert_allclose(targeter.inertial_velocity_at_departure[:2], [-745.457, 156.743], rtol=1e-4)
    assert_allclose(targeter.inertial_velocity_at_arrival[:2], [104.495, -693.209], rtol=1e-4)
    assert abs(targeter.inertial_velocity_at_departure[2]) < 1e-4
    assert abs(targeter.inertial_velocity_at_arrival[2]) < 1e-4

    # Anti-clockwise motion
    angular_momentum = np.cross(targeter.position_at_departure, targeter.inertial_velocity_at_departure)
    assert angular_momentum[2] > np.finfo(float).eps


def test_elliptic_transfer(elliptic_targeter):
    targeter = elliptic_targeter

    assert targeter.semi_major_axis == pytest.approx(5.4214 * EARTH_DISTANCE_UNIT, rel=1e-3)
    assert targeter.radial_velocity_at_departure == pytest.approx(2735.80, rel=1e-2)
    assert targeter.radial_velocity_at_arrival == pytest.approx(2975.03, rel=1e-2)
    assert targeter.transverse_velocity_at_departure == pytest.approx(6594.30, rel=1e-2)
    assert targeter.transverse_velocity_at_arrival == pytest.approx(3297.15, rel=1e-2)

    assert_allclose(targeter.inertial_velocity_at_departure[:2], [2735.8, 6594.3], rtol=1e-2)
    assert_allclose(targeter.inertial_velocity_at_arrival[:2], [-1367.9, 4225.03], rtol=1e-2)
    assert abs(targeter.inertial_velocity_at_departure[2]) < 1e-2

    angular_momentum = np.cross(targeter.position_at_departure, targeter.inertial_velocity_at_departure)
    assert angular_momentum[2] > np.finfo(float).eps


def test_retrograde_transfer():
    position_at_departure = [-131798187443.90068, -72114797019.4148, 2343782.3918863535]
    position_at_arrival = [202564770723.92966, -42405023055.01754, -5861543784.413235]
    time_of_flight = convert_julian_days_to_seconds(300.0)

    targeter = LambertTargeterIzzo(position_at_departure, position_at_arrival, time_of_flight,
                                   MU_SUN, is_retrograde=True)

    assert_allclose(targeter.inertial_velocity_at_departure,
                    [-14157.8507230353, 28751.266655828, 1395.46037631136], rtol=1e-7)
    assert_allclose(targeter.inertial_velocity_at_arrival,
                    [-6609.91626743654, -22363.5220239692, -716.519714631494], rtol=1e-7)

    angular_momentum = np.cross(position_at_departure, targeter.inertial_velocity_at_departure)
    assert angular_momentum[2] < 0.0


def test_retrograde_flag_changes_solution():
    arguments = ([1.0, 0.0, 0.0], [0.0, 1.5, 0.0], 3.0, 1.0)
    prograde = ZeroRevolutionLambertTargeterIzzo(*arguments)
    retrograde = ZeroRevolutionLambertTargeterIzzo(*arguments, is_retrograde=True)

    assert prograde.geometry.lambda_parameter == pytest.approx(-retrograde.geometry.lambda_parameter)
    assert np.cross([1.0, 0.0, 0.0], prograde.inertial_velocity_at_departure)[2] > 0.0
    assert np.cross([1.0, 0.0, 0.0], retrograde.inertial_velocity_at_departure)[2] < 0.0


def test_near_pi_transfer():
    time_of_flight = convert_julian_days_to_seconds(300.0)
    departure_state = convert_keplerian_to_cartesian_elements(
        [convert_astronomical_units_to_meters(1.0), 0.0, 0.0, 0.0, 0.0, 0.0], MU_SUN)
    arrival_state = convert_keplerian_to_cartesian_elements(
        [convert_astronomical_units_to_meters(1.5), 0.0, 0.0, 0.0, 0.0,
         convert_degrees_to_radians(179.999)], MU_SUN)

    targeter = LambertTargeterIzzo(departure_state[:3], arrival_state[:3], time_of_flight, MU_SUN)

    assert_allclose(targeter.inertial_velocity_at_departure[:2],
                    [3160.36638344209, 32627.4771454454], rtol=1e-6)
    assert_allclose(targeter.inertial_velocity_at_arrival[:2],
                    [3159.89183582648, -21751.7065841264], rtol=1e-6)
    assert abs(targeter.inertial_velocity_at_departure[2]) < 1e-6
    assert abs(targeter.inertial_velocity_at_arrival[2]) < 1e-6


def test_exactly_opposite_positions_use_reference_plane(caplog):
    r1 = [convert_astronomical_units_to_meters(1.0), 0.0, 0.0]
    r2 = [-convert_astronomical_units_to_meters(1.5), 0.0, 0.0]
    targeter = ZeroRevolutionLambertTargeterIzzo(r1, r2, convert_julian_days_to_seconds(300.0), MU_SUN)

    with caplog.at_level(logging.WARNING):
        velocity = targeter.inertial_velocity_at_departure

    assert targeter.geometry.is_half_revolution
    assert "opposite" in caplog.text
    assert np.all(np.isfinite(velocity))
    # Transfer in the x-y plane, anti-clockwise
    assert velocity[2] == 0.0
    assert np.cross(r1, velocity)[2] > 0.0

    sol = propagate_lambert_arc(targeter)
    assert_allclose(sol.y[:3, -1], r2, rtol=1e-6, atol=1.0)


def test_zero_transfer_angle_is_rejected():
    targeter = ZeroRevolutionLambertTargeterIzzo([1.0, 0.0, 0.0], [2.0, 0.0, 0.0], 1.0, 1.0)

    with pytest.raises(InvalidArgumentError):
        targeter.semi_major_axis


@pytest.mark.parametrize("r1, r2, tof, mu", [
    ([1.0, 0.0, 0.0], [0.0, 1.0, 0.0], 0.0, 1.0),
    ([1.0, 0.0, 0.0], [0.0, 1.0, 0.0], -1.0, 1.0),
    ([1.0, 0.0, 0.0], [0.0, 1.0, 0.0], 1.0, 0.0),
    ([1.0, 0.0, 0.0], [0.0, 1.0, 0.0], 1.0, -3.0),
    ([0.0, 0.0, 0.0], [0.0, 1.0, 0.0], 1.0, 1.0),
    ([1.0, 0.0], [0.0, 1.0, 0.0], 1.0, 1.0),
    ([1.0, np.nan, 0.0], [0.0, 1.0, 0.0], 1.0, 1.0),
    ([1.0, 0.0, 0.0], [0.0, 1.0, 0.0], np.inf, 1.0),
])
def test_invalid_inputs_are_rejected_at_construction(r1, r2, tof, mu):
    with pytest.raises(InvalidArgumentError):
        ZeroRevolutionLambertTargeterIzzo(r1, r2, tof, mu)


def test_solving_is_lazy_and_memoised(elliptic_targeter):
    targeter = elliptic_targeter
    calls = []
    solve = targeter._solve

    def counting_solve():
        calls.append(1)
        return solve()

    targeter._solve = counting_solve
    assert calls == []

    first = targeter.inertial_velocity_at_departure
    _ = targeter.semi_major_axis
    second = targeter.inertial_velocity_at_departure

    assert calls == [1]
    assert_allclose(first, second, rtol=0.0, atol=0.0)
    assert targeter.solution is targeter.solution


def test_returned_velocities_are_copies(elliptic_targeter):
    velocity = elliptic_targeter.inertial_velocity_at_departure
    velocity[:] = 0.0

    assert np.linalg.norm(elliptic_targeter.inertial_velocity_at_departure) > 0.0


def test_velocity_vector_pair(elliptic_targeter):
    departure, arrival = elliptic_targeter.get_inertial_velocity_vectors()

    assert_allclose(departure, elliptic_targeter.inertial_velocity_at_departure, rtol=0.0, atol=0.0)
    assert_allclose(arrival, elliptic_targeter.inertial_velocity_at_arrival, rtol=0.0, atol=0.0)
    departure[:] = 0.0
    assert np.linalg.norm(elliptic_targeter.get_inertial_velocity_vectors()[0]) > 0.0


@pytest.mark.parametrize("fixture_name", ["hyperbolic_targeter", "elliptic_targeter"])
def test_propagated_arc_reaches_arrival_position(fixture_name, request):
    targeter = request.getfixturevalue(fixture_name)
    sol = propagate_lambert_arc(targeter, steps=10)

    assert_allclose(sol.y[:3, -1], targeter.position_at_arrival, rtol=1e-7, atol=1e-3)
    assert_allclose(sol.y[3:, -1], targeter.inertial_velocity_at_arrival, rtol=1e-6)


def test_three_dimensional_transfer_reaches_arrival_position():
    targeter = ZeroRevolutionLambertTargeterIzzo(
        [7000e3, 1000e3, -500e3], [-2000e3, 8000e3, 3000e3], 3600.0, MU_EARTH)
    sol = propagate_lambert_arc(targeter)

    assert_allclose(sol.y[:3, -1], targeter.position_at_arrival, rtol=1e-7)
    assert targeter.solution.number_of_revolutions == 0
    assert targeter.solution.is_right_branch is None
