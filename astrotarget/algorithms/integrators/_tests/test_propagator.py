import math

import numpy as np
import pytest
from numpy.testing import assert_allclose

from astrotarget.algorithms.integrators.propagator import propagate_two_body, two_body_acceleration


def test_two_body_acceleration_points_to_origin():
    state = np.array([2.0, 0.0, 0.0, 0.0, 0.5, 0.0])
    derivative = two_body_acceleration(state, 4.0)

    assert_allclose(derivative, [0.0, 0.5, 0.0, -1.0, 0.0, 0.0])


def test_circular_orbit_closes_after_one_period():
    mu = 398600.4418e9
    radius = 7000e3
    speed = math.sqrt(mu / radius)
    period = 2.0 * math.pi * math.sqrt(radius**3 / mu)
    initial_state = np.array([radius, 0.0, 0.0, 0.0, speed, 0.0])

    sol = propagate_two_body(initial_state, mu, [0.0, period])

    assert_allclose(sol.y[:3, -1], initial_state[:3], atol=1e-3)
    assert_allclose(sol.y[3:, -1], initial_state[3:], atol=1e-6)


def test_output_times_and_energy_conservation():
    mu = 1.0
    initial_state = np.array([1.0, 0.0, 0.0, 0.0, 1.2, 0.0])
    tspan = np.linspace(0.0, 10.0, 50)

    sol = propagate_two_body(initial_state, mu, tspan)

    assert_allclose(sol.t, tspan)
    energy = 0.5 * np.sum(sol.y[3:]**2, axis=0) - mu / np.linalg.norm(sol.y[:3], axis=0)
    assert np.ptp(energy) < 1e-10


def test_backward_propagation_returns_to_initial_state():
    mu = 1.0
    initial_state = np.array([1.0, 0.0, 0.0, 0.0, 1.1, 0.2])

    forward = propagate_two_body(initial_state, mu, [0.0, 5.0])
    backward = propagate_two_body(forward.y[:, -1], mu, [5.0, 0.0])

    assert backward.t[-1] == pytest.approx(0.0)
    assert_allclose(backward.y[:, -1], initial_state, atol=1e-9)
