import logging
import math

import numpy as np
import pytest
from numpy.testing import assert_array_equal

from astrotarget.algorithms.exceptions import InvalidArgumentError
from astrotarget.algorithms.lambert.batch import LambertBatchResult, solve_lambert_batch
from astrotarget.algorithms.lambert.izzo import ZeroRevolutionLambertTargeterIzzo
from astrotarget.utils.constants import MU_EARTH

R1 = np.array([7000e3, 0.0, 0.0])
R2 = 8000e3 * np.array([math.cos(2.0 * math.pi / 3.0), math.sin(2.0 * math.pi / 3.0), 0.0])


@pytest.fixture
def problems():
    return [
        (R1, R2, 1800.0),
        (R1, R2, -1.0),
        (R1, [14000e3, 0.0, 0.0], 3600.0),
        (R1, R2, 6.0 * 3600.0),
    ]


def test_failures_are_recorded_and_others_solved(problems, caplog):
    with caplog.at_level(logging.WARNING):
        result = solve_lambert_batch(problems, MU_EARTH)

    assert isinstance(result, LambertBatchResult)
    assert len(result) == 4
    assert result.success_count == 2
    assert result.solutions[1] is None and result.solutions[2] is None
    assert [index for index, _ in result.failures] == [1, 2]
    assert all(isinstance(error, InvalidArgumentError) for _, error in result.failures)
    assert "Lambert problem 1 failed" in caplog.text


def test_solutions_match_individual_targeters(problems):
    result = solve_lambert_batch(problems, MU_EARTH, show_progress=True)

    for index in (0, 3):
        position_at_departure, position_at_arrival, time_of_flight = problems[index]
        targeter = ZeroRevolutionLambertTargeterIzzo(
            position_at_departure, position_at_arrival, time_of_flight, MU_EARTH)
        assert_array_equal(result.solutions[index].inertial_velocity_at_departure,
                           targeter.inertial_velocity_at_departure)


def test_targeter_options_are_forwarded():
    result = solve_lambert_batch([(R1, R2, 6.0 * 3600.0), (R1, R2, 1800.0)], MU_EARTH,
                                 number_of_revolutions=2, is_right_branch=True)

    assert result.solutions[0].number_of_revolutions == 2
    assert result.solutions[0].is_right_branch
    # Too short for two revolutions
    assert result.solutions[1] is None
    assert isinstance(result.failures[0][1], InvalidArgumentError)


def test_empty_batch():
    result = solve_lambert_batch(iter([]), MU_EARTH)

    assert len(result) == 0
    assert result.success_count == 0
