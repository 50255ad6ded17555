import mpmath as mp
import numpy as np
import pytest
from numpy.testing import assert_allclose

from astrotarget.algorithms.core.lagrange_points import (
    _dOmega_dx,
    get_lagrange_point,
    lagrange_point_locations,
)
from astrotarget.algorithms.exceptions import InvalidArgumentError
from astrotarget.utils.constants import MU_EARTH_MOON_SYSTEM

mp.mp.dps = 50

EARTH_MOON_MU = float(MU_EARTH_MOON_SYSTEM)


def _mpmath_collinear_points(mu):
    """Reference L1-L3 from mpmath's secant search at 50 digits."""
    def f(x):
        return _dOmega_dx(x, mp.mpf(mu))

    l1 = float(mp.findroot(f, (-mu + 0.01, 1 - mu - 0.01)))
    l2 = float(mp.findroot(f, (1.0, 2.0)))
    l3 = float(mp.findroot(f, (-mu - 0.01, -2.0)))
    return l1, l2, l3


@pytest.mark.parametrize("mu", [EARTH_MOON_MU, 9.537e-4, 0.1, 0.5])
def test_collinear_points_match_mpmath(mu):
    reference = _mpmath_collinear_points(mu)

    for index, expected in zip((1, 2, 3), reference):
        point = get_lagrange_point(mu, index)
        assert point[0] == pytest.approx(expected, abs=1e-12)
        assert point[1] == 0.0 and point[2] == 0.0


def test_collinear_point_ordering():
    l1, l2, l3, _, _ = lagrange_point_locations(EARTH_MOON_MU)

    assert l3[0] < -EARTH_MOON_MU < l1[0] < 1 - EARTH_MOON_MU < l2[0]
    # Earth-Moon L1 and L2, classical values
    assert l1[0] == pytest.approx(0.8369, abs=1e-3)
    assert l2[0] == pytest.approx(1.1557, abs=1e-3)


def test_earth_moon_mass_parameter():
    assert EARTH_MOON_MU == pytest.approx(0.012150584, rel=1e-6)


def test_equilateral_points():
    l4 = get_lagrange_point(EARTH_MOON_MU, 4)
    l5 = get_lagrange_point(EARTH_MOON_MU, 5)

    assert_allclose(l4, [0.5 - EARTH_MOON_MU, np.sqrt(3) / 2, 0.0])
    assert_allclose(l5, [0.5 - EARTH_MOON_MU, -np.sqrt(3) / 2, 0.0])
    # Equidistant (unit distance) from both primaries
    for point in (l4, l5):
        assert np.linalg.norm(point - [-EARTH_MOON_MU, 0, 0]) == pytest.approx(1.0)
        assert np.linalg.norm(point - [1 - EARTH_MOON_MU, 0, 0]) == pytest.approx(1.0)


def test_symmetric_system_has_symmetric_points():
    l1, l2, l3, _, _ = lagrange_point_locations(0.5)

    assert l1[0] == pytest.approx(0.0, abs=1e-13)
    assert l2[0] == pytest.approx(-l3[0], abs=1e-12)


def test_invalid_requests():
    with pytest.raises(InvalidArgumentError):
        get_lagrange_point(EARTH_MOON_MU, 6)
    with pytest.raises(InvalidArgumentError):
        get_lagrange_point(0.0, 1)
    with pytest.raises(InvalidArgumentError):
        lagrange_point_locations(0.7)


if __name__ == "__main__":
    for i, point in enumerate(lagrange_point_locations(EARTH_MOON_MU), start=1):
        print(f"L{i}: {point}")
