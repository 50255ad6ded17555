"""
Time-of-flight equation of the Lambert problem and its derivatives.

All functions work on Izzo's non-dimensional variables: the geometry
parameter ``lambda_parameter`` and the universal variable ``x`` (x < 1 for
elliptic, x = 1 for parabolic and x > 1 for hyperbolic transfers). The time
of flight is evaluated with the expression best conditioned for the distance
of ``x`` from the parabola: Battin's hypergeometric series very close to it,
Lagrange's equation in its neighbourhood, and Lancaster's expression
elsewhere.

The kernels are compiled with numba and called inside every Newton-Raphson
iteration of the targeters. ``fastmath`` is left off: the derivative
expressions rely on cancellations that reassociation would spoil.
"""

import math

import numba

#: float: Below this distance from x = 1 the hypergeometric series is used
BATTIN_THRESHOLD = 0.01

#: float: Below this distance from x = 1 (and above BATTIN_THRESHOLD) Lagrange's equation is used
LAGRANGE_THRESHOLD = 0.2

#: float: Below this distance from x = 1 derivatives are taken by central differences
PARABOLIC_DERIVATIVE_THRESHOLD = 1e-5

# Tolerance on the last term of the hypergeometric series
_SERIES_TOLERANCE = 1e-11


@numba.njit(cache=True)
def hypergeometric_f(z, tolerance):
    """Hypergeometric function 2F1(3, 1, 5/2, z) by direct summation."""
    partial_sum = 1.0
    term = 1.0
    j = 0
    error = 1.0
    while error > tolerance:
        term = term * (3.0 + j) * (1.0 + j) / (2.5 + j) * z / (j + 1.0)
        partial_sum += term
        error = abs(term)
        j += 1
    return partial_sum


@numba.njit(cache=True)
def lagrange_time_of_flight(x, lambda_parameter, revolutions):
    """Lagrange's time-of-flight equation (ill-conditioned close to x = 1)."""
    a = 1.0 / (1.0 - x * x)
    if a > 0.0:
        alpha = 2.0 * math.acos(x)
        beta = 2.0 * math.asin(math.sqrt(lambda_parameter * lambda_parameter / a))
        if lambda_parameter < 0.0:
            beta = -beta
        return a * math.sqrt(a) * ((alpha - math.sin(alpha)) - (beta - math.sin(beta))
                                   + 2.0 * math.pi * revolutions) / 2.0
    alpha = 2.0 * math.acosh(x)
    beta = 2.0 * math.asinh(math.sqrt(-lambda_parameter * lambda_parameter / a))
    if lambda_parameter < 0.0:
        beta = -beta
    return -a * math.sqrt(-a) * ((beta - math.sinh(beta)) - (alpha - math.sinh(alpha))) / 2.0


@numba.njit(cache=True)
def compute_time_of_flight(x, lambda_parameter, revolutions):
    """
    Non-dimensional time of flight T(x) for a given number of revolutions.

    Parameters
    ----------
    x : float
        Universal variable, x > -1.
    lambda_parameter : float
        Geometry parameter in [-1, 1].
    revolutions : int
        Number of complete revolutions (0 for x >= 1).

    Returns
    -------
    float
        T(x).
    """
    distance = abs(x - 1.0)
    if LAGRANGE_THRESHOLD > distance > BATTIN_THRESHOLD:
        return lagrange_time_of_flight(x, lambda_parameter, revolutions)

    k = lambda_parameter * lambda_parameter
    e = x * x - 1.0
    rho = abs(e)
    z = math.sqrt(1.0 + k * e)

    if distance < BATTIN_THRESHOLD:
        eta = z - lambda_parameter * x
        s1 = 0.5 * (1.0 - lambda_parameter - x * eta)
        q = 4.0 / 3.0 * hypergeometric_f(s1, _SERIES_TOLERANCE)
        time_of_flight = (eta**3 * q + 4.0 * lambda_parameter * eta) / 2.0
        if revolutions > 0:
            time_of_flight += revolutions * math.pi / rho**1.5
        return time_of_flight

    y = math.sqrt(rho)
    g = x * z - lambda_parameter * e
    if e < 0.0:
        d = revolutions * math.pi + math.acos(g)
    else:
        f = y * (z - lambda_parameter * x)
        d = math.log(f + g)
    return (x - lambda_parameter * z - d / y) / e


@numba.njit(cache=True)
def time_of_flight_derivatives(x, lambda_parameter, revolutions):
    """
    T(x) with its first and second derivatives with respect to x.

    Returns
    -------
    tuple of float
        (T, dT/dx, d2T/dx2)
    """
    time_of_flight = compute_time_of_flight(x, lambda_parameter, revolutions)

    if abs(1.0 - x) < PARABOLIC_DERIVATIVE_THRESHOLD:
        # Analytic expressions are 0/0 at the parabola
        h = PARABOLIC_DERIVATIVE_THRESHOLD
        time_plus = compute_time_of_flight(x + h, lambda_parameter, revolutions)
        time_minus = compute_time_of_flight(x - h, lambda_parameter, revolutions)
        first = (time_plus - time_minus) / (2.0 * h)
        second = (time_plus - 2.0 * time_of_flight + time_minus) / (h * h)
        return time_of_flight, first, second

    l2 = lambda_parameter * lambda_parameter
    l3 = l2 * lambda_parameter
    one_minus_x2 = 1.0 - x * x
    y = math.sqrt(1.0 - l2 * one_minus_x2)
    first = (3.0 * time_of_flight * x - 2.0 + 2.0 * l3 * x / y) / one_minus_x2
    second = (3.0 * time_of_flight + 5.0 * x * first + 2.0 * (1.0 - l2) * l3 / y**3) / one_minus_x2
    return time_of_flight, first, second


@numba.njit(cache=True)
def zero_revolution_initial_guess(normalized_time_of_flight, lambda_parameter):
    """Izzo's regime-based starting value of x for a single-arc transfer."""
    t = normalized_time_of_flight
    t00 = math.acos(lambda_parameter) + lambda_parameter * math.sqrt(1.0 - lambda_parameter**2)
    t1 = 2.0 / 3.0 * (1.0 - lambda_parameter**3)
    if t >= t00:
        return -(t - t00) / (t - t00 + 4.0)
    if t <= t1:
        return t1 * (t1 - t) / (2.0 / 5.0 * (1.0 - lambda_parameter**5) * t) + 1.0
    return (t / t00) ** (math.log(2.0) / math.log(t1 / t00)) - 1.0


@numba.njit(cache=True)
def multi_revolution_initial_guesses(normalized_time_of_flight, revolutions):
    """Izzo's starting values of x for the left and right branches."""
    t = normalized_time_of_flight
    tmp = ((revolutions * math.pi + math.pi) / (8.0 * t)) ** (2.0 / 3.0)
    left = (tmp - 1.0) / (tmp + 1.0)
    tmp = ((8.0 * t) / (revolutions * math.pi)) ** (2.0 / 3.0)
    right = (tmp - 1.0) / (tmp + 1.0)
    return left, right
