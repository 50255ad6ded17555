"""
Numerical integrators and trajectory propagation.

- Fixed step-size explicit schemes (Euler, midpoint, classical Runge-Kutta 4)
- Variable step-size embedded Runge-Kutta (Fehlberg 4(5), Dormand-Prince 5(4))
- Two-body propagation with scipy for verification of Lambert arcs
"""

from .coefficients import CoefficientSet, IntegrationScheme, RungeKuttaCoefficients, get_coefficients
from .integrator import EulerIntegrator, NumericalIntegrator
from .propagator import propagate_lambert_arc, propagate_two_body, two_body_acceleration
from .runge_kutta import RungeKuttaVariableStepSizeIntegrator

__all__ = [
    'CoefficientSet',
    'EulerIntegrator',
    'IntegrationScheme',
    'NumericalIntegrator',
    'RungeKuttaCoefficients',
    'RungeKuttaVariableStepSizeIntegrator',
    'get_coefficients',
    'propagate_lambert_arc',
    'propagate_two_body',
    'two_body_acceleration',
]
