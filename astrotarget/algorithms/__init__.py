"""
Astrodynamics algorithms for trajectory targeting and propagation.

This package provides the numerical building blocks used to design and verify
transfer trajectories, organized into several submodules:

- root_finders: Newton-Raphson iteration for scalar equations
- integrators:  Fixed and variable step-size integrators, two-body propagation
- lambert:      Izzo's Lambert targeters (single and multi-revolution)
- core:         Libration points of the restricted three-body problem
"""

# Import commonly used functions for easier access
from .core.lagrange_points import get_lagrange_point, lagrange_point_locations
from .exceptions import (
    ConvergenceError,
    InvalidArgumentError,
    MinimumStepSizeExceededError,
    VanishingDerivativeError,
)
from .integrators import (
    CoefficientSet,
    EulerIntegrator,
    IntegrationScheme,
    NumericalIntegrator,
    RungeKuttaVariableStepSizeIntegrator,
    get_coefficients,
    propagate_lambert_arc,
    propagate_two_body,
)
from .lambert import (
    LambertTargeterIzzo,
    MultiRevolutionLambertTargeterIzzo,
    ZeroRevolutionLambertTargeterIzzo,
    solve_lambert_batch,
)
from .root_finders import NewtonRaphson, newton_raphson

__all__ = [
    # Errors
    'ConvergenceError',
    'InvalidArgumentError',
    'MinimumStepSizeExceededError',
    'VanishingDerivativeError',

    # Root finding
    'NewtonRaphson',
    'newton_raphson',

    # Integration
    'CoefficientSet',
    'EulerIntegrator',
    'IntegrationScheme',
    'NumericalIntegrator',
    'RungeKuttaVariableStepSizeIntegrator',
    'get_coefficients',
    'propagate_lambert_arc',
    'propagate_two_body',

    # Lambert targeting
    'LambertTargeterIzzo',
    'MultiRevolutionLambertTargeterIzzo',
    'ZeroRevolutionLambertTargeterIzzo',
    'solve_lambert_batch',

    # Libration points
    'get_lagrange_point',
    'lagrange_point_locations',
]
