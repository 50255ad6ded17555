"""
Root finders for scalar equations.

- Newton-Raphson iteration with optional bracketing safeguard
"""

from .newton_raphson import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_TOLERANCE,
    FunctionWithDerivative,
    NewtonRaphson,
    RootFunction,
    newton_raphson,
)

__all__ = [
    'DEFAULT_MAX_ITERATIONS',
    'DEFAULT_TOLERANCE',
    'FunctionWithDerivative',
    'NewtonRaphson',
    'RootFunction',
    'newton_raphson',
]
