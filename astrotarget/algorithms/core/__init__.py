"""
Core functions of the Circular Restricted Three-Body Problem (CR3BP).

This package contains the libration point locations, whose collinear members
are found with the package's Newton-Raphson solver.
"""

from .lagrange_points import get_lagrange_point, lagrange_point_locations

__all__ = [
    'lagrange_point_locations',
    'get_lagrange_point',
]
