"""
Lambert targeting.

- Izzo's single-arc targeter with lazy, memoised solving
- Multi-revolution targeter with left/right branch selection
- Batch solving of independent problems
"""

from .batch import LambertBatchResult, solve_lambert_batch
from .geometry import LambertGeometry, compute_lambert_geometry
from .izzo import LambertSolution, LambertTargeterIzzo, ZeroRevolutionLambertTargeterIzzo
from .multi_revolution import MultiRevolutionLambertTargeterIzzo

__all__ = [
    'LambertBatchResult',
    'LambertGeometry',
    'LambertSolution',
    'LambertTargeterIzzo',
    'MultiRevolutionLambertTargeterIzzo',
    'ZeroRevolutionLambertTargeterIzzo',
    'compute_lambert_geometry',
    'solve_lambert_batch',
]
