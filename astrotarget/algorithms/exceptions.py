"""
Exception types raised by the astrotarget algorithms.

Two families of failure are distinguished:

- ``InvalidArgumentError`` signals a bad request (non-physical inputs,
  degenerate geometry, infeasible revolution counts).
- ``ConvergenceError`` signals a numerical failure of an otherwise valid
  request (iteration cap reached, vanishing derivative).

Both propagate to the caller; none of the algorithms retry internally.
"""


class InvalidArgumentError(ValueError):
    """Raised when a problem definition or request is invalid."""


class ConvergenceError(RuntimeError):
    """
    Raised when an iterative procedure fails to converge.

    Parameters
    ----------
    message : str
        Description of the failure.
    iterations : int, optional
        Number of iterations performed before giving up.
    last_value : float, optional
        Last iterate computed. It is NOT a valid root.
    """

    def __init__(self, message, iterations=None, last_value=None):
        super().__init__(message)
        self.iterations = iterations
        self.last_value = last_value


class VanishingDerivativeError(ConvergenceError):
    """Raised when a Newton-Raphson step would divide by a zero derivative."""


class MinimumStepSizeExceededError(RuntimeError):
    """
    Raised when a variable step-size integrator needs a step below its minimum.

    Parameters
    ----------
    minimum_step_size : float
        Smallest step size the integrator was allowed to take.
    requested_step_size : float
        Step size the error control asked for.
    """

    def __init__(self, minimum_step_size, requested_step_size):
        super().__init__(
            f"Minimum step size exceeded: requested {requested_step_size:.3e}, "
            f"minimum is {minimum_step_size:.3e}"
        )
        self.minimum_step_size = minimum_step_size
        self.requested_step_size = requested_step_size
