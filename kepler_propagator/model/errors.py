"""
Propagation Errors
==================

Exception types raised by the Kepler propagation engine.

Each error also derives from the builtin exception a caller would naturally
catch for the same condition (ValueError for bad inputs, RuntimeError for
numerical or lifecycle failures, KeyError for missing registry entries).
"""
from typing import Optional


class PropagationError(Exception):
  """
  Base class for all errors raised by the propagation engine.
  """


class DegenerateOrbitError(PropagationError, ValueError):
  """
  Raised when a Cartesian state does not define an orbit plane: zero position,
  zero velocity, or zero specific angular momentum (rectilinear motion).
  """


class ConvergenceError(PropagationError, RuntimeError):
  """
  Raised when a Newton-Raphson iteration exhausts its iteration budget without
  meeting the residual tolerance.

  Attributes:
  -----------
    last_iterate : float
      Last value of the iteration variable.
    residual : float
      Function value at the last iterate.
    num_iter : int
      Number of iterations performed.
  """
  def __init__(
    self,
    message      : str,
    last_iterate : Optional[float] = None,
    residual     : Optional[float] = None,
    num_iter     : Optional[int]   = None,
  ):
    super().__init__(message)
    self.last_iterate = last_iterate
    self.residual     = residual
    self.num_iter     = num_iter


class ConfigurationError(PropagationError, ValueError):
  """
  Raised when a propagation run is not configured well enough to execute:
  missing central body or propagator, invalid epoch range, non-positive output
  interval.
  """


class UnknownBodyError(PropagationError, KeyError):
  """
  Raised when a body that was never registered is queried.
  """
  def __str__(self):
    # KeyError quotes its argument; keep the message readable
    return str(self.args[0]) if self.args else ''


class InvalidStateError(PropagationError, RuntimeError):
  """
  Raised when an operation is not allowed in the series propagator's current
  lifecycle state.
  """
