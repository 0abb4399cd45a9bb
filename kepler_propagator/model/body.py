"""
Bodies
======

Propagated bodies and the central bodies they orbit.
"""
import numpy as np

from dataclasses import dataclass, field
from typing      import Optional

from kepler_propagator.model.constants import SOLARSYSTEMCONSTANTS
from kepler_propagator.model.state     import State


@dataclass(frozen=True)
class CentralBody:
  """
  Attracting body of a two-body problem.

  Attributes:
  -----------
    name : str
      Body name.
    gp : float
      Gravitational parameter [m³/s²].
  """
  name : str
  gp   : float

  def __post_init__(self):
    if not self.name or not self.name.strip():
      raise ValueError("Central body name cannot be empty.")
    if not (np.isfinite(self.gp) and self.gp > 0.0):
      raise ValueError(f"Gravitational parameter must be positive and finite. Got: {self.gp}")

  @classmethod
  def from_name(
    cls,
    name : str,
  ) -> 'CentralBody':
    """
    Predefined central body from SOLARSYSTEMCONSTANTS (e.g. 'earth', 'MARS').
    """
    key = name.strip().upper()
    if key not in SOLARSYSTEMCONSTANTS.NAME_TO_GP:
      raise ValueError(f"Unknown central body '{name}'. Supported: {list(SOLARSYSTEMCONSTANTS.NAME_TO_GP.keys())}")
    return cls(name=key, gp=SOLARSYSTEMCONSTANTS.NAME_TO_GP[key])

  @classmethod
  def earth(cls) -> 'CentralBody':
    return cls.from_name('EARTH')


@dataclass(eq=False)
class Body:
  """
  A propagated body: an identifier plus its current Cartesian state.
  Bodies compare and hash by identity; registries key them by name.
  """
  name  : str
  state : Optional[State] = field(default=None)

  def __post_init__(self):
    if not self.name or not self.name.strip():
      raise ValueError("Body name cannot be empty.")
    if self.state is not None and not isinstance(self.state, State):
      self.state = State(self.state)
