"""
Cartesian State
===============

Six-component kinematic state (position and velocity) with named accessors.
"""
import numpy as np

from typing import Iterable, Union


class State:
  """
  Cartesian state vector [x, y, z, xdot, ydot, zdot].

  Units follow the caller's unit system; the propagation engine works in meters
  and seconds.
  """
  SIZE = 6

  def __init__(
    self,
    values : Union[Iterable[float], np.ndarray] = (0.0, 0.0, 0.0, 0.0, 0.0, 0.0),
  ):
    state = np.array(values, dtype=float).flatten()
    if state.size != self.SIZE:
      raise ValueError(f"State requires {self.SIZE} components, received {state.size}")
    self.state = state

  @classmethod
  def from_pos_vel(
    cls,
    pos_vec : np.ndarray,
    vel_vec : np.ndarray,
  ) -> 'State':
    """
    Build a state from separate position and velocity vectors.
    """
    pos_vec = np.asarray(pos_vec, dtype=float).flatten()
    vel_vec = np.asarray(vel_vec, dtype=float).flatten()
    if pos_vec.size != 3 or vel_vec.size != 3:
      raise ValueError("Position and velocity vectors must have 3 components each")
    return cls(np.concatenate((pos_vec, vel_vec)))

  # Position components
  @property
  def x(self) -> float:
    return float(self.state[0])

  @x.setter
  def x(self, value: float) -> None:
    self.state[0] = value

  @property
  def y(self) -> float:
    return float(self.state[1])

  @y.setter
  def y(self, value: float) -> None:
    self.state[1] = value

  @property
  def z(self) -> float:
    return float(self.state[2])

  @z.setter
  def z(self, value: float) -> None:
    self.state[2] = value

  # Velocity components
  @property
  def xdot(self) -> float:
    return float(self.state[3])

  @xdot.setter
  def xdot(self, value: float) -> None:
    self.state[3] = value

  @property
  def ydot(self) -> float:
    return float(self.state[4])

  @ydot.setter
  def ydot(self, value: float) -> None:
    self.state[4] = value

  @property
  def zdot(self) -> float:
    return float(self.state[5])

  @zdot.setter
  def zdot(self, value: float) -> None:
    self.state[5] = value

  # Vector views
  @property
  def pos_vec(self) -> np.ndarray:
    """Position vector (copy)."""
    return self.state[0:3].copy()

  @property
  def vel_vec(self) -> np.ndarray:
    """Velocity vector (copy)."""
    return self.state[3:6].copy()

  def copy(self) -> 'State':
    return State(self.state.copy())

  def scaled(
    self,
    factor : float,
  ) -> 'State':
    """
    Return a new state with every component multiplied by factor (unit conversion).
    """
    return State(self.state * factor)

  def __array__(self, dtype=None, copy=None):
    if dtype is None:
      return self.state.copy()
    return self.state.astype(dtype)

  def __getitem__(self, index):
    return self.state[index]

  def __len__(self) -> int:
    return self.SIZE

  def __iter__(self):
    return iter(self.state.tolist())

  def __eq__(self, other) -> bool:
    if not isinstance(other, State):
      return NotImplemented
    return bool(np.array_equal(self.state, other.state))

  __hash__ = None

  def __repr__(self) -> str:
    components = ', '.join(f"{value:.12e}" for value in self.state)
    return f"State([{components}])"
