"""
Propagation History
===================

Ordered epoch -> State mapping produced by the series propagator.
"""
import bisect
import numpy as np

from typing import Iterator, Optional

from kepler_propagator.model.state import State


class PropagationHistory:
  """
  Time-indexed states of one body, kept in increasing epoch order.

  Entries are added through insert(); lookups of missing epochs raise KeyError
  rather than creating an empty state.
  """
  def __init__(self):
    self._epochs : list[float]        = []
    self._states : dict[float, State] = {}

  def insert(
    self,
    epoch : float,
    state : State,
  ) -> None:
    """
    Store a copy of state at epoch; an existing entry at the same epoch is
    overwritten.
    """
    epoch = float(epoch)
    if not np.isfinite(epoch):
      raise ValueError(f"Epoch must be finite. Got: {epoch}")
    if epoch not in self._states:
      bisect.insort(self._epochs, epoch)
    self._states[epoch] = state.copy() if isinstance(state, State) else State(state)

  def get(
    self,
    epoch   : float,
    default : Optional[State] = None,
  ) -> Optional[State]:
    state = self._states.get(float(epoch))
    return state.copy() if state is not None else default

  def __getitem__(self, epoch: float) -> State:
    return self._states[float(epoch)].copy()

  def __contains__(self, epoch) -> bool:
    return float(epoch) in self._states

  def __len__(self) -> int:
    return len(self._epochs)

  def __iter__(self) -> Iterator[float]:
    return iter(list(self._epochs))

  def items(self) -> Iterator[tuple[float, State]]:
    for epoch in self._epochs:
      yield epoch, self._states[epoch].copy()

  @property
  def epochs(self) -> list[float]:
    return list(self._epochs)

  @property
  def states(self) -> list[State]:
    return [self._states[epoch].copy() for epoch in self._epochs]

  def first(self) -> tuple[float, State]:
    if not self._epochs:
      raise IndexError("Propagation history is empty")
    epoch = self._epochs[0]
    return epoch, self._states[epoch].copy()

  def last(self) -> tuple[float, State]:
    if not self._epochs:
      raise IndexError("Propagation history is empty")
    epoch = self._epochs[-1]
    return epoch, self._states[epoch].copy()

  def to_arrays(self) -> tuple[np.ndarray, np.ndarray]:
    """
    Time and state arrays.

    Output:
    -------
      time : np.ndarray
        Epochs, shape (N,).
      state : np.ndarray
        States, shape (6, N).
    """
    time  = np.array(self._epochs, dtype=float)
    state = np.zeros((State.SIZE, len(self._epochs)))
    for idx, epoch in enumerate(self._epochs):
      state[:, idx] = self._states[epoch].state
    return time, state

  def copy(self) -> 'PropagationHistory':
    history_copy = PropagationHistory()
    history_copy._epochs = list(self._epochs)
    history_copy._states = {epoch: state.copy() for epoch, state in self._states.items()}
    return history_copy

  def scaled(
    self,
    factor : float,
  ) -> 'PropagationHistory':
    """
    Copy of this history with every state component multiplied by factor.
    """
    scaled_history = PropagationHistory()
    for epoch in self._epochs:
      scaled_history.insert(epoch, self._states[epoch].scaled(factor))
    return scaled_history

  def __repr__(self) -> str:
    if not self._epochs:
      return "PropagationHistory(empty)"
    return f"PropagationHistory({len(self._epochs)} samples, epochs {self._epochs[0]} .. {self._epochs[-1]})"
