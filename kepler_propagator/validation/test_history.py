"""
Unit Tests for Propagation History Module
=========================================

Tests:
------
TestPropagationHistory
  - test_epochs_kept_sorted          : out-of-order inserts are returned in epoch order
  - test_insert_overwrites_epoch     : inserting at an existing epoch replaces the state
  - test_missing_epoch_raises        : lookup of an absent epoch raises KeyError
  - test_states_are_copies           : stored and returned states are independent copies
  - test_to_arrays_shapes            : time (N,) and state (6, N) arrays
  - test_scaled                      : scaled() multiplies every component
  - test_copy_is_independent         : copy() shares no entries with the original
  - test_empty_history               : first / last on an empty history raise IndexError
  - test_non_finite_epoch_raises     : NaN and infinite epochs are rejected

Usage:
------
  python -m pytest kepler_propagator/validation/test_history.py -v
"""
import pytest
import numpy as np

from kepler_propagator.model.state         import State
from kepler_propagator.propagation.history import PropagationHistory


def make_state(value):
  return State([value, value + 1.0, value + 2.0, value + 3.0, value + 4.0, value + 5.0])


class TestPropagationHistory:

  def test_epochs_kept_sorted(self):
    history = PropagationHistory()
    for epoch in [120.0, 0.0, 60.0]:
      history.insert(epoch, make_state(epoch))

    assert history.epochs == [0.0, 60.0, 120.0]
    assert list(history) == [0.0, 60.0, 120.0]
    assert [state.x for _, state in history.items()] == [0.0, 60.0, 120.0]
    assert history.first()[0] == 0.0
    assert history.last() == (120.0, make_state(120.0))

  def test_insert_overwrites_epoch(self):
    history = PropagationHistory()
    history.insert(10.0, make_state(1.0))
    history.insert(10, make_state(2.0))
    assert len(history) == 1
    assert history[10.0] == make_state(2.0)

  def test_missing_epoch_raises(self):
    history = PropagationHistory()
    history.insert(0.0, make_state(0.0))
    with pytest.raises(KeyError):
      history[30.0]
    assert 30.0 not in history
    assert 0 in history
    assert history.get(30.0) is None
    # Failed lookups do not create entries
    assert len(history) == 1

  def test_states_are_copies(self):
    state   = make_state(0.0)
    history = PropagationHistory()
    history.insert(0.0, state)

    state.x = 99.0
    assert history[0.0].x == 0.0

    returned   = history[0.0]
    returned.y = 99.0
    assert history[0.0].y == 1.0

  def test_to_arrays_shapes(self):
    history = PropagationHistory()
    for epoch in [0.0, 60.0, 120.0, 180.0]:
      history.insert(epoch, make_state(epoch))

    time, state = history.to_arrays()
    assert time.shape  == (4,)
    assert state.shape == (6, 4)
    assert np.array_equal(time, [0.0, 60.0, 120.0, 180.0])
    assert np.array_equal(state[:, 2], make_state(120.0).state)

  def test_copy_is_independent(self):
    history = PropagationHistory()
    history.insert(0.0, make_state(0.0))
    history.insert(60.0, make_state(60.0))

    history_copy = history.copy()
    history_copy.insert(120.0, make_state(120.0))
    history_copy.insert(0.0, make_state(5.0))

    assert history.epochs == [0.0, 60.0]
    assert history[0.0] == make_state(0.0)
    assert history_copy.epochs == [0.0, 60.0, 120.0]
    assert history_copy[0.0] == make_state(5.0)

  def test_scaled(self):
    history = PropagationHistory()
    history.insert(0.0, make_state(1000.0))
    scaled = history.scaled(1e-3)
    assert np.allclose(scaled[0.0].state, make_state(1000.0).state * 1e-3)
    assert history[0.0] == make_state(1000.0)

  def test_empty_history(self):
    history = PropagationHistory()
    assert len(history) == 0
    with pytest.raises(IndexError):
      history.first()
    with pytest.raises(IndexError):
      history.last()
    time, state = history.to_arrays()
    assert time.shape == (0,) and state.shape == (6, 0)

  def test_non_finite_epoch_raises(self):
    history = PropagationHistory()
    with pytest.raises(ValueError):
      history.insert(float('nan'), make_state(0.0))
    with pytest.raises(ValueError):
      history.insert(np.inf, make_state(0.0))
