"""
Unit Tests for State and Body Modules
=====================================

Tests:
------
TestState
  - test_named_accessors_match_components : x..zdot read the six components
  - test_setters_update_components        : setters write the six components
  - test_wrong_size_raises                : non-6 inputs are rejected
  - test_copy_is_independent              : copies do not share storage
  - test_vector_views_are_copies          : pos_vec / vel_vec cannot mutate the state
  - test_equality_is_exact                : equality compares all components exactly

TestBodies
  - test_central_body_from_name           : predefined bodies resolve case-insensitively
  - test_central_body_unknown_name        : unknown names raise ValueError
  - test_central_body_invalid_gp          : non-positive gp raises ValueError
  - test_body_coerces_state               : Body converts sequences to State
  - test_body_empty_name                  : empty names raise ValueError

Usage:
------
  python -m pytest kepler_propagator/validation/test_state.py -v
"""
import pytest
import numpy as np

from kepler_propagator.model.body      import Body, CentralBody
from kepler_propagator.model.constants import SOLARSYSTEMCONSTANTS
from kepler_propagator.model.state     import State


class TestState:

  def test_named_accessors_match_components(self):
    state = State([1.0, 2.0, 3.0, 4.0, 5.0, 6.0])
    assert (state.x, state.y, state.z) == (1.0, 2.0, 3.0)
    assert (state.xdot, state.ydot, state.zdot) == (4.0, 5.0, 6.0)
    assert np.array_equal(state.pos_vec, [1.0, 2.0, 3.0])
    assert np.array_equal(state.vel_vec, [4.0, 5.0, 6.0])

  def test_setters_update_components(self):
    state      = State()
    state.x    = 1.0
    state.y    = 2.0
    state.z    = 3.0
    state.xdot = 4.0
    state.ydot = 5.0
    state.zdot = 6.0
    assert np.array_equal(state.state, [1.0, 2.0, 3.0, 4.0, 5.0, 6.0])

  def test_wrong_size_raises(self):
    with pytest.raises(ValueError):
      State([1.0, 2.0, 3.0])
    with pytest.raises(ValueError):
      State.from_pos_vel([1.0, 2.0], [3.0, 4.0, 5.0])

  def test_copy_is_independent(self):
    state      = State([1.0, 2.0, 3.0, 4.0, 5.0, 6.0])
    state_copy = state.copy()
    state_copy.x = 10.0
    assert state.x == 1.0
    assert state_copy == State([10.0, 2.0, 3.0, 4.0, 5.0, 6.0])

  def test_vector_views_are_copies(self):
    state   = State([1.0, 2.0, 3.0, 4.0, 5.0, 6.0])
    pos_vec = state.pos_vec
    pos_vec[0] = 99.0
    assert state.x == 1.0

  def test_equality_is_exact(self):
    state = State([1.0, 2.0, 3.0, 4.0, 5.0, 6.0])
    assert state == State(np.array([1.0, 2.0, 3.0, 4.0, 5.0, 6.0]))
    assert state != State([1.0, 2.0, 3.0, 4.0, 5.0, 6.0 + 1e-12])
    assert np.array_equal(np.asarray(state), state.state)


class TestBodies:

  def test_central_body_from_name(self):
    earth = CentralBody.from_name('earth')
    assert earth.name == 'EARTH'
    assert earth.gp == SOLARSYSTEMCONSTANTS.EARTH.GP
    assert CentralBody.earth() == earth

  def test_central_body_unknown_name(self):
    with pytest.raises(ValueError):
      CentralBody.from_name('vulcan')

  def test_central_body_invalid_gp(self):
    with pytest.raises(ValueError):
      CentralBody('custom', 0.0)
    with pytest.raises(ValueError):
      CentralBody('custom', float('nan'))

  def test_body_coerces_state(self):
    body = Body('asterix', [1.0, 2.0, 3.0, 4.0, 5.0, 6.0])
    assert isinstance(body.state, State)
    assert Body('obelix').state is None

  def test_body_empty_name(self):
    with pytest.raises(ValueError):
      Body('  ')
