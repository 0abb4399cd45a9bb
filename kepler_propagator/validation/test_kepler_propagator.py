"""
Unit Tests for Kepler Propagator Module
=======================================

Tests for single-step closed-form two-body propagation.

Tests:
------
TestPropagateState
  - test_zero_elapsed_time_returns_copy      : dt = 0 returns an equal, independent state
  - test_one_period_returns_to_start         : propagating one period reproduces the initial state
  - test_forward_then_backward               : +dt then -dt reproduces the initial state
  - test_matches_universal_variable_elliptic : agreement with an independent propagator (elliptic)
  - test_matches_universal_variable_open     : agreement with an independent propagator (hyperbolic, parabolic)
  - test_two_body_invariants_conserved       : energy and angular momentum preserved over many steps
  - test_degenerate_state_raises             : zero velocity raises DegenerateOrbitError

TestKeplerPropagator
  - test_propagate_does_not_mutate_body      : propagate() is pure
  - test_missing_central_body_raises         : None central body raises ConfigurationError
  - test_missing_state_raises                : body without state raises ConfigurationError
  - test_registry                            : add_body / set_central_body / get_central_body
  - test_duplicate_body_name_raises          : different body with a registered name is rejected
  - test_set_newton_raphson                  : injected root finder settings are used

Usage:
------
  python -m pytest kepler_propagator/validation/test_kepler_propagator.py -v
"""
import pytest
import numpy as np

from kepler_propagator.model.body                    import Body, CentralBody
from kepler_propagator.model.constants               import SOLARSYSTEMCONSTANTS
from kepler_propagator.model.errors                  import ConfigurationError, ConvergenceError, DegenerateOrbitError, UnknownBodyError
from kepler_propagator.model.orbit_converter         import KeplerianElements, OrbitConverter
from kepler_propagator.model.root_solvers            import NewtonRaphson
from kepler_propagator.model.state                   import State
from kepler_propagator.propagation.kepler_propagator import KeplerPropagator, propagate_state
from kepler_propagator.validation.metrics            import compute_angular_momentum_drift, compute_energy_drift


GP = SOLARSYSTEMCONSTANTS.EARTH.GP


def assert_states_close(state_a, state_b, pos_tol=1e-3, vel_tol=1e-6):
  assert np.allclose(np.asarray(state_a)[0:3], np.asarray(state_b)[0:3], rtol=0.0, atol=pos_tol)
  assert np.allclose(np.asarray(state_a)[3:6], np.asarray(state_b)[3:6], rtol=0.0, atol=vel_tol)


class TestPropagateState:

  def test_zero_elapsed_time_returns_copy(self, leo_initial_state):
    state_f = propagate_state(leo_initial_state, GP, 0.0)
    assert state_f == leo_initial_state
    assert state_f is not leo_initial_state
    state_f.x = 0.0
    assert leo_initial_state.x != 0.0

  def test_one_period_returns_to_start(self, leo_initial_state):
    period  = OrbitConverter.to_keplerian(leo_initial_state, GP).period(GP)
    state_f = propagate_state(leo_initial_state, GP, period)
    assert_states_close(state_f, leo_initial_state)

  def test_forward_then_backward(self, random_states):
    for state in random_states(num_samples=25, seed=5):
      forward = propagate_state(state, GP, 5000.0)
      back    = propagate_state(forward, GP, -5000.0)
      assert_states_close(back, state)

  def test_matches_universal_variable_elliptic(self, random_states, universal_variable_benchmark):
    for state in random_states(num_samples=25, seed=9, ecc_max=0.8):
      for elapsed_time in [-7200.0, 60.0, 3600.0, 86400.0]:
        expected = universal_variable_benchmark(state.state, GP, elapsed_time)
        assert_states_close(propagate_state(state, GP, elapsed_time), expected)

  def test_matches_universal_variable_open(self, hyperbolic_initial_state, parabolic_initial_state, universal_variable_benchmark):
    for state in [hyperbolic_initial_state, parabolic_initial_state]:
      for elapsed_time in [-1800.0, 600.0, 3600.0]:
        expected = universal_variable_benchmark(state.state, GP, elapsed_time)
        assert_states_close(propagate_state(state, GP, elapsed_time), expected)

  def test_two_body_invariants_conserved(self, leo_initial_state):
    states = [leo_initial_state]
    for _ in range(48):
      states.append(propagate_state(states[-1], GP, 1800.0))
    state_array = np.array([state.state for state in states]).T

    energy_o  = OrbitConverter.pv_to_specific_energy(leo_initial_state.pos_vec, leo_initial_state.vel_vec, GP)
    ang_mom_o = np.linalg.norm(np.cross(leo_initial_state.pos_vec, leo_initial_state.vel_vec))
    assert np.max(np.abs(compute_energy_drift(state_array, GP))) < 1e-10 * abs(energy_o)
    assert np.max(compute_angular_momentum_drift(state_array)) < 1e-10 * ang_mom_o

  def test_degenerate_state_raises(self):
    with pytest.raises(DegenerateOrbitError):
      propagate_state(State([7000e3, 0.0, 0.0, 0.0, 0.0, 0.0]), GP, 60.0)


class TestKeplerPropagator:

  def test_propagate_does_not_mutate_body(self, earth, leo_initial_state):
    propagator = KeplerPropagator()
    body       = Body('asterix', leo_initial_state.copy())
    state_f    = propagator.propagate(body, earth, 3600.0)
    assert body.state == leo_initial_state
    assert state_f != leo_initial_state

  def test_missing_central_body_raises(self, leo_initial_state):
    propagator = KeplerPropagator()
    with pytest.raises(ConfigurationError):
      propagator.propagate(Body('asterix', leo_initial_state), None, 60.0)

  def test_missing_state_raises(self, earth):
    propagator = KeplerPropagator()
    with pytest.raises(ConfigurationError):
      propagator.propagate(Body('asterix'), earth, 60.0)

  def test_registry(self, earth, leo_initial_state):
    propagator = KeplerPropagator()
    body       = Body('asterix', leo_initial_state)
    other      = Body('obelix', leo_initial_state)

    with pytest.raises(UnknownBodyError):
      propagator.get_central_body(body)

    propagator.add_body(body)
    assert propagator.has_body(body)
    with pytest.raises(ConfigurationError):
      propagator.get_central_body(body)

    propagator.set_central_body(other, earth)
    assert propagator.get_central_body(other) is earth
    assert propagator.bodies == [body, other]

    state_f = propagator.propagate_body(other, 600.0)
    assert_states_close(state_f, propagate_state(leo_initial_state, GP, 600.0), pos_tol=0.0, vel_tol=0.0)

  def test_duplicate_body_name_raises(self, leo_initial_state):
    propagator = KeplerPropagator()
    body       = Body('asterix', leo_initial_state)
    propagator.add_body(body)
    propagator.add_body(body)
    with pytest.raises(ValueError):
      propagator.add_body(Body('asterix', leo_initial_state))

  def test_set_newton_raphson(self, earth):
    elements   = KeplerianElements(sma=2.0e7, ecc=0.9, inc=0.5, aop=0.1, raan=0.2, ta=0.3)
    body       = Body('eccentric', OrbitConverter.to_cartesian(elements, earth.gp))
    propagator = KeplerPropagator()
    propagator.set_newton_raphson(NewtonRaphson(tol=1e-12, max_iter=1))
    with pytest.raises(ConvergenceError):
      propagator.propagate(body, earth, 1000.0)
