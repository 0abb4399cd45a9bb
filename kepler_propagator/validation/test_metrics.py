"""
Unit Tests for Validation Metrics Module
========================================

Tests:
------
TestCompareHistories
  - test_identical_histories_pass    : zero difference at every epoch
  - test_tolerance_is_strict         : a difference equal to the tolerance fails
  - test_epoch_mismatch_fails        : missing epochs on either side fail the comparison
  - test_no_common_epochs            : disjoint histories fail with an explanatory message

TestErrorStatistics
  - test_statistics_of_known_errors  : mean / rms / max / min / std of a simple error set
  - test_empty_raises                : empty error arrays raise ValueError

TestInvariantDrift
  - test_constant_state_has_no_drift : repeated states give zero energy and momentum drift
  - test_relative_drift              : relative drift divides by the reference magnitude

Usage:
------
  python -m pytest kepler_propagator/validation/test_metrics.py -v
"""
import pytest
import numpy as np

from kepler_propagator.model.constants     import SOLARSYSTEMCONSTANTS
from kepler_propagator.model.state         import State
from kepler_propagator.propagation.history import PropagationHistory
from kepler_propagator.validation.metrics  import (
  compare_histories,
  compute_angular_momentum_drift,
  compute_energy_drift,
  compute_position_error_statistics,
  compute_relative_drift,
)


def make_history(epochs, offset=0.0):
  history = PropagationHistory()
  for epoch in epochs:
    history.insert(epoch, State([7.0e6 + offset, 0.0, 0.0, 0.0, 7.5e3, 0.0]))
  return history


class TestCompareHistories:

  def test_identical_histories_pass(self):
    history    = make_history([0.0, 60.0, 120.0])
    comparison = compare_histories(history, make_history([0.0, 60.0, 120.0]), 1e-6)

    assert comparison['success']
    assert comparison['max_sum_abs_diff'] == 0.0
    assert comparison['pos_error'].shape == (3, 3)
    assert comparison['vel_error'].shape == (3, 3)
    assert np.array_equal(comparison['epochs'], [0.0, 60.0, 120.0])

  def test_tolerance_is_strict(self):
    history   = make_history([0.0, 60.0])
    benchmark = make_history([0.0, 60.0], offset=0.5)

    comparison = compare_histories(history, benchmark, 0.5)
    assert not comparison['success']
    assert comparison['failed_epochs'] == [0.0, 60.0]
    assert np.allclose(comparison['sum_abs_diff'], [0.5, 0.5])

    assert compare_histories(history, benchmark, 0.5000001)['success']

  def test_epoch_mismatch_fails(self):
    comparison = compare_histories(make_history([0.0, 60.0, 120.0]), make_history([0.0, 60.0, 180.0]), 1e-6)
    assert not comparison['success']
    assert comparison['missing_in_benchmark'] == [120.0]
    assert comparison['missing_in_history']   == [180.0]
    assert not comparison['failed_epochs']

  def test_no_common_epochs(self):
    comparison = compare_histories(make_history([0.0]), make_history([60.0]), 1e-6)
    assert not comparison['success']
    assert 'No common epochs' in comparison['message']
    assert comparison['sum_abs_diff'].shape == (0,)


class TestErrorStatistics:

  def test_statistics_of_known_errors(self):
    pos_error = np.array([
      [3.0, 0.0],
      [4.0, 0.0],
      [0.0, 1.0],
    ])
    stats = compute_position_error_statistics(pos_error)
    assert stats['max']  == 5.0
    assert stats['min']  == 1.0
    assert np.isclose(stats['mean'], 3.0)
    assert np.isclose(stats['rms'],  np.sqrt(13.0))
    assert np.isclose(stats['std'],  2.0)

    assert compute_position_error_statistics(np.array([-2.0, 2.0]))['mean'] == 2.0

  def test_empty_raises(self):
    with pytest.raises(ValueError):
      compute_position_error_statistics(np.zeros((3, 0)))


class TestInvariantDrift:

  def test_constant_state_has_no_drift(self):
    states = np.tile(np.array([[7.0e6], [1.0e5], [0.0], [0.0], [7.5e3], [10.0]]), (1, 5))
    assert np.all(compute_energy_drift(states, SOLARSYSTEMCONSTANTS.EARTH.GP) == 0.0)
    assert np.all(compute_angular_momentum_drift(states) == 0.0)

  def test_relative_drift(self):
    drift = np.array([0.0, -4.0, 2.0])
    assert compute_relative_drift(drift) == 4.0
    assert compute_relative_drift(drift, -8.0) == 0.5
    assert compute_relative_drift(np.array([]), 1.0) == 0.0
