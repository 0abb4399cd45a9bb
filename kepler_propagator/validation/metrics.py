"""
Validation Metrics Module
=========================

Utilities for comparing propagation histories and checking two-body
invariants.

Notes:
------
Specific energy and angular momentum are constants of the two-body problem,
so their drift over a Kepler propagation measures only numerical error.
"""
import numpy as np

from typing import Optional

from kepler_propagator.propagation.history import PropagationHistory


def compare_histories(
  history   : PropagationHistory,
  benchmark : PropagationHistory,
  tolerance : float,
) -> dict:
  """
  Compare a propagation history against a benchmark sample by sample.

  Input:
  ------
    history : PropagationHistory
      Computed history.
    benchmark : PropagationHistory
      Reference history in the same units as history.
    tolerance : float
      Allowed summed absolute difference of the six state components per
      sample.

  Output:
  -------
    comparison : dict
      success : bool
        All common samples within tolerance and no missing epochs.
      message : str
      epochs : np.ndarray
        Epochs present in both histories, shape (N,).
      sum_abs_diff : np.ndarray
        Summed absolute state difference per common epoch, shape (N,).
      max_sum_abs_diff : float
      pos_error : np.ndarray
        Position difference history - benchmark, shape (3, N).
      vel_error : np.ndarray
        Velocity difference history - benchmark, shape (3, N).
      failed_epochs : list[float]
        Common epochs whose difference exceeds tolerance.
      missing_in_benchmark : list[float]
      missing_in_history : list[float]
      tolerance : float
  """
  history_epochs   = set(history.epochs)
  benchmark_epochs = set(benchmark.epochs)
  common_epochs    = sorted(history_epochs & benchmark_epochs)

  missing_in_benchmark = sorted(history_epochs - benchmark_epochs)
  missing_in_history   = sorted(benchmark_epochs - history_epochs)

  num_common = len(common_epochs)
  diff       = np.zeros((6, num_common))
  for idx, epoch in enumerate(common_epochs):
    diff[:, idx] = history[epoch].state - benchmark[epoch].state

  sum_abs_diff     = np.sum(np.abs(diff), axis=0)
  max_sum_abs_diff = float(np.max(sum_abs_diff)) if num_common > 0 else 0.0
  failed_epochs    = [epoch for epoch, value in zip(common_epochs, sum_abs_diff) if not value < tolerance]

  success = num_common > 0 and not failed_epochs and not missing_in_benchmark and not missing_in_history
  if num_common == 0:
    message = "No common epochs between history and benchmark"
  elif failed_epochs:
    message = f"{len(failed_epochs)} of {num_common} samples exceed tolerance {tolerance:.3e}"
  elif missing_in_benchmark or missing_in_history:
    message = f"Epoch mismatch: {len(missing_in_benchmark)} missing in benchmark, {len(missing_in_history)} missing in history"
  else:
    message = f"All {num_common} samples within tolerance {tolerance:.3e}"

  return {
    'success'              : success,
    'message'              : message,
    'epochs'               : np.array(common_epochs, dtype=float),
    'sum_abs_diff'         : sum_abs_diff,
    'max_sum_abs_diff'     : max_sum_abs_diff,
    'pos_error'            : diff[0:3, :],
    'vel_error'            : diff[3:6, :],
    'failed_epochs'        : failed_epochs,
    'missing_in_benchmark' : missing_in_benchmark,
    'missing_in_history'   : missing_in_history,
    'tolerance'            : tolerance,
  }


def compute_position_error_statistics(
  pos_error : np.ndarray,
) -> dict:
  """
  Compute statistics for a position (or velocity) error.

  Input:
  ------
    pos_error : np.ndarray
      Error array, shape (3, N), or magnitudes, shape (N,).

  Output:
  -------
    stats : dict
      mean, rms, max, min and std of the error magnitude.
  """
  error_mag = np.linalg.norm(pos_error, axis=0) if pos_error.ndim == 2 else np.abs(pos_error)
  if error_mag.size == 0:
    raise ValueError("Cannot compute error statistics of an empty array")

  return {
    'mean' : float(np.mean(error_mag)),
    'rms'  : float(np.sqrt(np.mean(error_mag**2))),
    'max'  : float(np.max(error_mag)),
    'min'  : float(np.min(error_mag)),
    'std'  : float(np.std(error_mag)),
  }


def compute_energy_drift(
  states : np.ndarray,
  gp     : float,
) -> np.ndarray:
  """
  Specific orbital energy minus its initial value at each sample.

  Input:
  ------
    states : np.ndarray
      State vectors, shape (6, N).
    gp : float
      Gravitational parameter [m³/s²].

  Output:
  -------
    energy_drift : np.ndarray
      Energy change relative to the first sample [m²/s²], shape (N,).
  """
  pos_mag = np.linalg.norm(states[0:3, :], axis=0)
  vel_mag = np.linalg.norm(states[3:6, :], axis=0)
  energy  = 0.5 * vel_mag**2 - gp / pos_mag
  return energy - energy[0]


def compute_angular_momentum_drift(
  states : np.ndarray,
) -> np.ndarray:
  """
  Angular momentum vector change relative to the first sample, as a
  magnitude at each sample [m²/s], shape (N,).
  """
  ang_mom = np.cross(states[0:3, :].T, states[3:6, :].T).T
  return np.linalg.norm(ang_mom - ang_mom[:, [0]], axis=0)


def compute_relative_drift(
  drift     : np.ndarray,
  reference : Optional[float] = None,
) -> float:
  """
  Largest absolute drift divided by |reference| (no scaling when reference
  is None or zero).
  """
  max_drift = float(np.max(np.abs(drift))) if drift.size > 0 else 0.0
  if reference is None or reference == 0.0:
    return max_drift
  return max_drift / abs(reference)
