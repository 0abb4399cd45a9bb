import numpy as np

from typing import Any

from kepler_propagator.validation.metrics import compute_position_error_statistics


def get_equal_limits(
  ax              : Any,
  buffer_fraction : float = 0.0,
  min_half_range  : float = 0.0,
) -> tuple[float, float]:
  """
  Common limits for the three axes of a 3D plot, so orbits keep their shape.

  Input:
  ------
    ax : mpl_toolkits.mplot3d.axes3d.Axes3D
      The 3D axes object.
    buffer_fraction : float
      Fraction of the range added on each side (default 0.0).
    min_half_range : float
      Smallest half-width of the limits about the origin, e.g. the central
      body radius (default 0.0).

  Output:
  -------
    min_limit : float
    max_limit : float
  """
  limits    = np.array([ax.get_xlim3d(), ax.get_ylim3d(), ax.get_zlim3d()])
  min_limit = min(float(np.min(limits[:, 0])), -min_half_range)
  max_limit = max(float(np.max(limits[:, 1])),  min_half_range)

  buffer = buffer_fraction * (max_limit - min_limit)
  return min_limit - buffer, max_limit + buffer


def add_stats(
  ax    : Any,
  data  : np.ndarray,
  label : str,
  units : str = '',
) -> None:
  """
  Add a text box with the mean, RMS and max magnitude of data to an axis.
  """
  stats  = compute_position_error_statistics(np.asarray(data, dtype=float))
  suffix = f' {units}' if units else ''
  ax.text(
    0.02, 0.95,
    f"|{label}| Mean : {stats['mean']:.3e}{suffix}\n"
    f"|{label}| RMS  : {stats['rms']:.3e}{suffix}\n"
    f"|{label}| Max  : {stats['max']:.3e}{suffix}",
    transform         = ax.transAxes,
    fontsize          = 9,
    verticalalignment = 'top',
    bbox              = dict(boxstyle='round', facecolor='white', alpha=0.8),
  )
