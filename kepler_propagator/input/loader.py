import yaml
import numpy as np

from pathlib import Path
from typing  import Union

from kepler_propagator.model.state         import State
from kepler_propagator.propagation.history import PropagationHistory


def load_yaml_file(
  filepath : Union[str, Path],
) -> dict:
  """
  Load a YAML file into a dictionary.

  Input:
  ------
    filepath : str | Path
      Path to the YAML file.

  Output:
  -------
    data : dict
      Parsed file content (empty dict for an empty file).
  """
  filepath = Path(filepath)
  if not filepath.exists():
    raise FileNotFoundError(f"Configuration file not found: {filepath}")

  with open(filepath, 'r') as f:
    data = yaml.safe_load(f)

  if data is None:
    return {}
  if not isinstance(data, dict):
    raise ValueError(f"Configuration file {filepath} must contain a mapping at the top level")
  return data


def load_benchmark_history(
  filepath   : Union[str, Path],
  interval   : float,
  m_per_unit : float = 1.0,
  epoch_o    : float = 0.0,
) -> PropagationHistory:
  """
  Load benchmark trajectory data.

  Input:
  ------
    filepath : str | Path
      Whitespace-separated ASCII file. Column 1 is elapsed time [s], columns
      2-7 are the Cartesian state.
    interval : float
      Output interval [s]. Row k is stored at epoch epoch_o + k * interval.
    m_per_unit : float
      Factor applied to the six state columns (e.g. CONVERTER.M_PER_KM for a
      file in km and km/s).
    epoch_o : float
      Epoch of the first row [s].

  Output:
  -------
    history : PropagationHistory
      Benchmark states keyed by epoch_o plus row index times interval.

  Notes:
  ------
    The time column is read but not used as the key; rows are assumed to be
    sampled at the fixed output interval. Blank lines and lines starting with
    '#' are skipped.
  """
  if not interval > 0.0:
    raise ValueError(f"Benchmark output interval must be positive. Got: {interval}")

  filepath = Path(filepath)
  if not filepath.exists():
    raise FileNotFoundError(f"Benchmark data file not found: {filepath}")

  history   = PropagationHistory()
  row_index = 0
  with open(filepath, 'r') as f:
    for line_number, line in enumerate(f, start=1):
      stripped = line.strip()
      if not stripped or stripped.startswith('#'):
        continue

      columns = stripped.split()
      if len(columns) < 1 + State.SIZE:
        raise ValueError(f"{filepath}:{line_number}: expected {1 + State.SIZE} columns, found {len(columns)}")
      try:
        values = np.array([float(column) for column in columns[1:1 + State.SIZE]])
      except ValueError as e:
        raise ValueError(f"{filepath}:{line_number}: {e}") from e

      history.insert(epoch_o + row_index * interval, State(values * m_per_unit))
      row_index += 1

  return history


def write_history(
  history    : PropagationHistory,
  filepath   : Union[str, Path],
  unit_per_m : float = 1.0,
) -> Path:
  """
  Write a propagation history in the benchmark row format.

  Input:
  ------
    history : PropagationHistory
      History to write.
    filepath : str | Path
      Output file path; parent folders are created.
    unit_per_m : float
      Factor applied to the six state columns (e.g. CONVERTER.KM_PER_M).

  Output:
  -------
    filepath : Path
      Path of the written file.
  """
  filepath = Path(filepath)
  filepath.parent.mkdir(parents=True, exist_ok=True)

  with open(filepath, 'w') as f:
    for epoch, state in history.items():
      components = ' '.join(f"{value:>24.16e}" for value in state.state * unit_per_m)
      f.write(f"{epoch:>16.6f} {components}\n")

  return filepath
