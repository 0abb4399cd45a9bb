"""
Unit Tests for Loader Module
============================

Tests for YAML configuration loading and benchmark trajectory files.

Tests:
------
TestLoadYamlFile
  - test_mapping_loaded              : top-level mapping is returned as a dict
  - test_empty_file                  : an empty file loads as an empty dict
  - test_missing_file                : FileNotFoundError for an absent file
  - test_non_mapping_raises          : a top-level list raises ValueError

TestBenchmarkHistory
  - test_rows_keyed_by_interval      : row k is stored at epoch_o + k * interval
  - test_unit_conversion             : km columns are converted to m
  - test_comments_and_blank_lines    : '#' lines and blank lines are skipped
  - test_bad_row_reports_line        : malformed rows raise ValueError naming the line
  - test_invalid_interval            : non-positive interval raises ValueError
  - test_write_then_load             : write_history output loads back into the same history

Usage:
------
  python -m pytest kepler_propagator/validation/test_loader.py -v
"""
import pytest
import numpy as np

from kepler_propagator.input.loader        import load_benchmark_history, load_yaml_file, write_history
from kepler_propagator.model.constants     import CONVERTER
from kepler_propagator.propagation.history import PropagationHistory


BENCHMARK_ROWS_KM = """\
# time [s]  x y z [km]  vx vy vz [km/s]
0.0     6750.0  0.0     0.0  0.0      8.0595973215  0.0

3600.0  -1000.5 6500.25 0.0  -7.9     -1.2          0.0
7200.0  -6000.0 -2000.0 0.0  2.5      -7.5          0.0
"""


class TestLoadYamlFile:

  def test_mapping_loaded(self, tmp_path):
    filepath = tmp_path / 'config.yaml'
    filepath.write_text("name: asterix\ntimespan: [0, 86400]\n")
    assert load_yaml_file(filepath) == {'name': 'asterix', 'timespan': [0, 86400]}

  def test_empty_file(self, tmp_path):
    filepath = tmp_path / 'empty.yaml'
    filepath.write_text("")
    assert load_yaml_file(filepath) == {}

  def test_missing_file(self, tmp_path):
    with pytest.raises(FileNotFoundError):
      load_yaml_file(tmp_path / 'absent.yaml')

  def test_non_mapping_raises(self, tmp_path):
    filepath = tmp_path / 'list.yaml'
    filepath.write_text("- 1\n- 2\n")
    with pytest.raises(ValueError):
      load_yaml_file(filepath)


class TestBenchmarkHistory:

  def test_rows_keyed_by_interval(self, tmp_path):
    filepath = tmp_path / 'benchmark.dat'
    filepath.write_text(BENCHMARK_ROWS_KM)

    history = load_benchmark_history(filepath, 3600.0)
    assert history.epochs == [0.0, 3600.0, 7200.0]

    shifted = load_benchmark_history(filepath, 60.0, epoch_o=100.0)
    assert shifted.epochs == [100.0, 160.0, 220.0]

  def test_unit_conversion(self, tmp_path):
    filepath = tmp_path / 'benchmark.dat'
    filepath.write_text(BENCHMARK_ROWS_KM)

    history = load_benchmark_history(filepath, 3600.0, m_per_unit=CONVERTER.M_PER_KM)
    assert np.allclose(history[0.0].state, [6.75e6, 0.0, 0.0, 0.0, 8059.5973215, 0.0])
    assert np.allclose(history[3600.0].pos_vec, [-1000.5e3, 6500.25e3, 0.0])

  def test_comments_and_blank_lines(self, tmp_path):
    filepath = tmp_path / 'benchmark.dat'
    filepath.write_text("\n# header\n\n" + BENCHMARK_ROWS_KM + "\n\n")
    assert len(load_benchmark_history(filepath, 3600.0)) == 3

  def test_bad_row_reports_line(self, tmp_path):
    filepath = tmp_path / 'benchmark.dat'
    filepath.write_text("0.0 1 2 3 4 5 6\n60.0 1 2 3 4 5\n")
    with pytest.raises(ValueError, match=':2:'):
      load_benchmark_history(filepath, 60.0)

    filepath.write_text("0.0 1 2 3 4 5 6\n60.0 1 2 three 4 5 6\n")
    with pytest.raises(ValueError, match=':2:'):
      load_benchmark_history(filepath, 60.0)

  def test_invalid_interval(self, tmp_path):
    filepath = tmp_path / 'benchmark.dat'
    filepath.write_text(BENCHMARK_ROWS_KM)
    with pytest.raises(ValueError):
      load_benchmark_history(filepath, 0.0)
    with pytest.raises(FileNotFoundError):
      load_benchmark_history(tmp_path / 'absent.dat', 60.0)

  def test_write_then_load(self, tmp_path, asterix_initial_state, asterix_central_body, universal_variable_benchmark_history):
    history  = universal_variable_benchmark_history(asterix_initial_state.state, asterix_central_body.gp, 0.0, 7200.0, 600.0)
    filepath = write_history(history, tmp_path / 'files' / 'history.dat', unit_per_m=CONVERTER.KM_PER_M)
    assert filepath.exists()

    loaded = load_benchmark_history(filepath, 600.0, m_per_unit=CONVERTER.M_PER_KM)
    assert isinstance(loaded, PropagationHistory)
    assert loaded.epochs == history.epochs
    for epoch, state in history.items():
      assert np.allclose(loaded[epoch].state, state.state, rtol=1e-14, atol=1e-9)
