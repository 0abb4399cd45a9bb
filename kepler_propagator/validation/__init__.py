"""
Validation Package
==================

Test suite and comparison metrics for the Kepler propagator.

Modules:
--------
- metrics                : History comparison and two-body invariant drift
- test_state             : Unit tests for states and bodies
- test_orbit_converter   : Tests for Cartesian / Keplerian conversions
- test_root_solvers      : Tests for Newton-Raphson and Kepler's equation solvers
- test_kepler_propagator : Tests for single-step Kepler propagation
- test_history           : Tests for propagation histories
- test_series_propagator : Tests for fixed-interval series propagation
- test_loader            : Tests for YAML and benchmark file loading
- test_configuration     : Tests for run configuration and command-line parsing
- test_metrics           : Tests for comparison metrics
- test_regression        : End-to-end runs of the reference scenario

Usage:
------
Run all tests:
  python -m pytest kepler_propagator/validation/ -v

Run a specific test module:
  python -m pytest kepler_propagator/validation/test_series_propagator.py -v

Run a specific test class:
  python -m pytest kepler_propagator/validation/test_series_propagator.py::TestLifecycle -v
"""
