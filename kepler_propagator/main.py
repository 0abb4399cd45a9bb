"""
Two-Body Kepler Series Propagator

Description:
  This script propagates one or more bodies on two-body orbits about their
  central bodies with the closed-form Kepler propagator and samples the
  trajectories at a fixed output interval.

  The script performs the following steps:
  1. Builds the run configuration from command-line arguments and/or a YAML
     scenario file.
  2. Runs the fixed-interval series propagation.
  3. Prints a summary and writes each propagation history to a data file.
  4. Compares each history against a benchmark data file (if given).
  5. Generates and saves plots (if requested).

Usage:

  Argument                     Required   Description
  ---------------------------  --------   --------------------------------------------------
  --config                     No         YAML scenario file
  --name                       No         Name of the propagated body
  --initial-state              Yes*       Initial state X Y Z VX VY VZ (*unless in --config)
  --units                      No         Length unit of the initial state (m, km, au)
  --central-body               No         Predefined central body (default EARTH)
  --gp                         No         Custom gravitational parameter [m³/s²]
  --timespan                   Yes*       Start and end of the series (seconds or e.g. 1d)
  --interval                   Yes*       Fixed output interval (seconds or e.g. 1h)
  --tol                        No         Newton-Raphson tolerance [rad]
  --max-iter                   No         Newton-Raphson iteration budget
  --output-folderpath          No         Root output folder (default ./output)
  --benchmark-filepath         No         Benchmark data file to compare against
  --benchmark-units            No         Length unit of the benchmark file (m, km, au)
  --benchmark-tolerance        No         Allowed summed absolute difference per sample
  --plot                       No         Generate plots

  Example Commands:
    python -m kepler_propagator.main \
      --initial-state 6750 0 0 0 8.0595973215 0 \
      --units km \
      --timespan 0 1d \
      --interval 1h

    kepler-propagate --config scenario.yaml --plot
"""
import sys

from pathlib import Path
from types   import SimpleNamespace
from typing  import Optional, Union

from kepler_propagator.input.cli            import parse_command_line_arguments
from kepler_propagator.input.configuration  import build_config, print_configuration, unit_to_meters
from kepler_propagator.input.loader         import load_benchmark_history, write_history
from kepler_propagator.model.errors         import PropagationError
from kepler_propagator.plot.trajectory      import generate_plots
from kepler_propagator.propagation.history  import PropagationHistory
from kepler_propagator.propagation.runner   import run_series_propagation
from kepler_propagator.utility.logger       import start_logging, stop_logging
from kepler_propagator.utility.printer      import print_comparison_summary, print_history_table, print_results_summary
from kepler_propagator.validation.metrics   import compare_histories


def compare_with_benchmark(
  history     : PropagationHistory,
  body_config : SimpleNamespace,
  time_o      : float,
  interval    : float,
) -> dict:
  """
  Load a body's benchmark file and compare its history against it in the
  benchmark's length unit.

  Input:
  ------
    history : PropagationHistory
      Propagated history [m, m/s].
    body_config : SimpleNamespace
      Body configuration with benchmark_filepath, benchmark_m_per_unit and
      benchmark_tolerance.
    time_o : float
      Series start epoch [s]; epoch of the first benchmark row.
    interval : float
      Fixed output interval [s].

  Output:
  -------
    comparison : dict
      Result of compare_histories.
  """
  benchmark = load_benchmark_history(
    filepath   = body_config.benchmark_filepath,
    interval   = interval,
    m_per_unit = body_config.benchmark_m_per_unit,
    epoch_o    = time_o,
  )
  unit_per_m = 1.0 / body_config.benchmark_m_per_unit
  return compare_histories(
    history.scaled(unit_per_m),
    benchmark.scaled(unit_per_m),
    body_config.benchmark_tolerance,
  )


def main(
  config_filepath     : Optional[Union[str, Path]] = None,
  body_name           : Optional[str]              = None,
  initial_state       : Optional[list]             = None,
  units               : Optional[str]              = None,
  central_body        : Optional[str]              = None,
  gp                  : Optional[float]            = None,
  timespan            : Optional[list]             = None,
  interval            : Optional[float]            = None,
  tol                 : Optional[float]            = None,
  max_iter            : Optional[int]              = None,
  output_folderpath   : Optional[Union[str, Path]] = None,
  benchmark_filepath  : Optional[str]              = None,
  benchmark_units     : Optional[str]              = None,
  benchmark_tolerance : Optional[float]            = None,
  plot                : Optional[bool]             = None,
) -> dict:
  """
  Main function to run a Kepler series propagation.

  This function orchestrates the run. It builds the configuration, starts
  logging, runs the series propagation, prints results, writes history files,
  compares against benchmark files and generates plots.

  Input:
  ------
    See build_config; every argument overrides the scenario file value.

  Output:
  -------
    result : dict
      Result of the first configured body (see build_result) with
      'comparison' when a benchmark was given, plus 'results' holding the
      result of every body by name and 'history_filepaths'. On failure,
      'success' is False and 'message' holds the error.
  """
  # Process inputs and setup
  try:
    config = build_config(
      config_filepath     = config_filepath,
      body_name           = body_name,
      initial_state       = initial_state,
      units               = units,
      central_body        = central_body,
      gp                  = gp,
      timespan            = timespan,
      interval            = interval,
      tol                 = tol,
      max_iter            = max_iter,
      output_folderpath   = output_folderpath,
      benchmark_filepath  = benchmark_filepath,
      benchmark_units     = benchmark_units,
      benchmark_tolerance = benchmark_tolerance,
      plot                = plot,
    )
  except (PropagationError, ValueError, OSError) as e:
    print(f"\n[ERROR] Invalid configuration: {e}")
    return {'success': False, 'message': f"Invalid configuration: {e}"}

  # Start logging to file
  logger = start_logging(config.log_filepath)

  try:
    # Print input configuration and paths
    print_configuration(config)

    # Run series propagation
    try:
      series_propagator, results = run_series_propagation(config)
    except PropagationError as e:
      print(f"\n  [ERROR] Series propagation failed: {e}")
      return {'success': False, 'message': f"Series propagation failed: {e}"}

    success           = True
    messages          = []
    history_filepaths = {}
    for body_config in config.bodies:
      result  = results[body_config.name]
      history = series_propagator.get_history(body_config.name)

      # Display results in the body's input units
      unit_per_m = 1.0 / unit_to_meters(body_config.units)
      print_results_summary(result)
      print_history_table(history, unit_per_m, body_config.units)

      # Write history in the body's input units
      history_filepath = config.files_folderpath / f"{body_config.name.lower().replace(' ', '_')}_history.dat"
      write_history(history, history_filepath, unit_per_m=unit_per_m)
      history_filepaths[body_config.name] = history_filepath
      print(f"\n  History File : <output_folderpath>/{history_filepath.relative_to(config.output_folderpath)}")

      # Compare against benchmark
      if body_config.benchmark_filepath is not None:
        try:
          comparison = compare_with_benchmark(history, body_config, config.time_o, config.interval)
        except (ValueError, OSError) as e:
          print(f"\n  [ERROR] Benchmark comparison for {body_config.name} failed: {e}")
          success = False
          messages.append(f"{body_config.name}: benchmark unavailable ({e})")
          continue
        result['comparison'] = comparison
        print_comparison_summary(comparison, body_config.benchmark_units)
        if not comparison['success']:
          success = False
          messages.append(f"{body_config.name}: {comparison['message']}")

      # Generate plots
      if config.plot:
        generate_plots(
          result             = result,
          figures_folderpath = config.figures_folderpath,
          object_name        = body_config.name,
          comparison         = result.get('comparison'),
          comparison_units   = body_config.benchmark_units,
        )

    # Return the first body's result with all results attached
    first_result = dict(results[config.bodies[0].name])
    first_result['results']           = results
    first_result['history_filepaths'] = history_filepaths
    first_result['success']           = success
    first_result['message']           = "; ".join(messages) if messages else first_result['message']
    return first_result

  finally:
    # Stop logging
    stop_logging(logger)


def cli(
  argv : Optional[list[str]] = None,
) -> int:
  """
  Console entry point. Returns 0 on success, 1 otherwise.
  """
  # Parse command-line arguments
  args = parse_command_line_arguments(argv)

  # Run main function
  result = main(**vars(args))
  return 0 if result['success'] else 1


if __name__ == "__main__":
  sys.exit(cli())
