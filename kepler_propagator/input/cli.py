import sys
import argparse

from typing import Optional

from kepler_propagator.utility.time_helper import parse_duration


def parse_command_line_arguments(
  argv : Optional[list[str]] = None,
) -> argparse.Namespace:
  """
  Parse command-line arguments for the Kepler series propagator.

  Input:
  ------
    argv : list[str] | None
      Arguments to parse (default: sys.argv[1:]).

  Output:
  -------
    args : argparse.Namespace
      Parsed command-line arguments.
  """
  parser = argparse.ArgumentParser(
    prog            = 'kepler-propagate',
    description     = 'Two-body Kepler series propagator',
    formatter_class = argparse.RawDescriptionHelpFormatter,
  )

  # If no arguments provided, print help and exit
  if argv is None:
    argv = sys.argv[1:]
  if len(argv) == 0:
    parser.print_help(sys.stderr)
    sys.exit(1)

  # Scenario file
  parser.add_argument(
    '--config',
    dest     = 'config_filepath',
    type     = str,
    default  = None,
    help     = "YAML scenario file. Command-line values override file values.",
  )

  # Initial state arguments
  parser.add_argument(
    '--name',
    dest     = 'body_name',
    type     = str,
    default  = None,
    help     = "Name of the propagated body (default: satellite).",
  )
  parser.add_argument(
    '--initial-state',
    dest     = 'initial_state',
    type     = float,
    nargs    = 6,
    metavar  = ('X', 'Y', 'Z', 'VX', 'VY', 'VZ'),
    default  = None,
    help     = "Initial Cartesian state in --units and --units per second.",
  )
  parser.add_argument(
    '--units',
    dest     = 'units',
    type     = str,
    choices  = ['m', 'km', 'au'],
    default  = None,
    help     = "Length unit of the initial state (default: m).",
  )

  # Central body arguments
  parser.add_argument(
    '--central-body',
    dest     = 'central_body',
    type     = str,
    default  = None,
    help     = "Predefined central body, e.g. EARTH, MOON, SUN (default: EARTH).",
  )
  parser.add_argument(
    '--gp',
    dest     = 'gp',
    type     = float,
    default  = None,
    help     = "Custom gravitational parameter [m³/s²]. Overrides the central body value.",
  )

  # Time arguments
  parser.add_argument(
    '--timespan',
    dest     = 'timespan',
    type     = parse_duration,
    nargs    = 2,
    metavar  = ('TIME_START', 'TIME_END'),
    default  = None,
    help     = "Start and end of the series, elapsed from the initial state (e.g. '0 1d' or '0 86400').",
  )
  parser.add_argument(
    '--interval',
    dest     = 'interval',
    type     = parse_duration,
    default  = None,
    help     = "Fixed output interval (e.g. '3600' or '1h').",
  )

  # Solver arguments
  parser.add_argument(
    '--tol',
    dest     = 'tol',
    type     = float,
    default  = None,
    help     = "Newton-Raphson tolerance on Kepler's equation residual [rad] (default: 1e-12).",
  )
  parser.add_argument(
    '--max-iter',
    dest     = 'max_iter',
    type     = int,
    default  = None,
    help     = "Newton-Raphson iteration budget (default: 100).",
  )

  # Output arguments
  parser.add_argument(
    '--output-folderpath',
    dest     = 'output_folderpath',
    type     = str,
    default  = None,
    help     = "Root output folder (default: ./output).",
  )
  parser.add_argument(
    '--benchmark-filepath',
    dest     = 'benchmark_filepath',
    type     = str,
    default  = None,
    help     = "Benchmark data file to compare the propagation history against.",
  )
  parser.add_argument(
    '--benchmark-units',
    dest     = 'benchmark_units',
    type     = str,
    choices  = ['m', 'km', 'au'],
    default  = None,
    help     = "Length unit of the benchmark data file (default: m).",
  )
  parser.add_argument(
    '--benchmark-tolerance',
    dest     = 'benchmark_tolerance',
    type     = float,
    default  = None,
    help     = "Allowed summed absolute difference per sample, in benchmark units (default: 1e-6).",
  )
  parser.add_argument(
    '--plot',
    dest     = 'plot',
    action   = 'store_true',
    default  = None,
    help     = "Generate trajectory plots (disabled by default).",
  )

  # Parse arguments
  args = parser.parse_args(argv)

  if args.config_filepath is None and args.initial_state is None:
    parser.error("either --config or --initial-state is required")

  return args
