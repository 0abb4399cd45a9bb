import numpy as np

from pathlib  import Path
from datetime import datetime
from types    import SimpleNamespace
from typing   import Optional, Union

from kepler_propagator.input.loader        import load_yaml_file
from kepler_propagator.model.body          import CentralBody
from kepler_propagator.model.constants     import CONVERTER, NUMERICS
from kepler_propagator.model.state         import State
from kepler_propagator.utility.time_helper import parse_duration


# Defaults for every input argument
DEFAULTS = {
  'config_filepath'     : None,
  'body_name'           : 'satellite',
  'initial_state'       : None,
  'units'               : 'm',
  'central_body'        : 'EARTH',
  'gp'                  : None,
  'timespan'            : None,
  'interval'            : None,
  'tol'                 : NUMERICS.KEPLER_TOLERANCE,
  'max_iter'            : NUMERICS.KEPLER_MAX_ITER,
  'output_folderpath'   : None,
  'benchmark_filepath'  : None,
  'benchmark_units'     : 'm',
  'benchmark_tolerance' : 1e-6,
  'plot'                : False,
}


def load_config_file(
  filepath : Union[str, Path],
) -> dict:
  """
  Read a YAML scenario file. Unknown top-level keys are rejected.
  """
  data    = load_yaml_file(filepath)
  known   = {
    'name', 'initial_state', 'units', 'central_body', 'gp', 'timespan', 'interval',
    'solver', 'benchmark', 'output_folderpath', 'plot', 'bodies',
  }
  unknown = sorted(set(data) - known)
  if unknown:
    raise ValueError(f"Unknown keys in configuration file {filepath}: {unknown}")
  return data


def unit_to_meters(
  units : str,
) -> float:
  """
  Meters per length unit for a unit name ('m', 'km', 'au'). Velocities use the
  same length unit per second.
  """
  key = units.strip().lower()
  if key not in CONVERTER.M_PER_UNIT:
    raise ValueError(f"Unsupported units '{units}'. Supported: {list(CONVERTER.M_PER_UNIT.keys())}")
  return CONVERTER.M_PER_UNIT[key]


def build_central_body(
  central_body : Optional[str]   = None,
  gp           : Optional[float] = None,
) -> CentralBody:
  """
  Central body from a predefined name, or a custom one when gp is given.
  """
  if gp is not None:
    name = central_body.strip().upper() if central_body else 'CUSTOM'
    return CentralBody(name=name, gp=float(gp))
  return CentralBody.from_name(central_body or DEFAULTS['central_body'])


def build_body_config(
  name                : str,
  initial_state       : list,
  units               : str             = 'm',
  central_body        : Optional[str]   = None,
  gp                  : Optional[float] = None,
  benchmark_filepath  : Optional[str]   = None,
  benchmark_units     : str             = 'm',
  benchmark_tolerance : float           = 1e-6,
  base_folderpath     : Optional[Path]  = None,
) -> SimpleNamespace:
  """
  Normalize the configuration of one propagated body.

  Input:
  ------
    name : str
      Body identifier.
    initial_state : list
      Six state components in the given units.
    units : str
      Length unit of the state ('m', 'km', 'au'); velocities per second.
    central_body : str | None
      Predefined central body name (default EARTH).
    gp : float | None
      Custom gravitational parameter [m³/s²]; overrides the predefined value.
    benchmark_filepath : str | None
      Benchmark data file to compare against.
    benchmark_units : str
      Length unit of the benchmark file.
    benchmark_tolerance : float
      Allowed summed absolute difference per sample, in benchmark units.
    base_folderpath : Path | None
      Folder that relative benchmark paths are resolved against.

  Output:
  -------
    body_config : SimpleNamespace
      Body configuration with the initial state in SI units.
  """
  if initial_state is None:
    raise ValueError(f"Initial state is required for body '{name}'")
  if len(initial_state) != State.SIZE:
    raise ValueError(f"Initial state of body '{name}' requires {State.SIZE} components, received {len(initial_state)}")

  m_per_unit = unit_to_meters(units)

  # Resolve benchmark file
  benchmark_path = None
  if benchmark_filepath is not None:
    benchmark_path = Path(benchmark_filepath)
    if not benchmark_path.is_absolute() and base_folderpath is not None:
      benchmark_path = base_folderpath / benchmark_path

  return SimpleNamespace(
    name                  = name,
    units                 = units,
    initial_state         = State(np.array(initial_state, dtype=float) * m_per_unit),
    central_body          = build_central_body(central_body, gp),
    benchmark_filepath    = benchmark_path,
    benchmark_units       = benchmark_units,
    benchmark_m_per_unit  = unit_to_meters(benchmark_units),
    benchmark_tolerance   = float(benchmark_tolerance),
  )


def setup_paths(
  output_folderpath : Optional[Union[str, Path]] = None,
  create_folders    : bool                       = True,
) -> dict:
  """
  Set up output folders for a run.

  Input:
  ------
    output_folderpath : str | Path | None
      Root output folder (default: ./output).
    create_folders : bool
      Create the folders on disk.

  Output:
  -------
    paths : dict
      Output, timestamp, figures and files folders and the log filepath.
  """
  output_folderpath    = Path(output_folderpath) if output_folderpath is not None else Path.cwd() / 'output'
  timestamp_str        = datetime.now().strftime("%Y%m%d_%H%M%S")
  timestamp_folderpath = output_folderpath / timestamp_str
  figures_folderpath   = timestamp_folderpath / 'figures'
  files_folderpath     = timestamp_folderpath / 'files'
  log_filepath         = files_folderpath / 'output.log'

  if create_folders:
    figures_folderpath.mkdir(parents=True, exist_ok=True)
    files_folderpath.mkdir(parents=True, exist_ok=True)

  return {
    'output_folderpath'    : output_folderpath,
    'timestamp_folderpath' : timestamp_folderpath,
    'figures_folderpath'   : figures_folderpath,
    'files_folderpath'     : files_folderpath,
    'log_filepath'         : log_filepath,
  }


def build_config(
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
  create_folders      : bool                       = True,
) -> SimpleNamespace:
  """
  Parse, validate, and set up input parameters for a series propagation.

  Values passed as arguments override values read from the YAML file at
  config_filepath, which override DEFAULTS.

  YAML layout:
  ------------
    name: asterix
    central_body: earth          # or gp: 3.986004418e14
    initial_state: [6750.0, 0.0, 0.0, 0.0, 8.0595973215, 0.0]
    units: km
    timespan: [0.0, 86400.0]     # seconds since propagation start
    interval: 3600.0
    solver:
      tol: 1.0e-12
      max_iter: 100
    benchmark:
      filepath: two_body_kepler_data.dat
      units: km
      tolerance: 1.0e-6
    output_folderpath: output
    plot: false

  A 'bodies' list of entries with the per-body keys (name, initial_state,
  units, central_body, gp, benchmark) replaces the single top-level body.

  Output:
  -------
    config : SimpleNamespace
      Configuration object containing parsed and calculated propagation
      parameters.
  """
  # Load configuration file
  file_data       = {}
  base_folderpath = None
  if config_filepath is not None:
    file_data       = load_config_file(config_filepath)
    base_folderpath = Path(config_filepath).parent

  solver_data    = file_data.get('solver') or {}
  benchmark_data = file_data.get('benchmark') or {}

  # Track which values the user set (argument or file)
  user_set = {}

  def resolve(key, argument, file_value):
    if argument is not None:
      user_set[key] = True
      return argument
    if file_value is not None:
      user_set[key] = True
      return file_value
    user_set[key] = False
    return DEFAULTS[key]

  body_name           = resolve('body_name',           body_name,           file_data.get('name'))
  initial_state       = resolve('initial_state',       initial_state,       file_data.get('initial_state'))
  units               = resolve('units',               units,               file_data.get('units'))
  central_body        = resolve('central_body',        central_body,        file_data.get('central_body'))
  gp                  = resolve('gp',                  gp,                  file_data.get('gp'))
  timespan            = resolve('timespan',            timespan,            file_data.get('timespan'))
  interval            = resolve('interval',            interval,            file_data.get('interval'))
  tol                 = resolve('tol',                 tol,                 solver_data.get('tol'))
  max_iter            = resolve('max_iter',            max_iter,            solver_data.get('max_iter'))
  output_folderpath   = resolve('output_folderpath',   output_folderpath,   file_data.get('output_folderpath'))
  benchmark_filepath  = resolve('benchmark_filepath',  benchmark_filepath,  benchmark_data.get('filepath'))
  benchmark_units     = resolve('benchmark_units',     benchmark_units,     benchmark_data.get('units'))
  benchmark_tolerance = resolve('benchmark_tolerance', benchmark_tolerance, benchmark_data.get('tolerance'))
  plot                = resolve('plot',                plot,                file_data.get('plot'))
  user_set['config_filepath'] = config_filepath is not None

  # Validate solver settings
  if not float(tol) > 0.0:
    raise ValueError(f"Solver tolerance must be positive. Got: {tol}")
  if int(max_iter) < 1:
    raise ValueError(f"Solver iteration budget must be at least 1. Got: {max_iter}")

  # Validate timespan and interval
  if timespan is None or len(timespan) != 2:
    raise ValueError("Timespan requires exactly 2 values: START END (seconds)")
  if interval is None:
    raise ValueError("Fixed output interval is required")
  time_o   = parse_duration(timespan[0])
  time_f   = parse_duration(timespan[1])
  interval = parse_duration(interval)

  # Relative output folder in the YAML file is relative to the file
  if output_folderpath is not None and base_folderpath is not None and file_data.get('output_folderpath') == output_folderpath:
    if not Path(output_folderpath).is_absolute():
      output_folderpath = base_folderpath / output_folderpath

  # Bodies
  if file_data.get('bodies') and initial_state is None:
    bodies = []
    for entry in file_data['bodies']:
      entry_benchmark = entry.get('benchmark') or {}
      bodies.append(build_body_config(
        name                = entry.get('name', f"body_{len(bodies)}"),
        initial_state       = entry.get('initial_state'),
        units               = entry.get('units', units),
        central_body        = entry.get('central_body', central_body),
        gp                  = entry.get('gp', gp),
        benchmark_filepath  = entry_benchmark.get('filepath'),
        benchmark_units     = entry_benchmark.get('units', benchmark_units),
        benchmark_tolerance = entry_benchmark.get('tolerance', benchmark_tolerance),
        base_folderpath     = base_folderpath,
      ))
  else:
    bodies = [build_body_config(
      name                = body_name,
      initial_state       = initial_state,
      units               = units,
      central_body        = central_body,
      gp                  = gp,
      benchmark_filepath  = benchmark_filepath,
      benchmark_units     = benchmark_units,
      benchmark_tolerance = benchmark_tolerance,
      base_folderpath     = base_folderpath,
    )]

  names = [body.name for body in bodies]
  if len(set(names)) != len(names):
    raise ValueError(f"Duplicate body names in configuration: {names}")

  # Set up output paths
  paths = setup_paths(output_folderpath, create_folders)

  return SimpleNamespace(
    # Store original input values for print_configuration
    config_filepath   = config_filepath,
    inputs            = {
      'config_filepath'     : config_filepath,
      'body_name'           : body_name,
      'initial_state'       : initial_state,
      'units'               : units,
      'central_body'        : central_body,
      'gp'                  : gp,
      'timespan'            : [time_o, time_f],
      'interval'            : interval,
      'tol'                 : tol,
      'max_iter'            : max_iter,
      'output_folderpath'   : output_folderpath,
      'benchmark_filepath'  : benchmark_filepath,
      'benchmark_units'     : benchmark_units,
      'benchmark_tolerance' : benchmark_tolerance,
      'plot'                : plot,
    },
    user_set          = user_set,
    # Parsed and calculated values
    bodies               = bodies,
    time_o               = time_o,
    time_f               = time_f,
    delta_time_s         = time_f - time_o,
    interval             = interval,
    tol                  = float(tol),
    max_iter             = int(max_iter),
    plot                 = bool(plot),
    output_folderpath    = paths['output_folderpath'],
    timestamp_folderpath = paths['timestamp_folderpath'],
    figures_folderpath   = paths['figures_folderpath'],
    files_folderpath     = paths['files_folderpath'],
    log_filepath         = paths['log_filepath'],
  )


def print_input_configuration(
  config : SimpleNamespace,
) -> None:
  """
  Print the input configuration in a formatted table.
  """
  headers = ['Argument', 'Value', 'Default', 'User Set']
  rows    = []
  for name, value in config.inputs.items():
    default = DEFAULTS[name]
    if isinstance(value, (list, tuple)):
      value = ' '.join(str(v) for v in value)
    rows.append([
      name,
      str(value) if value is not None else "None",
      str(default) if default is not None else "None",
      str(config.user_set.get(name, False)),
    ])

  # Calculate column widths: max of header and all values, plus 4 for spacing
  min_spacing = 4
  col_widths  = []
  for col_idx in range(len(headers)):
    max_len = len(headers[col_idx])
    for row in rows:
      max_len = max(max_len, len(row[col_idx]))
    col_widths.append(max_len + min_spacing)

  # Print table
  print("\nInput Configuration")
  print("  " + "".join(h.ljust(col_widths[i]) for i, h in enumerate(headers)))
  print("  " + "".join(("-" * (col_widths[i] - min_spacing)).ljust(col_widths[i]) for i in range(len(headers))))
  for row in rows:
    print("  " + "".join(row[col_idx].ljust(col_widths[col_idx]) for col_idx in range(len(row))))


def print_paths(
  config : SimpleNamespace,
) -> None:
  print("\nPaths and Files Setup")
  print(f"  Output Folderpath      : {config.output_folderpath}")
  print(f"    Timestamp Folderpath : <output_folderpath>/{config.timestamp_folderpath.relative_to(config.output_folderpath)}")
  print(f"    Figures Folderpath   : <output_folderpath>/{config.figures_folderpath.relative_to(config.output_folderpath)}")
  print(f"    Files Folderpath     : <output_folderpath>/{config.files_folderpath.relative_to(config.output_folderpath)}")
  print(f"    Log Filepath         : <output_folderpath>/{config.log_filepath.relative_to(config.output_folderpath)}")


def print_configuration(
  config : SimpleNamespace,
) -> None:
  """
  Print the complete configuration (input arguments, bodies and paths).
  """
  print_input_configuration(config)

  print("\nBodies")
  for body in config.bodies:
    print(f"  {body.name}")
    print(f"    Central Body : {body.central_body.name} (GP = {body.central_body.gp:.9e} m³/s²)")
    print(f"    Position     : {body.initial_state.x:>19.12e}  {body.initial_state.y:>19.12e}  {body.initial_state.z:>19.12e} m")
    print(f"    Velocity     : {body.initial_state.xdot:>19.12e}  {body.initial_state.ydot:>19.12e}  {body.initial_state.zdot:>19.12e} m/s")
    if body.benchmark_filepath is not None:
      print(f"    Benchmark    : {body.benchmark_filepath} ({body.benchmark_units})")

  print_paths(config)
