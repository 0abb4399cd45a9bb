"""
Series Propagation Runner
=========================

Builds a series propagator from a run configuration, executes it and converts
the sampled histories into result dictionaries.
"""
from types import SimpleNamespace

from kepler_propagator.model.body                    import Body
from kepler_propagator.model.root_solvers            import NewtonRaphson
from kepler_propagator.propagation.kepler_propagator import KeplerPropagator
from kepler_propagator.propagation.result            import build_result
from kepler_propagator.propagation.series_propagator import SeriesPropagator
from kepler_propagator.utility.time_helper           import format_time_offset


def build_series_propagator(
  config : SimpleNamespace,
) -> SeriesPropagator:
  """
  Configure a series propagator (root solver, bodies, central bodies,
  epochs) from a configuration built by build_config.
  """
  kepler_propagator = KeplerPropagator()
  kepler_propagator.set_newton_raphson(NewtonRaphson(tol=config.tol, max_iter=config.max_iter))

  series_propagator = SeriesPropagator()
  series_propagator.set_propagator(kepler_propagator)
  series_propagator.set_series_propagation_start(config.time_o)
  series_propagator.set_series_propagation_end(config.time_f)
  series_propagator.set_fixed_output_interval(config.interval)

  for body_config in config.bodies:
    body = Body(body_config.name)
    series_propagator.set_initial_state(body, body_config.initial_state, body_config.central_body)

  return series_propagator


def run_series_propagation(
  config : SimpleNamespace,
) -> tuple[SeriesPropagator, dict]:
  """
  Run a series propagation for every configured body.

  Input:
  ------
    config : SimpleNamespace
      Configuration from build_config.

  Output:
  -------
    series_propagator : SeriesPropagator
      Completed series propagator holding the histories.
    results : dict[str, dict]
      Result dictionary per body name (see build_result).

  Raises:
  -------
    PropagationError
      Any configuration or propagation failure; no partial results are
      returned.
  """
  series_propagator = build_series_propagator(config)

  print("\nSeries Propagation")
  print(f"  Configuration")
  print(f"    Timespan")
  print(f"      Initial  : {format_time_offset(config.time_o)} ({config.time_o:.6f} s)")
  print(f"      Final    : {format_time_offset(config.time_f)} ({config.time_f:.6f} s)")
  print(f"      Interval : {config.interval} s")
  print(f"      Samples  : {series_propagator.number_of_samples}")
  print(f"    Solver")
  print(f"      Newton-Raphson : tol = {config.tol:.3e} rad, max_iter = {config.max_iter}")
  print(f"    Bodies : {len(config.bodies)}")
  for body_config in config.bodies:
    print(f"      {body_config.name} about {body_config.central_body.name}")

  series_propagator.execute()
  print(f"  Status : {series_propagator.status.value}")

  results = {}
  for body_config in config.bodies:
    history = series_propagator.get_history(body_config.name)
    results[body_config.name] = build_result(history, body_config.central_body, body_config.name)

  return series_propagator, results
