"""
Series Propagator
=================

Samples the trajectories of registered bodies at a fixed output interval
between a start and an end epoch.

Lifecycle:
  CONFIGURED -> execute() -> RUNNING -> COMPLETED

Any setter called after a completed run discards the histories and returns the
propagator to CONFIGURED. Calling execute() again on a completed run without
reconfiguring raises InvalidStateError.
"""
import numpy as np

from enum   import Enum
from typing import Optional, Union

from kepler_propagator.model.body                    import Body, CentralBody
from kepler_propagator.model.errors                  import ConfigurationError, InvalidStateError, UnknownBodyError
from kepler_propagator.model.state                   import State
from kepler_propagator.propagation.history           import PropagationHistory
from kepler_propagator.propagation.kepler_propagator import KeplerPropagator


class SeriesPropagatorStatus(Enum):
  CONFIGURED = 'configured'
  RUNNING    = 'running'
  COMPLETED  = 'completed'


class SeriesPropagator:
  """
  Fixed-interval series propagation driver.

  Epochs t_k = start + k*interval are sampled for k = 0, 1, ... while t_k does
  not exceed end (an epoch within 1e-9 intervals of end counts as end). Each
  body is stepped from its last sampled state by t_k - t_(k-1); the sample at
  k = 0 is the initial state.
  """
  # Relative slack, in output intervals, for counting the final epoch
  END_EPOCH_SLACK = 1e-9

  def __init__(
    self,
    propagator : Optional[KeplerPropagator] = None,
    start      : float                      = 0.0,
    end        : Optional[float]            = None,
    interval   : Optional[float]            = None,
  ):
    self._propagator     = propagator
    self._start          = float(start)
    self._end            = None if end is None else float(end)
    self._interval       = None if interval is None else float(interval)
    self._bodies         : dict[str, Body]               = {}
    self._initial_states : dict[str, State]              = {}
    self._central_bodies : dict[str, CentralBody]        = {}
    self._histories      : dict[str, PropagationHistory] = {}
    self._status         = SeriesPropagatorStatus.CONFIGURED

  # -- Configuration --------------------------------------------------------

  def _reconfigure(self) -> None:
    if self._status is SeriesPropagatorStatus.RUNNING:
      raise InvalidStateError("Series propagator configuration is frozen while running")
    if self._status is SeriesPropagatorStatus.COMPLETED:
      self._status    = SeriesPropagatorStatus.CONFIGURED
      self._histories = {}
      for name, body in self._bodies.items():
        body.state = self._initial_states[name].copy()

  def set_propagator(
    self,
    propagator : KeplerPropagator,
  ) -> None:
    self._reconfigure()
    self._propagator = propagator

  def set_series_propagation_start(
    self,
    start : float,
  ) -> None:
    self._reconfigure()
    self._start = float(start)

  def set_series_propagation_end(
    self,
    end : float,
  ) -> None:
    self._reconfigure()
    self._end = float(end)

  def set_fixed_output_interval(
    self,
    interval : float,
  ) -> None:
    self._reconfigure()
    self._interval = float(interval)

  def set_initial_state(
    self,
    body         : Body,
    state        : State,
    central_body : Optional[CentralBody] = None,
  ) -> None:
    """
    Register body with its initial state and, optionally, its central body.

    The state is copied; the body's current state is set to the copy.
    """
    self._reconfigure()
    registered = self._bodies.get(body.name)
    if registered is not None and registered is not body:
      raise ValueError(f"Duplicate body name: {body.name}")

    initial_state = state.copy() if isinstance(state, State) else State(state)
    self._bodies[body.name]         = body
    self._initial_states[body.name] = initial_state
    body.state                      = initial_state.copy()
    if central_body is not None:
      self._central_bodies[body.name] = central_body

  def get_propagator(self) -> Optional[KeplerPropagator]:
    return self._propagator

  def get_series_propagation_start(self) -> float:
    return self._start

  def get_series_propagation_end(self) -> Optional[float]:
    return self._end

  def get_fixed_output_interval(self) -> Optional[float]:
    return self._interval

  def get_initial_state(
    self,
    body : Union[Body, str],
  ) -> State:
    return self._initial_states[self._registered_name(body)].copy()

  @property
  def status(self) -> SeriesPropagatorStatus:
    return self._status

  @property
  def bodies(self) -> list[Body]:
    return list(self._bodies.values())

  @property
  def number_of_samples(self) -> int:
    """
    floor((end - start) / interval) + 1 for a valid configuration.
    """
    self._validate_epochs()
    num_intervals = np.floor((self._end - self._start) / self._interval + self.END_EPOCH_SLACK)
    return int(num_intervals) + 1

  @property
  def output_epochs(self) -> list[float]:
    """
    Sample epochs; a final epoch that lands past end within the slack is
    clamped to end.
    """
    epochs = [self._start + k * self._interval for k in range(self.number_of_samples)]
    if epochs[-1] > self._end:
      epochs[-1] = self._end
    return epochs

  # -- Validation -----------------------------------------------------------

  def _validate_epochs(self) -> None:
    if self._end is None:
      raise ConfigurationError("Series propagation end epoch is not set")
    if self._interval is None:
      raise ConfigurationError("Fixed output interval is not set")
    if not (np.isfinite(self._start) and np.isfinite(self._end)):
      raise ConfigurationError(f"Series propagation epochs must be finite (start = {self._start}, end = {self._end})")
    if self._end < self._start:
      raise ConfigurationError(f"Series propagation end ({self._end}) is before start ({self._start})")
    if not (np.isfinite(self._interval) and self._interval > 0.0):
      raise ConfigurationError(f"Fixed output interval must be positive. Got: {self._interval}")

  def _validate(self) -> None:
    if self._propagator is None:
      raise ConfigurationError("No propagator set for series propagation")
    if not self._bodies:
      raise ConfigurationError("No bodies registered for series propagation")
    self._validate_epochs()

    # Hand central bodies to the propagator and confirm every body has one
    for name, body in self._bodies.items():
      if name in self._central_bodies:
        self._propagator.set_central_body(body, self._central_bodies[name])
      elif not self._propagator.has_body(body):
        self._propagator.add_body(body)
      self._propagator.get_central_body(body)

  # -- Execution ------------------------------------------------------------

  def execute(self) -> None:
    """
    Run the series propagation.

    Raises:
    -------
      InvalidStateError
        The run already completed (reconfigure first) or is running.
      ConfigurationError
        Missing propagator, bodies or central bodies; end < start; interval <= 0.
      DegenerateOrbitError, ConvergenceError
        Propagation of a sample failed. All histories of the run are discarded
        and the propagator returns to CONFIGURED.
    """
    if self._status is not SeriesPropagatorStatus.CONFIGURED:
      raise InvalidStateError(f"Cannot execute series propagation in state '{self._status.value}'")

    self._validate()
    epochs = self.output_epochs

    self._status    = SeriesPropagatorStatus.RUNNING
    self._histories = {name: PropagationHistory() for name in self._bodies}
    try:
      for name, body in self._bodies.items():
        body.state = self._initial_states[name].copy()

      epoch_prev = epochs[0]
      for epoch in epochs:
        for name, body in self._bodies.items():
          if epoch != epoch_prev:
            body.state = self._propagator.propagate_body(body, epoch - epoch_prev)
          self._histories[name].insert(epoch, body.state)
        epoch_prev = epoch
    except Exception:
      self._status    = SeriesPropagatorStatus.CONFIGURED
      self._histories = {}
      for name, body in self._bodies.items():
        body.state = self._initial_states[name].copy()
      raise

    self._status = SeriesPropagatorStatus.COMPLETED

  # -- Queries --------------------------------------------------------------

  def _registered_name(
    self,
    body : Union[Body, str],
  ) -> str:
    name = body if isinstance(body, str) else body.name
    if name not in self._bodies:
      raise UnknownBodyError(f"Body '{name}' is not registered with the series propagator")
    return name

  def get_history(
    self,
    body : Union[Body, str],
  ) -> PropagationHistory:
    """
    Copy of the sampled history of a body; changes to it do not reach the
    stored run.

    Raises:
    -------
      UnknownBodyError
        The body was never registered.
      InvalidStateError
        The series propagation has not completed.
    """
    name = self._registered_name(body)
    if self._status is not SeriesPropagatorStatus.COMPLETED:
      raise InvalidStateError("Propagation history is only available after execute() completes")
    return self._histories[name].copy()

  get_propagation_history_at_fixed_output_intervals = get_history
