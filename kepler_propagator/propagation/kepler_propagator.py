"""
Kepler Propagator
=================

Closed-form two-body propagation of a Cartesian state: the state is converted
to classical orbital elements, the mean anomaly is advanced linearly in time,
Kepler's equation is solved for the new anomaly and the elements are converted
back to a Cartesian state.
"""
from typing import Optional

from kepler_propagator.model.body            import Body, CentralBody
from kepler_propagator.model.errors          import ConfigurationError, UnknownBodyError
from kepler_propagator.model.orbit_converter import OrbitConverter, OrbitRegime, wrap_to_2pi
from kepler_propagator.model.root_solvers    import KeplerSolver, NewtonRaphson
from kepler_propagator.model.state           import State


def propagate_state(
  state         : State,
  gp            : float,
  elapsed_time  : float,
  kepler_solver : Optional[KeplerSolver] = None,
) -> State:
  """
  Propagate a Cartesian state along its two-body orbit.

  Input:
  ------
    state : State
      Cartesian state at the reference epoch [m, m/s].
    gp : float
      Gravitational parameter of the central body [m³/s²].
    elapsed_time : float
      Time since the reference epoch [s]; negative values propagate backward.
    kepler_solver : KeplerSolver, optional
      Solver for Kepler's equation (default: KeplerSolver()).

  Output:
  -------
    state_f : State
      Cartesian state at the reference epoch + elapsed_time [m, m/s].

  Raises:
  -------
    DegenerateOrbitError
      The input state does not define an orbit.
    ConvergenceError
      Kepler's equation could not be solved within the iteration budget.
  """
  if kepler_solver is None:
    kepler_solver = KeplerSolver()

  # Initial elements
  elements = OrbitConverter.to_keplerian(state, gp)
  if elapsed_time == 0.0:
    return state.copy()

  # Advance mean anomaly
  mean_motion = elements.mean_motion(gp)
  ma_o        = OrbitConverter.ta_to_ma(elements.ta, elements.ecc)
  ma_f        = ma_o + mean_motion * elapsed_time
  if elements.regime is OrbitRegime.ELLIPTIC:
    ma_f = wrap_to_2pi(ma_f)

  # Solve Kepler's equation and rebuild the state
  ta_f = kepler_solver.ma_to_ta(ma_f, elements.ecc)
  return OrbitConverter.to_cartesian(elements.with_true_anomaly(ta_f), gp)


class KeplerPropagator:
  """
  Two-body Kepler propagator with a registry of bodies and their central
  bodies.

  The Kepler-equation solver is injected; propagate() is a pure function of
  (state, central body, elapsed time) and never mutates the body.
  """
  def __init__(
    self,
    kepler_solver : Optional[KeplerSolver] = None,
  ):
    self.kepler_solver   = kepler_solver if kepler_solver is not None else KeplerSolver()
    self._bodies         : dict[str, Body]        = {}
    self._central_bodies : dict[str, CentralBody] = {}

  def set_newton_raphson(
    self,
    root_solver : NewtonRaphson,
  ) -> None:
    """
    Replace the root finder used for Kepler's equation.
    """
    self.kepler_solver = KeplerSolver(root_solver)

  def add_body(
    self,
    body : Body,
  ) -> None:
    """
    Register a body for propagation. Registering the same body again is a
    no-op; a different body with the same name is rejected.
    """
    registered = self._bodies.get(body.name)
    if registered is not None and registered is not body:
      raise ValueError(f"Duplicate body name: {body.name}")
    self._bodies[body.name] = body

  def set_central_body(
    self,
    body         : Body,
    central_body : CentralBody,
  ) -> None:
    """
    Associate a central body with a body, registering the body if needed.
    """
    self.add_body(body)
    self._central_bodies[body.name] = central_body

  def has_body(
    self,
    body : Body,
  ) -> bool:
    return self._bodies.get(body.name) is body

  @property
  def bodies(self) -> list[Body]:
    return list(self._bodies.values())

  def get_central_body(
    self,
    body : Body,
  ) -> CentralBody:
    """
    Central body associated with body.

    Raises:
    -------
      UnknownBodyError
        The body was never registered.
      ConfigurationError
        The body has no central body.
    """
    if not self.has_body(body):
      raise UnknownBodyError(f"Body '{body.name}' is not registered with the Kepler propagator")
    central_body = self._central_bodies.get(body.name)
    if central_body is None:
      raise ConfigurationError(f"No central body set for body '{body.name}'")
    return central_body

  def propagate(
    self,
    body         : Body,
    central_body : Optional[CentralBody],
    elapsed_time : float,
  ) -> State:
    """
    State of body after elapsed_time [s] around central_body.

    Raises:
    -------
      ConfigurationError
        No central body given or body has no current state.
    """
    if central_body is None:
      raise ConfigurationError(f"No central body set for body '{body.name}'")
    if body.state is None:
      raise ConfigurationError(f"Body '{body.name}' has no state to propagate")
    return propagate_state(body.state, central_body.gp, elapsed_time, self.kepler_solver)

  def propagate_body(
    self,
    body         : Body,
    elapsed_time : float,
  ) -> State:
    """
    Propagate a registered body around its registered central body.
    """
    return self.propagate(body, self.get_central_body(body), elapsed_time)
