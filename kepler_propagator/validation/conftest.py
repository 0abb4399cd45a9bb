"""
Pytest Configuration and Fixtures
=================================

Shared fixtures for all validation tests, including an independent
universal-variable two-body propagator used as a benchmark for the Kepler
propagator.
"""
import pytest
import numpy as np

from scipy.optimize import newton

from kepler_propagator.model.body            import CentralBody
from kepler_propagator.model.constants       import SOLARSYSTEMCONSTANTS
from kepler_propagator.model.orbit_converter import KeplerianElements, OrbitConverter
from kepler_propagator.model.state           import State
from kepler_propagator.propagation.history   import PropagationHistory


# Gravitational parameter of the reference scenario [m³/s²]
ASTERIX_GP = 3.986004418e14


def stumpff_c(z: float) -> float:
  if z > 1e-8:
    return (1.0 - np.cos(np.sqrt(z))) / z
  if z < -1e-8:
    return (np.cosh(np.sqrt(-z)) - 1.0) / (-z)
  return 1.0 / 2.0 - z / 24.0 + z**2 / 720.0


def stumpff_s(z: float) -> float:
  if z > 1e-8:
    sqrt_z = np.sqrt(z)
    return (sqrt_z - np.sin(sqrt_z)) / sqrt_z**3
  if z < -1e-8:
    sqrt_z = np.sqrt(-z)
    return (np.sinh(sqrt_z) - sqrt_z) / sqrt_z**3
  return 1.0 / 6.0 - z / 120.0 + z**2 / 5040.0


def universal_variable_propagate(
  state        : np.ndarray,
  gp           : float,
  elapsed_time : float,
) -> np.ndarray:
  """
  Two-body propagation with universal variables and Lagrange coefficients.

  Input:
  ------
    state : np.ndarray
      Cartesian state [m, m/s], shape (6,).
    gp : float
      Gravitational parameter [m³/s²].
    elapsed_time : float
      Propagation time [s].

  Output:
  -------
    state_f : np.ndarray
      Cartesian state after elapsed_time, shape (6,).

  Source:
  -------
    Curtis, Orbital Mechanics for Engineering Students, Algorithms 3.3 and 3.4.
  """
  pos_vec_o = np.asarray(state[0:3], dtype=float)
  vel_vec_o = np.asarray(state[3:6], dtype=float)
  if elapsed_time == 0.0:
    return np.concatenate((pos_vec_o, vel_vec_o))

  pos_mag_o = np.linalg.norm(pos_vec_o)
  vel_mag_o = np.linalg.norm(vel_vec_o)
  sqrt_gp   = np.sqrt(gp)
  radial_o  = np.dot(pos_vec_o, vel_vec_o) / pos_mag_o
  alpha     = 2.0 / pos_mag_o - vel_mag_o**2 / gp

  def universal_kepler(chi):
    z = alpha * chi**2
    return (
      pos_mag_o * radial_o / sqrt_gp * chi**2 * stumpff_c(z)
      + (1.0 - alpha * pos_mag_o) * chi**3 * stumpff_s(z)
      + pos_mag_o * chi
      - sqrt_gp * elapsed_time
    )

  def universal_kepler_prime(chi):
    z = alpha * chi**2
    return (
      pos_mag_o * radial_o / sqrt_gp * chi * (1.0 - z * stumpff_s(z))
      + (1.0 - alpha * pos_mag_o) * chi**2 * stumpff_c(z)
      + pos_mag_o
    )

  chi_o = sqrt_gp * abs(alpha) * elapsed_time
  chi   = newton(universal_kepler, chi_o, fprime=universal_kepler_prime, tol=1e-10, rtol=1e-13, maxiter=200)

  # Lagrange coefficients
  z       = alpha * chi**2
  f       = 1.0 - chi**2 / pos_mag_o * stumpff_c(z)
  g       = elapsed_time - chi**3 / sqrt_gp * stumpff_s(z)
  pos_vec = f * pos_vec_o + g * vel_vec_o
  pos_mag = np.linalg.norm(pos_vec)
  f_dot   = sqrt_gp / (pos_mag * pos_mag_o) * (z * stumpff_s(z) - 1.0) * chi
  g_dot   = 1.0 - chi**2 / pos_mag * stumpff_c(z)
  vel_vec = f_dot * pos_vec_o + g_dot * vel_vec_o

  return np.concatenate((pos_vec, vel_vec))


def universal_variable_history(
  state    : np.ndarray,
  gp       : float,
  start    : float,
  end      : float,
  interval : float,
) -> PropagationHistory:
  """
  Benchmark history sampled at start + k*interval, each sample propagated
  directly from the initial state.
  """
  history     = PropagationHistory()
  num_samples = int(np.floor((end - start) / interval + 1e-9)) + 1
  for k in range(num_samples):
    history.insert(start + k * interval, State(universal_variable_propagate(state, gp, k * interval)))
  return history


@pytest.fixture
def earth():
  """Earth as central body."""
  return CentralBody.earth()


@pytest.fixture
def asterix_central_body():
  """Central body of the reference scenario."""
  return CentralBody(name='EARTH', gp=ASTERIX_GP)


@pytest.fixture
def asterix_initial_state():
  """Reference scenario initial state: near-circular equatorial LEO."""
  return State([
    6.75e6,           # x [m]
    0.0,              # y [m]
    0.0,              # z [m]
    0.0,              # vx [m/s]
    8059.5973215,     # vy [m/s]
    0.0,              # vz [m/s]
  ])


@pytest.fixture
def leo_initial_state():
  """Inclined, eccentric LEO initial state for testing."""
  return State([
    6524.834e3,       # x [m]
    6862.875e3,       # y [m]
    6448.296e3,       # z [m]
    4.901327e3,       # vx [m/s]
    5.533756e3,       # vy [m/s]
    -1.976341e3,      # vz [m/s]
  ])


@pytest.fixture
def hyperbolic_initial_state():
  """Earth escape trajectory at periapsis (ecc = 1.5)."""
  gp        = SOLARSYSTEMCONSTANTS.EARTH.GP
  periapsis = 7000e3
  ecc       = 1.5
  vel_mag   = np.sqrt(gp * (1.0 + ecc) / periapsis)
  return State([periapsis, 0.0, 0.0, 0.0, vel_mag * np.cos(0.3), vel_mag * np.sin(0.3)])


@pytest.fixture
def parabolic_initial_state():
  """Earth parabolic trajectory at periapsis."""
  gp        = SOLARSYSTEMCONSTANTS.EARTH.GP
  periapsis = 7000e3
  vel_mag   = np.sqrt(2.0 * gp / periapsis)
  return State([periapsis, 0.0, 0.0, 0.0, vel_mag, 0.0])


@pytest.fixture
def random_elements():
  """
  Generator of seeded random elliptic elements about Earth.
  """
  def generate(num_samples=50, seed=42, ecc_max=0.9):
    rng      = np.random.default_rng(seed)
    elements = []
    for _ in range(num_samples):
      elements.append(KeplerianElements(
        sma  = rng.uniform(6.8e6, 4.2e7),
        ecc  = rng.uniform(0.001, ecc_max),
        inc  = rng.uniform(0.01, np.pi - 0.01),
        aop  = rng.uniform(0.0, 2.0 * np.pi),
        raan = rng.uniform(0.0, 2.0 * np.pi),
        ta   = rng.uniform(0.0, 2.0 * np.pi),
      ))
    return elements
  return generate


@pytest.fixture
def random_states(random_elements):
  """
  Generator of seeded random elliptic Cartesian states about Earth.
  """
  def generate(num_samples=50, seed=42, ecc_max=0.9):
    gp = SOLARSYSTEMCONSTANTS.EARTH.GP
    return [OrbitConverter.to_cartesian(el, gp) for el in random_elements(num_samples, seed, ecc_max)]
  return generate


@pytest.fixture
def universal_variable_benchmark():
  """Independent propagator: (state, gp, elapsed_time) -> state array."""
  return universal_variable_propagate


@pytest.fixture
def universal_variable_benchmark_history():
  """Independent benchmark history: (state, gp, start, end, interval) -> PropagationHistory."""
  return universal_variable_history
