import warnings
import numpy as np

from dataclasses import dataclass, field
from enum        import Enum
from typing      import Optional

from kepler_propagator.model.constants import NUMERICS
from kepler_propagator.model.errors    import DegenerateOrbitError
from kepler_propagator.model.state     import State


def wrap_to_2pi(
  angle : float,
) -> float:
  """
  Wrap angle to [0, 2π).
  """
  two_pi  = 2.0 * np.pi
  wrapped = float(angle % two_pi)
  # angle % 2π can round up to 2π for tiny negative angles
  if wrapped >= two_pi:
    wrapped = 0.0
  return wrapped


class OrbitRegime(Enum):
  ELLIPTIC   = 'elliptic'
  PARABOLIC  = 'parabolic'
  HYPERBOLIC = 'hyperbolic'

  @classmethod
  def from_eccentricity(
    cls,
    ecc : float,
  ) -> 'OrbitRegime':
    """
    Classify a conic by eccentricity. Eccentricities within
    NUMERICS.PARABOLIC_TOLERANCE of one are parabolic.
    """
    if abs(ecc - 1.0) < NUMERICS.PARABOLIC_TOLERANCE:
      return cls.PARABOLIC
    if ecc < 1.0:
      return cls.ELLIPTIC
    return cls.HYPERBOLIC


@dataclass(frozen=True)
class KeplerianElements:
  """
  Classical orbital elements.

  Units:
    sma  : semi-major axis [m] (np.inf for parabolic, negative for hyperbolic)
    ecc  : eccentricity [-]
    inc  : inclination [rad]
    aop  : argument of periapsis [rad]
    raan : right ascension of the ascending node [rad]
    ta   : true anomaly [rad]
    slr  : semi-latus rectum [m]; derived from sma and ecc when omitted, required
           for parabolic orbits
  """
  sma  : float
  ecc  : float
  inc  : float
  aop  : float
  raan : float
  ta   : float
  slr  : Optional[float] = field(default=None)

  def __post_init__(self):
    if not np.isfinite(self.ecc) or self.ecc < 0.0:
      raise ValueError(f"Eccentricity must be finite and non-negative. Got: {self.ecc}")
    if not (0.0 <= self.inc <= np.pi):
      raise ValueError(f"Inclination must be in range [0, π] radians. Got: {self.inc}")
    for name in ('aop', 'raan', 'ta'):
      if not np.isfinite(getattr(self, name)):
        raise ValueError(f"{name} must be finite. Got: {getattr(self, name)}")

    regime = OrbitRegime.from_eccentricity(self.ecc)
    if regime is OrbitRegime.ELLIPTIC and not (0.0 < self.sma < np.inf):
      raise ValueError(f"Elliptic orbits require a positive, finite semi-major axis. Got: {self.sma}")
    if regime is OrbitRegime.HYPERBOLIC and not (-np.inf < self.sma < 0.0):
      raise ValueError(f"Hyperbolic orbits require a negative, finite semi-major axis. Got: {self.sma}")

    if self.slr is None:
      if regime is OrbitRegime.PARABOLIC:
        raise ValueError("Parabolic orbits require the semi-latus rectum 'slr'")
      object.__setattr__(self, 'slr', self.sma * (1.0 - self.ecc**2))
    if not (0.0 < self.slr < np.inf):
      raise ValueError(f"Semi-latus rectum must be positive and finite. Got: {self.slr}")

  @property
  def regime(self) -> OrbitRegime:
    return OrbitRegime.from_eccentricity(self.ecc)

  def mean_motion(
    self,
    gp : float,
  ) -> float:
    """
    Mean motion [rad/s]. For parabolic orbits this is the rate of Barker's
    mean anomaly, 2*sqrt(gp/p^3).
    """
    if self.regime is OrbitRegime.PARABOLIC:
      return 2.0 * np.sqrt(gp / self.slr**3)
    return float(np.sqrt(gp / abs(self.sma)**3))

  def period(
    self,
    gp : float,
  ) -> float:
    """
    Orbital period [s]; np.inf for open orbits.
    """
    if self.regime is OrbitRegime.ELLIPTIC:
      return 2.0 * np.pi / self.mean_motion(gp)
    return np.inf

  def with_true_anomaly(
    self,
    ta : float,
  ) -> 'KeplerianElements':
    """
    Copy of these elements with a different true anomaly.
    """
    return KeplerianElements(
      sma  = self.sma,
      ecc  = self.ecc,
      inc  = self.inc,
      aop  = self.aop,
      raan = self.raan,
      ta   = ta,
      slr  = self.slr,
    )

  def to_dict(self) -> dict:
    return {
      'sma'  : self.sma,
      'ecc'  : self.ecc,
      'inc'  : self.inc,
      'raan' : self.raan,
      'aop'  : self.aop,
      'ta'   : self.ta,
      'slr'  : self.slr,
    }


class OrbitConverter:
  """
  Conversion between Cartesian state and classical orbital elements.

  Provides:
  - Cartesian state ↔ classical orbital elements for elliptic, parabolic and
    hyperbolic orbits
  - Anomaly transformations (true, eccentric, mean, hyperbolic, parabolic)
  - Specific energy and period helpers
  """

  @staticmethod
  def to_keplerian(
    state : State,
    gp    : float,
  ) -> KeplerianElements:
    """
    Convert a Cartesian state to classical orbital elements.

    Input:
    ------
      state : State
        Cartesian state [m, m/s].
      gp : float
        Gravitational parameter [m³/s²].

    Output:
    -------
      elements : KeplerianElements
        Classical orbital elements. Angles in [0, 2π) except the true anomaly
        of hyperbolic orbits, which lies between the asymptotes.

    Raises:
    -------
      DegenerateOrbitError
        Zero position, zero velocity, or zero angular momentum.
      ValueError
        Non-positive gravitational parameter.

    Notes:
    ------
      - For circular orbits the periapsis is placed on the ascending node, so
        aop = 0 and ta is the argument of latitude.
      - For equatorial orbits the ascending node is placed on the +x axis, so
        raan = 0.

    Source:
    -------
      Modified from
      Analytical Mechanics of Space Systems, Fourth Edition
      Hanspeter Schaub and John L. Junkins
      DOI: https://doi.org/10.2514/4.105210
    """
    if not gp > 0.0:
      raise ValueError(f"Gravitational parameter must be positive. Got: {gp}")

    eps     = NUMERICS.EPS
    pos_vec = np.asarray(state[0:3], dtype=float)
    vel_vec = np.asarray(state[3:6], dtype=float)

    # Position and velocity magnitudes
    pos_mag = np.linalg.norm(pos_vec)
    vel_mag = np.linalg.norm(vel_vec)
    if pos_mag < eps:
      raise DegenerateOrbitError("Position magnitude is zero; orbit is undefined")
    if vel_mag < eps:
      raise DegenerateOrbitError("Velocity magnitude is zero; orbit is undefined")
    pos_dir = pos_vec / pos_mag

    # Angular momentum vector
    ang_mom_vec = np.cross(pos_vec, vel_vec)
    ang_mom_mag = np.linalg.norm(ang_mom_vec)
    if ang_mom_mag < eps * pos_mag * vel_mag:
      raise DegenerateOrbitError("Angular momentum is zero; rectilinear orbits are not supported")
    ang_mom_dir = ang_mom_vec / ang_mom_mag

    # Eccentricity vector and semi-latus rectum
    ecc_vec = np.cross(vel_vec, ang_mom_vec) / gp - pos_dir
    ecc_mag = float(np.linalg.norm(ecc_vec))
    slr     = ang_mom_mag**2 / gp

    # Semi-major axis from vis-viva
    if OrbitRegime.from_eccentricity(ecc_mag) is OrbitRegime.PARABOLIC:
      sma     = np.inf
      ecc_mag = 1.0
    else:
      sma_inv = 2.0 / pos_mag - vel_mag**2 / gp
      sma     = 1.0 / sma_inv

    # Ascending node direction
    node_vec = np.array([-ang_mom_vec[1], ang_mom_vec[0], 0.0])
    node_mag = np.linalg.norm(node_vec)
    if node_mag > eps * ang_mom_mag:
      node_dir = node_vec / node_mag
    else:
      # Equatorial orbit case
      node_dir = np.array([1.0, 0.0, 0.0])

    # Periapsis direction
    if ecc_mag > eps:
      ecc_dir = ecc_vec / np.linalg.norm(ecc_vec)
    else:
      # Circular orbit case
      ecc_dir = node_dir.copy()

    # Orbit plane orientation angles
    inc  = float(np.arccos(np.clip(ang_mom_dir[2], -1.0, 1.0)))
    raan = wrap_to_2pi(np.arctan2(node_dir[1], node_dir[0]))
    aop  = wrap_to_2pi(np.arctan2(np.dot(np.cross(node_dir, ecc_dir), ang_mom_dir), np.dot(node_dir, ecc_dir)))

    # True anomaly; sin(ta) carries the sign of r·v
    ta = float(np.arctan2(np.dot(np.cross(ecc_dir, pos_dir), ang_mom_dir), np.dot(ecc_dir, pos_dir)))
    if ecc_mag < 1.0:
      ta = wrap_to_2pi(ta)

    return KeplerianElements(
      sma  = float(sma),
      ecc  = ecc_mag,
      inc  = inc,
      aop  = aop,
      raan = raan,
      ta   = ta,
      slr  = float(slr),
    )

  @staticmethod
  def to_cartesian(
    elements : KeplerianElements,
    gp       : float,
  ) -> State:
    """
    Convert classical orbital elements to a Cartesian state.

    Input:
    ------
      elements : KeplerianElements
        Classical orbital elements. The semi-latus rectum carries the orbit
        size, so parabolic orbits need no semi-major axis.
      gp : float
        Gravitational parameter [m³/s²].

    Output:
    -------
      state : State
        Cartesian state [m, m/s].

    Source:
    -------
      Modified from
      Analytical Mechanics of Space Systems, Fourth Edition
      Hanspeter Schaub and John L. Junkins
      DOI: https://doi.org/10.2514/4.105210
    """
    if not gp > 0.0:
      raise ValueError(f"Gravitational parameter must be positive. Got: {gp}")

    # Extract orbital elements
    ecc  = elements.ecc
    inc  = elements.inc
    raan = elements.raan
    aop  = elements.aop
    ta   = elements.ta
    slr  = elements.slr

    denom = 1.0 + ecc * np.cos(ta)
    if denom <= 0.0:
      raise ValueError(f"True anomaly {ta} lies beyond the asymptotes of an orbit with ecc = {ecc}")

    # Position magnitude, true latitude angle, angular momentum magnitude
    pos_mag     = slr / denom          # orbit radius
    theta       = aop + ta             # true latitude angle
    ang_mom_mag = np.sqrt(gp * slr)    # orbit angular momentum magnitude

    # Position vector
    pos_vec = np.array([
      pos_mag * (np.cos(raan) * np.cos(theta) - np.sin(raan) * np.sin(theta) * np.cos(inc)),
      pos_mag * (np.sin(raan) * np.cos(theta) + np.cos(raan) * np.sin(theta) * np.cos(inc)),
      pos_mag * (                                              np.sin(theta) * np.sin(inc))
    ])

    # Velocity vector
    vel_vec = np.array([
      -gp / ang_mom_mag * (np.cos(raan) * (np.sin(theta) + ecc * np.sin(aop)) + np.sin(raan) * (np.cos(theta) + ecc * np.cos(aop)) * np.cos(inc)),
      -gp / ang_mom_mag * (np.sin(raan) * (np.sin(theta) + ecc * np.sin(aop)) - np.cos(raan) * (np.cos(theta) + ecc * np.cos(aop)) * np.cos(inc)),
      -gp / ang_mom_mag * (                                                                   -(np.cos(theta) + ecc * np.cos(aop)) * np.sin(inc))
    ])

    return State.from_pos_vel(pos_vec, vel_vec)

  @staticmethod
  def from_dict(
    coe : dict,
  ) -> KeplerianElements:
    """
    Build elements from a dictionary with keys sma, ecc, inc, raan, aop, ta and
    optionally slr, periapsis or ang_mom_mag (for parabolic orbits).

    Priority cascade for the parabolic size parameter:
      1. 'periapsis' (highest priority)
      2. 'slr'
      3. 'ang_mom_mag' (lowest priority; needs 'gp' in the dict)
    """
    ecc    = coe['ecc']
    regime = OrbitRegime.from_eccentricity(ecc)

    slr = coe.get('slr', None)
    if regime is OrbitRegime.PARABOLIC:
      periapsis_mag = coe.get('periapsis', None)
      ang_mom_mag   = coe.get('ang_mom_mag', None)

      if periapsis_mag is not None:
        if slr is not None or ang_mom_mag is not None:
          warnings.warn("Multiple parabolic size parameters found. Using 'periapsis' (highest priority).", UserWarning)
        slr = 2.0 * periapsis_mag
      elif slr is not None:
        if ang_mom_mag is not None:
          warnings.warn("Multiple parabolic size parameters found. Using 'slr' and ignoring 'ang_mom_mag'.", UserWarning)
      elif ang_mom_mag is not None:
        if 'gp' not in coe:
          raise ValueError("'gp' must be provided together with 'ang_mom_mag'")
        slr = ang_mom_mag**2 / coe['gp']
      else:
        raise ValueError("Either 'periapsis', 'slr', or 'ang_mom_mag' must be provided for parabolic orbits")

    return KeplerianElements(
      sma  = coe.get('sma', np.inf),
      ecc  = ecc,
      inc  = coe['inc'],
      aop  = coe['aop'],
      raan = coe['raan'],
      ta   = coe['ta'],
      slr  = slr,
    )

  @staticmethod
  def pv_to_specific_energy(
    pos_vec : np.ndarray,
    vel_vec : np.ndarray,
    gp      : float,
  ) -> float:
    """
    Calculate specific mechanical energy [m²/s²] from Cartesian state vectors.
    """
    pos_mag = np.linalg.norm(np.asarray(pos_vec).flatten())
    vel_mag = np.linalg.norm(np.asarray(vel_vec).flatten())
    return float(vel_mag**2 / 2.0 - gp / pos_mag)

  @staticmethod
  def specific_energy_to_period(
    specific_energy : float,
    gp              : float,
  ) -> float:
    """
    Calculate orbital period [s] from specific mechanical energy. Returns
    np.inf for parabolic/hyperbolic orbits.
    """
    if specific_energy < 0:
      sma = -gp / (2.0 * specific_energy)
      return float(2.0 * np.pi * np.sqrt(sma**3 / gp))
    return np.inf

  @staticmethod
  def pv_to_period(
    pos_vec : np.ndarray,
    vel_vec : np.ndarray,
    gp      : float,
  ) -> float:
    specific_energy = OrbitConverter.pv_to_specific_energy(pos_vec, vel_vec, gp)
    return OrbitConverter.specific_energy_to_period(specific_energy, gp)

  @staticmethod
  def ea_to_ta(
    ea  : float,
    ecc : float,
  ) -> float:
    """
    Maps eccentric anomaly to true anomaly for elliptic orbits (0 <= ecc < 1).
    """
    if 0 <= ecc < 1:
      return float(2 * np.arctan2(
        np.sqrt(1 + ecc) * np.sin(ea / 2),
        np.sqrt(1 - ecc) * np.cos(ea / 2)
      ))
    raise ValueError(f"ea_to_ta() requires 0 <= ecc < 1, received ecc = {ecc}")

  @staticmethod
  def ta_to_ea(
    ta  : float,
    ecc : float,
  ) -> float:
    """
    Maps true anomaly to eccentric anomaly for elliptic orbits (0 <= ecc < 1).
    """
    if 0 <= ecc < 1:
      return float(2 * np.arctan2(
        np.sqrt(1 - ecc) * np.sin(ta / 2),
        np.sqrt(1 + ecc) * np.cos(ta / 2)
      ))
    raise ValueError(f"ta_to_ea() requires 0 <= ecc < 1, received ecc = {ecc}")

  @staticmethod
  def ea_to_ma(
    ea  : float,
    ecc : float,
  ) -> float:
    """
    Maps eccentric anomaly to mean anomaly (Kepler's equation).
    """
    if 0 <= ecc < 1:
      return float(ea - ecc * np.sin(ea))
    raise ValueError(f"ea_to_ma() requires 0 <= ecc < 1, received ecc = {ecc}")

  @staticmethod
  def ta_to_ha(
    ta  : float,
    ecc : float,
  ) -> float:
    """
    Maps true anomaly to hyperbolic anomaly for hyperbolic orbits (ecc > 1).
    """
    if ecc > 1:
      return float(2 * np.arctanh(
        np.sqrt((ecc - 1) / (ecc + 1)) * np.tan(ta / 2)
      ))
    raise ValueError(f"ta_to_ha() requires ecc > 1, received ecc = {ecc}")

  @staticmethod
  def ha_to_ta(
    ha  : float,
    ecc : float,
  ) -> float:
    """
    Maps hyperbolic anomaly to true anomaly for hyperbolic orbits (ecc > 1).
    """
    if ecc > 1:
      return float(2 * np.arctan(
        np.sqrt((ecc + 1) / (ecc - 1)) * np.tanh(ha / 2)
      ))
    raise ValueError(f"ha_to_ta() requires ecc > 1, received ecc = {ecc}")

  @staticmethod
  def ha_to_mha(
    ha  : float,
    ecc : float,
  ) -> float:
    """
    Maps hyperbolic anomaly to mean hyperbolic anomaly (hyperbolic Kepler's
    equation).
    """
    if ecc > 1:
      return float(ecc * np.sinh(ha) - ha)
    raise ValueError(f"ha_to_mha() requires ecc > 1, received ecc = {ecc}")

  @staticmethod
  def ta_to_pa(
    ta : float,
  ) -> float:
    """
    Maps true anomaly to parabolic anomaly D = tan(ta/2).
    """
    if abs(ta) >= np.pi:
      raise ValueError(f"ta_to_pa() requires |ta| < π, received ta = {ta}")
    return float(np.tan(ta / 2))

  @staticmethod
  def pa_to_ta(
    pa : float,
  ) -> float:
    return float(2 * np.arctan(pa))

  @staticmethod
  def pa_to_ma(
    pa : float,
  ) -> float:
    """
    Maps parabolic anomaly to parabolic mean anomaly (Barker's equation).
    """
    return float(pa + pa**3 / 3)

  @staticmethod
  def ta_to_ma(
    ta  : float,
    ecc : float,
  ) -> float:
    """
    Maps true anomaly to the mean anomaly of the orbit's regime: elliptic mean
    anomaly in [0, 2π), hyperbolic mean anomaly, or Barker's mean anomaly.
    """
    regime = OrbitRegime.from_eccentricity(ecc)
    if regime is OrbitRegime.ELLIPTIC:
      ea = OrbitConverter.ta_to_ea(ta, ecc)
      return wrap_to_2pi(OrbitConverter.ea_to_ma(ea, ecc))
    if regime is OrbitRegime.HYPERBOLIC:
      ha = OrbitConverter.ta_to_ha(ta, ecc)
      return OrbitConverter.ha_to_mha(ha, ecc)
    ta = (ta + np.pi) % (2 * np.pi) - np.pi
    return OrbitConverter.pa_to_ma(OrbitConverter.ta_to_pa(ta))
