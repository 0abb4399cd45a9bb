import numpy as np

from typing import Callable, Optional

from kepler_propagator.model.constants       import NUMERICS
from kepler_propagator.model.errors          import ConvergenceError
from kepler_propagator.model.orbit_converter import OrbitConverter, OrbitRegime, wrap_to_2pi


class NewtonRaphson:
  """
  Newton-Raphson root finder.

  Iterates x_{n+1} = x_n - f(x_n) / f'(x_n) from an initial guess until
  |f(x_n)| < tol. Raises ConvergenceError once max_iter updates have been
  spent, or as soon as the update falls below the floating-point resolution
  of the iterate while |f(x_n)| is still at or above tol.
  """
  def __init__(
    self,
    tol      : float = NUMERICS.KEPLER_TOLERANCE,
    max_iter : int   = NUMERICS.KEPLER_MAX_ITER,
  ):
    if not tol > 0.0:
      raise ValueError(f"Newton-Raphson tolerance must be positive. Got: {tol}")
    if max_iter < 1:
      raise ValueError(f"Newton-Raphson iteration budget must be at least 1. Got: {max_iter}")
    self.tol      = tol
    self.max_iter = int(max_iter)

  def solve(
    self,
    func          : Callable[[float], float],
    func_prime    : Callable[[float], float],
    initial_guess : float,
  ) -> float:
    """
    Find a root of func.

    Input:
    ------
      func : callable
        Function whose root is sought.
      func_prime : callable
        Derivative of func.
      initial_guess : float
        Starting iterate.

    Output:
    -------
      root : float
        Iterate satisfying the tolerance.

    Raises:
    -------
      ConvergenceError
        Iteration budget exhausted, stalled update above tolerance, vanishing
        derivative, or non-finite iterate.
    """
    x        = float(initial_guess)
    residual = func(x)

    for num_iter in range(1, self.max_iter + 1):
      if abs(residual) < self.tol:
        return x

      derivative = func_prime(x)
      if derivative == 0.0 or not np.isfinite(derivative):
        raise ConvergenceError(
          f"Newton-Raphson derivative vanished or diverged at x = {x} (f = {residual})",
          last_iterate = x,
          residual     = residual,
          num_iter     = num_iter,
        )

      delta_x  = -residual / derivative
      x        = x + delta_x
      residual = func(x)

      if not np.isfinite(x) or not np.isfinite(residual):
        raise ConvergenceError(
          f"Newton-Raphson iterate diverged at iteration {num_iter}",
          last_iterate = x,
          residual     = residual,
          num_iter     = num_iter,
        )

      # Update below the resolution of x: no further improvement is possible
      if abs(delta_x) <= 4.0 * np.finfo(float).eps * max(1.0, abs(x)):
        if abs(residual) < self.tol:
          return x
        raise ConvergenceError(
          f"Newton-Raphson stalled at x = {x} with |f| = {abs(residual)} >= tol = {self.tol}",
          last_iterate = x,
          residual     = residual,
          num_iter     = num_iter,
        )

    if abs(residual) < self.tol:
      return x

    raise ConvergenceError(
      f"Newton-Raphson did not converge within {self.max_iter} iterations (x = {x}, f = {residual})",
      last_iterate = x,
      residual     = residual,
      num_iter     = self.max_iter,
    )


class KeplerSolver:
  """
  Kepler's equation solvers for all conic regimes.

  Elliptic and hyperbolic anomalies are found with the injected Newton-Raphson
  root finder; the parabolic case (Barker's equation) is solved in closed form.
  """
  def __init__(
    self,
    root_solver : Optional[NewtonRaphson] = None,
  ):
    self.root_solver = root_solver if root_solver is not None else NewtonRaphson()

  def ma_to_ea(
    self,
    ma  : float,
    ecc : float,
  ) -> float:
    """
    Solve Kepler's equation ma = ea - ecc*sin(ea) for the eccentric anomaly.

    Input:
    ------
      ma : float
        Mean anomaly [rad]
      ecc : float
        Eccentricity (0 <= ecc < 1)

    Output:
    -------
      ea : float
        Eccentric anomaly [rad] in [0, 2π)
    """
    if not (0.0 <= ecc < 1.0):
      raise ValueError(f"ma_to_ea() requires 0 <= ecc < 1, received ecc = {ecc}")

    ma = wrap_to_2pi(ma)

    # Circular orbit: ea = ma exactly
    if ecc == 0.0:
      return ma

    # Initial guess
    if ecc < 0.8:
      ea_o = ma
    else:
      ea_o = np.pi

    ea = self.root_solver.solve(
      func          = lambda ea: ea - ecc * np.sin(ea) - ma,
      func_prime    = lambda ea: 1.0 - ecc * np.cos(ea),
      initial_guess = ea_o,
    )
    return wrap_to_2pi(ea)

  def mha_to_ha(
    self,
    mha : float,
    ecc : float,
  ) -> float:
    """
    Solve the hyperbolic Kepler's equation mha = ecc*sinh(ha) - ha for the
    hyperbolic anomaly.

    Input:
    ------
      mha : float
        Mean hyperbolic anomaly [rad]
      ecc : float
        Eccentricity (ecc > 1)

    Output:
    -------
      ha : float
        Hyperbolic anomaly [rad]

    Source:
    -------
      Initial guess from Danby, Fundamentals of Celestial Mechanics (1988).
    """
    if not ecc > 1.0:
      raise ValueError(f"mha_to_ha() requires ecc > 1, received ecc = {ecc}")

    if mha == 0.0:
      return 0.0

    # Initial guess
    ha_o = np.sign(mha) * np.log(2.0 * abs(mha) / ecc + 1.8)

    return self.root_solver.solve(
      func          = lambda ha: ecc * np.sinh(ha) - ha - mha,
      func_prime    = lambda ha: ecc * np.cosh(ha) - 1.0,
      initial_guess = ha_o,
    )

  @staticmethod
  def ma_to_pa(
    ma : float,
  ) -> float:
    """
    Solve Barker's equation ma = pa + pa^3/3 for the parabolic anomaly in
    closed form (Cardano).
    """
    b    = 1.5 * abs(ma)
    w    = np.cbrt(b + np.sqrt(b * b + 1.0))
    pa   = w - 1.0 / w
    return float(np.copysign(pa, ma))

  def solve(
    self,
    ma  : float,
    ecc : float,
  ) -> float:
    """
    Solve Kepler's equation for the anomaly of the regime selected by ecc:
    eccentric anomaly (elliptic), hyperbolic anomaly (hyperbolic) or parabolic
    anomaly (|ecc - 1| < NUMERICS.PARABOLIC_TOLERANCE).
    """
    if ecc < 0.0:
      raise ValueError(f"Eccentricity must be non-negative, received ecc = {ecc}")

    regime = OrbitRegime.from_eccentricity(ecc)
    if regime is OrbitRegime.ELLIPTIC:
      return self.ma_to_ea(ma, ecc)
    if regime is OrbitRegime.HYPERBOLIC:
      return self.mha_to_ha(ma, ecc)
    return self.ma_to_pa(ma)

  def ma_to_ta(
    self,
    ma  : float,
    ecc : float,
  ) -> float:
    """
    Map mean anomaly to true anomaly through the regime's Kepler equation.
    """
    anomaly = self.solve(ma, ecc)

    regime = OrbitRegime.from_eccentricity(ecc)
    if regime is OrbitRegime.ELLIPTIC:
      return wrap_to_2pi(OrbitConverter.ea_to_ta(anomaly, ecc))
    if regime is OrbitRegime.HYPERBOLIC:
      return OrbitConverter.ha_to_ta(anomaly, ecc)
    return OrbitConverter.pa_to_ta(anomaly)
