"""
Two-Body Kepler Propagator
==========================

Closed-form two-body orbit propagation: Cartesian ↔ Keplerian conversion,
Kepler's equation solvers, single-step Kepler propagation and fixed-interval
series propagation.
"""

from .model.body                      import Body, CentralBody
from .model.errors                    import (
  PropagationError,
  DegenerateOrbitError,
  ConvergenceError,
  ConfigurationError,
  UnknownBodyError,
  InvalidStateError,
)
from .model.orbit_converter           import KeplerianElements, OrbitConverter, OrbitRegime
from .model.root_solvers              import KeplerSolver, NewtonRaphson
from .model.state                     import State
from .propagation.history             import PropagationHistory
from .propagation.kepler_propagator   import KeplerPropagator, propagate_state
from .propagation.series_propagator   import SeriesPropagator, SeriesPropagatorStatus

__version__ = '0.1.0'

__all__ = [
  'Body',
  'CentralBody',
  'PropagationError',
  'DegenerateOrbitError',
  'ConvergenceError',
  'ConfigurationError',
  'UnknownBodyError',
  'InvalidStateError',
  'KeplerianElements',
  'OrbitConverter',
  'OrbitRegime',
  'KeplerSolver',
  'NewtonRaphson',
  'State',
  'PropagationHistory',
  'KeplerPropagator',
  'propagate_state',
  'SeriesPropagator',
  'SeriesPropagatorStatus',
]
