"""
Orbit Propagation Package
=========================

Provides closed-form Kepler propagation and fixed-interval series propagation.
"""

from .history           import PropagationHistory
from .kepler_propagator import KeplerPropagator, propagate_state
from .result            import build_result
from .series_propagator import SeriesPropagator, SeriesPropagatorStatus

__all__ = ['PropagationHistory', 'KeplerPropagator', 'propagate_state', 'build_result', 'SeriesPropagator', 'SeriesPropagatorStatus']
