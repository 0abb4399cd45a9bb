"""
Orbit Model Package
===================

States, orbital elements, element conversion and Kepler's equation solvers.
"""
