"""
Core utilities: geodesic math, errors, validation, logging, metrics and timers.
"""
