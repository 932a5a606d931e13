"""Trip Navigator: location-aware trip planning backend."""

__version__ = "1.0.0"
