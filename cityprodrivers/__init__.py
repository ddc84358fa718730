"""City Pro Drivers: driver-hire portal backend."""

__version__ = "1.0.0"
