"""lift-scheduler: resistance-training plan generator with progressive overload."""

__version__ = "0.1.0"
