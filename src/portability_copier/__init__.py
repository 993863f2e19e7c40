"""Copy engine that moves a user's data between online services."""

__version__ = "0.1.0"
