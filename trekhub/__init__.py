"""TrekHub: trek listings behind session-token authentication."""

__version__ = "1.0.0"
