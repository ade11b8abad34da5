"""PlainFit: local fitness log with categories, exercise types and sets."""

__version__ = "1.0.0"
