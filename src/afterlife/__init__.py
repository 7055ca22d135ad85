"""Shadow Afterlife: a week-by-week survival narrative engine."""

__version__ = "0.3.0"
