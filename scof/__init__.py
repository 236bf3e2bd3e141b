"""scof: score data model, marking codec and cursor navigation."""

__version__ = "0.1.0"
