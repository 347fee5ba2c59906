"""multa: spaced-repetition drills for the multiplication tables."""

__version__ = "0.3.0"
