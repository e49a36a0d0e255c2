"""University venue booking portal."""

__version__ = "1.0.0"
