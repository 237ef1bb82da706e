"""ticklist - Personal task tracker with a plain-text task file."""

__version__ = "0.1.0"
