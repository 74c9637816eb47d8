"""rack-session: fit a strength session to the minutes you have, then run it."""

__version__ = "0.4.0"
