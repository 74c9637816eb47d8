"""Core planning engine: time model, day rules, trim and fill."""
