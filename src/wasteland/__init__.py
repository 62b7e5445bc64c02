"""Wasteland Traders: a deterministic single-player barter economy."""

__version__ = "0.1.0"
