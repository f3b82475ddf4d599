"""Pawns-and-knights chess variant: move interpreter and Monte Carlo search."""

__version__ = "0.1.0"
