"""Costbook - a personal expense tracker with currency-converted reports."""

__version__ = "0.1.0"
