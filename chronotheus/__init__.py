"""Chronotheus - Prometheus historical data proxy."""

__version__ = "1.0.0"
