"""Roadside places: route sampling, distance filtering and place normalization."""

__version__ = "0.1.0"
