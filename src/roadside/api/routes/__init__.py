"""Route group exports."""

from . import distance, geocode, health, places, routes

__all__ = ["routes", "distance", "places", "geocode", "health"]
