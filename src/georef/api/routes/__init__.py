"""Route group exports."""

from . import agenda, health, patients, routes

__all__ = ["agenda", "health", "patients", "routes"]
