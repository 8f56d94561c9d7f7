"""Router exports for the Animap API."""
from . import episodes, health, mappings

__all__ = ["episodes", "health", "mappings"]
