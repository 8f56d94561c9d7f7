"""Animap API: AniList id to catalog episode list service."""
from .app import create_app

__all__ = ["create_app"]
