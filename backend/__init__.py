"""Animap backend packages."""
