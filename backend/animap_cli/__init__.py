"""Typer command line client for the Animap API."""
