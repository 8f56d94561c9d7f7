"""Test suite for the Animap backend."""
