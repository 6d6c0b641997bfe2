"""Emission capability checks."""
