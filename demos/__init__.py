"""Demonstration programs built on the public hub API."""
