"""Logging setup for PyGridFS."""
