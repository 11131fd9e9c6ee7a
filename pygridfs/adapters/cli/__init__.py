"""Command line adapter."""
