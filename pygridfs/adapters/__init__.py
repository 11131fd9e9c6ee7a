"""Adapters exposing PyGridFS to users."""
