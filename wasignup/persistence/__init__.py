"""Persistence backends."""
