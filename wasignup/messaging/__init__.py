"""Outbound messaging platform clients."""
