"""Graph API client package."""

from .graph_client import GraphClient, GraphResponse, GraphUrlBuilder

__all__ = ["GraphClient", "GraphResponse", "GraphUrlBuilder"]
