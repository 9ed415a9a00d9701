"""Drive REST API client and URL helpers."""

from markdown_file_handler.boundary.graph.graph_client import GraphClient, RemoteContentClient

__all__ = ["GraphClient", "RemoteContentClient"]
