"""
Configuration for the file handler service.

Settings are read from the environment (and .env) with the JOBS_ and GRAPH_
prefixes for the job runner and the drive client.
"""

from markdown_file_handler.configs.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
