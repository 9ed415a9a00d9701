"""
Boundary layer for external system integrations.

Handles all interactions with external systems: the OneDrive / SharePoint REST
API and the access tokens needed to call it.
"""
