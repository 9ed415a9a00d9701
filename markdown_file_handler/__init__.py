"""
Markdown file handler for OneDrive and SharePoint.

Preview, edit and save markdown files stored in a cloud drive, and run
PDF conversion and zip compression as tracked background jobs.
"""

__version__ = "0.1.0"
