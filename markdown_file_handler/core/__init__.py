"""
Core business logic module.

Contains the exception hierarchy, the job tracker and runner, and the
background job variants.
"""
