"""
Shared runtime helpers: settings, logging, and table definitions.
"""
