"""
Civic Issue Reporter - Python client for the civic issue reporting backend.

Screens (report, admin, home) are headless controllers: they hold per-screen
state, call the REST/socket API, and expose view-model data for any UI.
"""

__version__ = "0.1.0"
