"""
Client Module

Dashboard-facing entry points for the data layer.

This module provides:
- YAML-based client configuration
- ApiClient facade (query builder factory + session token)
- A process-wide default client
- CLI for inspecting and editing collections
"""

__version__ = "0.1.0"
