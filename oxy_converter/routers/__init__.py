"""
Routers module - API endpoint handlers organized by feature.

- convert: HTML conversion, preview and batch endpoints
"""
