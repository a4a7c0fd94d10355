"""Application core - settings and security helpers."""
