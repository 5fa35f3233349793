"""
Configuration Export App

Exposes administrator-selected configuration objects through read-only
API endpoints:
- Allow-list of exportable configuration names (admin managed)
- Raw export of a single allowed configuration object
- Cache tags so every cached export goes stale when the allow-list changes
"""
