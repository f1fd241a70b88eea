"""
Boundary layer for external system integrations.

Handles all interactions with external systems: the database, upload
files on disk and the LLM/embedding providers.
"""
