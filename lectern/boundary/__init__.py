"""
Boundary layer for external system integrations.

Handles all interactions with external systems (database, vector store,
file storage). Provides adapters for infrastructure dependencies.
"""
