"""Application layer: request-scoped service orchestrators."""
