"""Core domain logic: document processing, retrieval and session tracking."""
